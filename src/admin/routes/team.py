"""
Organizer and volunteer routes: GET (public) and POST / PUT / DELETE
/api/organizers and /api/volunteers.

Both lists are grouped by role (alphabetical), newest first within a role.
"""

from fastapi import APIRouter, Depends, status

from admin.routes.common import get_or_404, not_found, require_changes, require_year
from shared import repositories
from shared.auth import Session, get_session
from shared.models import OrganizerCreate, OrganizerUpdate, VolunteerCreate, VolunteerUpdate
from shared.s3 import delete_media_urls

router = APIRouter()


def _by_role(items: list[dict]) -> list[dict]:
    # Items arrive newest first; the sort is stable so that order holds per role
    return sorted(items, key=lambda item: item.get("role") or "")


# ── Organizers ─────────────────────────────────────────────────────────────────

@router.get("/api/organizers")
def list_organizers(yearId: str):
    return _by_role(repositories.organizers.list(yearId))


@router.get("/api/organizers/{organizer_id}")
def get_organizer(organizer_id: str):
    return get_or_404(repositories.organizers, organizer_id, "Organizer")


@router.post("/api/organizers", status_code=status.HTTP_201_CREATED)
def create_organizer(organizer: OrganizerCreate, _: Session = Depends(get_session)):
    require_year(organizer.yearId)
    return repositories.organizers.create(organizer.model_dump(mode="json"))


@router.put("/api/organizers/{organizer_id}")
def update_organizer(
    organizer_id: str, update: OrganizerUpdate, _: Session = Depends(get_session)
):
    changes = require_changes(update.changes())
    organizer = repositories.organizers.update(organizer_id, changes)
    if organizer is None:
        raise not_found("Organizer")
    return organizer


@router.delete("/api/organizers/{organizer_id}")
def delete_organizer(organizer_id: str, _: Session = Depends(get_session)):
    organizer = repositories.organizers.delete(organizer_id)
    if organizer is None:
        raise not_found("Organizer")
    delete_media_urls([organizer.get("photoUrl")])
    return {"id": organizer_id, "message": "Organizer deleted"}


# ── Volunteers ─────────────────────────────────────────────────────────────────

@router.get("/api/volunteers")
def list_volunteers(yearId: str):
    return _by_role(repositories.volunteers.list(yearId))


@router.get("/api/volunteers/{volunteer_id}")
def get_volunteer(volunteer_id: str):
    return get_or_404(repositories.volunteers, volunteer_id, "Volunteer")


@router.post("/api/volunteers", status_code=status.HTTP_201_CREATED)
def create_volunteer(volunteer: VolunteerCreate, _: Session = Depends(get_session)):
    require_year(volunteer.yearId)
    return repositories.volunteers.create(volunteer.model_dump(mode="json"))


@router.put("/api/volunteers/{volunteer_id}")
def update_volunteer(
    volunteer_id: str, update: VolunteerUpdate, _: Session = Depends(get_session)
):
    changes = require_changes(update.changes())
    volunteer = repositories.volunteers.update(volunteer_id, changes)
    if volunteer is None:
        raise not_found("Volunteer")
    return volunteer


@router.delete("/api/volunteers/{volunteer_id}")
def delete_volunteer(volunteer_id: str, _: Session = Depends(get_session)):
    volunteer = repositories.volunteers.delete(volunteer_id)
    if volunteer is None:
        raise not_found("Volunteer")
    delete_media_urls([volunteer.get("photoUrl")])
    return {"id": volunteer_id, "message": "Volunteer deleted"}
