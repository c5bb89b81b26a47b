"""General settings routes (RSVP, event date, call-for links): one record per year."""

from fastapi import APIRouter, Depends, status

from admin.routes.common import conflict, not_found, require_changes, require_year
from shared import repositories
from shared.auth import Session, get_session
from shared.models import SettingsCreate, SettingsUpdate

router = APIRouter()


@router.get("/api/settings")
def get_settings(yearId: str):
    settings = repositories.settings.get(yearId)
    if settings is None:
        raise not_found("Settings")
    return settings


@router.post("/api/settings", status_code=status.HTTP_201_CREATED)
def create_settings(settings: SettingsCreate, _: Session = Depends(get_session)):
    require_year(settings.yearId)
    created = repositories.settings.create(
        settings.yearId, settings.model_dump(mode="json", exclude={"yearId"})
    )
    if created is None:
        raise conflict("Settings already exist for this year")
    return created


@router.put("/api/settings")
def upsert_settings(update: SettingsUpdate, _: Session = Depends(get_session)):
    changes = update.changes()
    year_id = changes.pop("yearId")
    require_changes(changes)
    require_year(year_id)
    return repositories.settings.upsert(year_id, changes)


@router.delete("/api/settings")
def delete_settings(yearId: str, _: Session = Depends(get_session)):
    if repositories.settings.delete(yearId) is None:
        raise not_found("Settings")
    return {"yearId": yearId, "message": "Settings deleted"}
