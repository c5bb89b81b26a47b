"""Sponsor routes: GET (public) and POST / PUT / DELETE /api/sponsors."""

from fastapi import APIRouter, Depends, status

from admin.routes.common import get_or_404, not_found, require_changes, require_year
from shared import repositories
from shared.auth import Session, get_session
from shared.models import SponsorCreate, SponsorUpdate
from shared.s3 import delete_media_urls

router = APIRouter()


@router.get("/api/sponsors")
def list_sponsors(yearId: str):
    return repositories.sponsors.list(yearId)


@router.get("/api/sponsors/{sponsor_id}")
def get_sponsor(sponsor_id: str):
    return get_or_404(repositories.sponsors, sponsor_id, "Sponsor")


@router.post("/api/sponsors", status_code=status.HTTP_201_CREATED)
def create_sponsor(sponsor: SponsorCreate, _: Session = Depends(get_session)):
    require_year(sponsor.yearId)
    return repositories.sponsors.create(sponsor.model_dump(mode="json"))


@router.put("/api/sponsors/{sponsor_id}")
def update_sponsor(sponsor_id: str, update: SponsorUpdate, _: Session = Depends(get_session)):
    changes = require_changes(update.changes())
    sponsor = repositories.sponsors.update(sponsor_id, changes)
    if sponsor is None:
        raise not_found("Sponsor")
    return sponsor


@router.delete("/api/sponsors/{sponsor_id}")
def delete_sponsor(sponsor_id: str, _: Session = Depends(get_session)):
    sponsor = repositories.sponsors.delete(sponsor_id)
    if sponsor is None:
        raise not_found("Sponsor")
    delete_media_urls([sponsor.get("logoUrl")])
    return {"id": sponsor_id, "message": "Sponsor deleted"}
