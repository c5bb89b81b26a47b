"""
Venue routes: one record per year, addressed by yearId.

    GET    /api/venue?yearId=...   public
    POST   /api/venue              create; 409 if the year already has one
    PUT    /api/venue              partial update, creating the record if needed
    DELETE /api/venue?yearId=...
"""

from fastapi import APIRouter, Depends, status

from admin.routes.common import (
    conflict,
    not_found,
    require_changes,
    require_fields_for_new,
    require_year,
)
from shared import repositories
from shared.auth import Session, get_session
from shared.models import VenueCreate, VenueUpdate
from shared.s3 import delete_media_urls

router = APIRouter()

_REQUIRED_ON_CREATE = ("name", "city", "region")


@router.get("/api/venue")
def get_venue(yearId: str):
    venue = repositories.venues.get(yearId)
    if venue is None:
        raise not_found("Venue")
    return venue


@router.post("/api/venue", status_code=status.HTTP_201_CREATED)
def create_venue(venue: VenueCreate, _: Session = Depends(get_session)):
    require_year(venue.yearId)
    data = venue.model_dump(mode="json", exclude={"yearId"})
    created = repositories.venues.create(venue.yearId, data)
    if created is None:
        raise conflict("Venue already exists for this year")
    return created


@router.put("/api/venue")
def upsert_venue(update: VenueUpdate, _: Session = Depends(get_session)):
    changes = update.changes()
    year_id = changes.pop("yearId")
    require_changes(changes)
    require_year(year_id)
    require_fields_for_new(repositories.venues.get(year_id), changes, _REQUIRED_ON_CREATE)
    return repositories.venues.upsert(year_id, changes)


@router.delete("/api/venue")
def delete_venue(yearId: str, _: Session = Depends(get_session)):
    venue = repositories.venues.delete(yearId)
    if venue is None:
        raise not_found("Venue")
    delete_media_urls(venue.get("images") or [])
    return {"yearId": yearId, "message": "Venue deleted"}
