"""Contact info routes: one record per year. Same shape as /api/venue."""

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
from shared.models import ContactCreate, ContactUpdate

router = APIRouter()


@router.get("/api/contact")
def get_contact(yearId: str):
    contact = repositories.contacts.get(yearId)
    if contact is None:
        raise not_found("Contact info")
    return contact


@router.post("/api/contact", status_code=status.HTTP_201_CREATED)
def create_contact(contact: ContactCreate, _: Session = Depends(get_session)):
    require_year(contact.yearId)
    created = repositories.contacts.create(
        contact.yearId, contact.model_dump(mode="json", exclude={"yearId"})
    )
    if created is None:
        raise conflict("Contact info already exists for this year")
    return created


@router.put("/api/contact")
def upsert_contact(update: ContactUpdate, _: Session = Depends(get_session)):
    changes = update.changes()
    year_id = changes.pop("yearId")
    require_changes(changes)
    require_year(year_id)
    require_fields_for_new(repositories.contacts.get(year_id), changes, ("email",))
    return repositories.contacts.upsert(year_id, changes)


@router.delete("/api/contact")
def delete_contact(yearId: str, _: Session = Depends(get_session)):
    if repositories.contacts.delete(yearId) is None:
        raise not_found("Contact info")
    return {"yearId": yearId, "message": "Contact info deleted"}
