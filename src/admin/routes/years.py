"""Year routes: the tenant root every other record hangs off."""

from fastapi import APIRouter, Depends, status

from admin.routes.common import conflict
from shared import repositories
from shared.auth import Session, get_session
from shared.models import YearCreate

router = APIRouter()


def list_years_newest_first() -> list[dict]:
    return sorted(repositories.years.list(), key=lambda year: year["name"], reverse=True)


@router.get("/api/years")
def list_years():
    return list_years_newest_first()


@router.get("/api/public/years")
def list_public_years():
    return [{"id": year["id"], "name": year["name"]} for year in list_years_newest_first()]


@router.post("/api/years", status_code=status.HTTP_201_CREATED)
def create_year(year: YearCreate, session: Session = Depends(get_session)):
    name = year.name.strip()
    if any(existing["name"] == name for existing in repositories.years.list()):
        raise conflict(f"Year '{name}' already exists")
    return repositories.years.create({"name": name, "createdBy": session.user_id})
