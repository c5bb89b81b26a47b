"""Lookup guards shared by the entity routes."""

from fastapi import HTTPException, status

from shared import repositories


def not_found(label: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")


def get_or_404(repository, item_id: str, label: str) -> dict:
    item = repository.get(item_id)
    if not item:
        raise not_found(label)
    return item


def require_year(year_id: str) -> dict:
    """Year-scoped writes must point at an existing Year."""
    return get_or_404(repositories.years, year_id, "Year")


def require_changes(changes: dict) -> dict:
    if not changes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")
    return changes


def require_fields_for_new(existing: dict | None, changes: dict, fields: tuple[str, ...]) -> None:
    """An upsert that creates the record must carry its required fields."""
    if existing is not None:
        return
    missing = [field for field in fields if changes.get(field) is None]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Missing required fields: {', '.join(missing)}",
        )


def conflict(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)
