"""
User management: admin only.

Password hashes never leave the API; passwords are accepted in plain text on
create/update and stored as bcrypt hashes. Admins cannot delete themselves.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from admin.routes.common import conflict, get_or_404, not_found, require_changes
from shared import repositories
from shared.auth import Session, hash_password, require_admin
from shared.models import UserCreate, UserUpdate
from shared.repositories import without_secrets

logger = logging.getLogger(__name__)

router = APIRouter()


def _email_taken(email: str, user_id: str | None = None) -> bool:
    existing = repositories.users.find_by_email(email)
    return existing is not None and existing["id"] != user_id


@router.get("/api/users")
def list_users(_: Session = Depends(require_admin)):
    return [without_secrets(user) for user in repositories.users.list()]


@router.get("/api/users/{user_id}")
def get_user(user_id: str, _: Session = Depends(require_admin)):
    return without_secrets(get_or_404(repositories.users, user_id, "User"))


@router.post("/api/users", status_code=status.HTTP_201_CREATED)
def create_user(user: UserCreate, session: Session = Depends(require_admin)):
    if _email_taken(user.email):
        raise conflict("A user with this email already exists")

    data = user.model_dump(mode="json", exclude={"password"})
    data["passwordHash"] = hash_password(user.password)
    created = repositories.users.create(data)
    logger.info("User %s created by %s", created["email"], session.email)
    return without_secrets(created)


@router.put("/api/users/{user_id}")
def update_user(user_id: str, update: UserUpdate, _: Session = Depends(require_admin)):
    changes = require_changes(update.changes())

    if "email" in changes and _email_taken(changes["email"], user_id):
        raise conflict("A user with this email already exists")
    if "password" in changes:
        changes["passwordHash"] = hash_password(changes.pop("password"))

    user = repositories.users.update(user_id, changes)
    if user is None:
        raise not_found("User")
    return without_secrets(user)


@router.delete("/api/users/{user_id}")
def delete_user(user_id: str, session: Session = Depends(require_admin)):
    if user_id == session.user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot delete your own account",
        )
    user = repositories.users.delete(user_id)
    if user is None:
        raise not_found("User")
    logger.info("User %s deleted by %s", user["email"], session.email)
    return {"id": user_id, "message": "User deleted"}
