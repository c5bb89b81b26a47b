"""Login, logout and identity routes: /api/auth/*."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from admin.routes.years import list_years_newest_first
from shared import repositories
from shared.auth import Session, check_credentials, get_session, issue_session_token
from shared.config import AUTH_COOKIE_NAME, COOKIE_SECURE, SESSION_TTL_DAYS
from shared.models import LoginRequest
from shared.repositories import without_secrets

logger = logging.getLogger(__name__)

router = APIRouter()


def _current_year() -> dict | None:
    years = list_years_newest_first()
    if not years:
        return None
    latest = years[0]
    return {"id": latest["id"], "name": latest["name"], "createdAt": latest["createdAt"]}


@router.post("/api/auth/login")
def login(credentials: LoginRequest, response: Response):
    user = repositories.users.find_by_email(credentials.email)
    # Same message for unknown email and wrong password
    if not check_credentials(user, credentials.password):
        logger.warning("Failed login for %s", credentials.email.lower())
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    current_year = _current_year()
    token = issue_session_token(user, current_year)
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        max_age=SESSION_TTL_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="strict",
        path="/",
    )
    logger.info("User %s logged in", user["email"])
    return {"user": without_secrets(user), "token": token, "currentYear": current_year}


@router.get("/api/auth/me")
def me(session: Session = Depends(get_session)):
    user = repositories.users.get(session.user_id)
    current_year = None
    if session.current_year_id:
        current_year = {"id": session.current_year_id, "name": session.current_year_name}
    return {"user": without_secrets(user), "currentYear": current_year}


@router.post("/api/auth/logout")
def logout(response: Response):
    response.delete_cookie(key=AUTH_COOKIE_NAME, path="/")
    return {"message": "Logged out"}
