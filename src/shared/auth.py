"""
Session authentication for dashboard routes.

Login issues an HS256-signed JWT that the browser carries in an HTTP-only
cookie:

    Cookie: auth-token=<token>

Scripts and API clients may send the same token in the Authorization header
instead:

    Authorization: Bearer <token>

The token carries userId, email, role and the year that was current at login.
Every request re-resolves the user from the users table, so deleted users and
role changes take effect immediately.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache

import bcrypt
from fastapi import Cookie, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from shared import repositories
from shared.config import AUTH_COOKIE_NAME, JWT_SECRET, SESSION_TTL_DAYS

logger = logging.getLogger(__name__)

_security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Session:
    """The acting identity, injected into route handlers."""

    user_id: str
    email: str
    role: str
    current_year_id: str | None = None
    current_year_name: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "ADMIN"


# ── Passwords ─────────────────────────────────────────────────────────────────

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=12)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in storage
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("not-a-real-password")


def check_credentials(user: dict | None, password: str) -> bool:
    """
    Verify a login attempt. Unknown emails still pay for a bcrypt comparison
    so response time does not reveal whether the account exists.
    """
    if user is None:
        verify_password(password, _dummy_hash())
        return False
    return verify_password(password, user.get("passwordHash", ""))


# ── Tokens ────────────────────────────────────────────────────────────────────

def _secret() -> str:
    if not JWT_SECRET:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="JWT_SECRET not configured",
        )
    return JWT_SECRET


def issue_session_token(user: dict, current_year: dict | None) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "userId": user["id"],
        "email": user["email"],
        "role": user["role"],
        "currentYearId": current_year["id"] if current_year else None,
        "currentYearName": current_year["name"] if current_year else None,
        "iat": now,
        "exp": now + timedelta(days=SESSION_TTL_DAYS),
    }
    return jwt.encode(claims, _secret(), algorithm="HS256")


def decode_session_token(token: str) -> dict:
    try:
        return jwt.decode(token, _secret(), algorithms=["HS256"])
    except ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )


def _decode_first(tokens: list[str]) -> dict:
    """Decode the first valid token; the last one's error is the one raised."""
    for token in tokens[:-1]:
        try:
            return decode_session_token(token)
        except HTTPException:
            continue
    return decode_session_token(tokens[-1])


# ── Dependencies ──────────────────────────────────────────────────────────────

def get_session(
    auth_token: str | None = Cookie(default=None, alias=AUTH_COOKIE_NAME),
    credentials: HTTPAuthorizationCredentials | None = Depends(_security),
) -> Session:
    """
    Dependency injected into every protected route. Returns the caller's Session.

    Tokens are checked before any table is read, so anonymous requests
    are rejected without touching DynamoDB. When both a cookie and a Bearer
    header are sent, the first one that decodes wins.
    """
    tokens = [t for t in (auth_token, credentials.credentials if credentials else None) if t]
    if not tokens:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = _decode_first(tokens)
    user_id = payload.get("userId")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = repositories.users.get(user_id)
    if user is None:
        logger.warning("Rejected token for unknown user %s", user_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return Session(
        user_id=user["id"],
        email=user["email"],
        role=user["role"],
        current_year_id=payload.get("currentYearId"),
        current_year_name=payload.get("currentYearName"),
    )


def require_admin(session: Session = Depends(get_session)) -> Session:
    if not session.is_admin:
        logger.warning("Non-admin %s attempted an admin action", session.email)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return session
