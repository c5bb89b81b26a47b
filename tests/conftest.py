"""
Shared pytest fixtures.

Environment variables are set at module level, before any src/ imports,
so config.py reads the correct test values when fixtures are first evaluated.
"""

import os

# Must be set before any shared.* imports.
# Use setdefault so externally-passed env vars (integration tests) take precedence.
os.environ.setdefault("ENV", "test")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_SESSION_TOKEN", "testing")
os.environ.setdefault("AWS_REGION", "us-west-2")
os.environ.setdefault("DYNAMODB_CONTENT_TABLE", "content")
os.environ.setdefault("DYNAMODB_USERS_TABLE", "users")
os.environ.setdefault("S3_BUCKET", "acd-test-media")
os.environ.setdefault("JWT_SECRET", "test-secret-32-chars-exactly-ok!")

from datetime import datetime, timedelta, timezone
from functools import lru_cache

import boto3
import pytest
from fastapi.testclient import TestClient
from jose import jwt
from moto import mock_aws

TEST_SECRET = os.environ["JWT_SECRET"]
TEST_BUCKET = os.environ["S3_BUCKET"]
TEST_PASSWORD = "correct-horse-battery"


# ── Token helpers ───────────────────────────────────────────────────────────────

def make_token(
    user: dict,
    secret: str = TEST_SECRET,
    expired: bool = False,
    year: dict | None = None,
) -> str:
    now = datetime.now(timezone.utc)
    exp = now + (timedelta(seconds=-1) if expired else timedelta(hours=1))
    claims = {
        "userId": user["id"],
        "email": user["email"],
        "role": user["role"],
        "currentYearId": year["id"] if year else None,
        "currentYearName": year["name"] if year else None,
        "iat": now,
        "exp": exp,
    }
    return jwt.encode(claims, secret, algorithm="HS256")


def auth_headers(user: dict) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user)}"}


# ── Data helpers ────────────────────────────────────────────────────────────────

@lru_cache(maxsize=1)
def _test_password_hash() -> str:
    from shared.auth import hash_password  # noqa: PLC0415

    return hash_password(TEST_PASSWORD)


def create_user(email: str, role: str = "EDITOR", name: str = "Test User") -> dict:
    from shared import repositories  # noqa: PLC0415

    return repositories.users.create(
        {
            "name": name,
            "email": email,
            "role": role,
            "avatar": None,
            "passwordHash": _test_password_hash(),
        }
    )


def create_year(name: str = "2025") -> dict:
    from shared import repositories  # noqa: PLC0415

    return repositories.years.create({"name": name})


# ── AWS fixtures ────────────────────────────────────────────────────────────────

@pytest.fixture()
def aws_env():
    """Start moto mock, create DynamoDB tables + S3 bucket, yield, teardown."""
    with mock_aws():
        from shared.db import create_tables  # noqa: PLC0415

        create_tables()

        s3 = boto3.client("s3", region_name="us-west-2")
        s3.create_bucket(
            Bucket=TEST_BUCKET,
            CreateBucketConfiguration={"LocationConstraint": "us-west-2"},
        )

        yield


@pytest.fixture()
def client(aws_env):
    """FastAPI TestClient with mocked AWS. Import app inside fixture so boto3
    clients are always created inside the mock_aws context."""
    from admin.handler import app  # noqa: PLC0415

    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture()
def admin_user(aws_env) -> dict:
    return create_user("admin@example.com", role="ADMIN", name="Admin")


@pytest.fixture()
def editor_user(aws_env) -> dict:
    return create_user("editor@example.com", role="EDITOR", name="Editor")


@pytest.fixture()
def admin_headers(admin_user) -> dict[str, str]:
    return auth_headers(admin_user)


@pytest.fixture()
def editor_headers(editor_user) -> dict[str, str]:
    return auth_headers(editor_user)


@pytest.fixture()
def year(aws_env) -> dict:
    return create_year("2025")
