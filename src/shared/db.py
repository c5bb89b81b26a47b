"""DynamoDB resource helpers, update expression builder and table bootstrap."""

import json
import threading
import uuid
from datetime import datetime, timezone
from decimal import Decimal

import boto3

from shared.config import AWS_REGION, CONTENT_TABLE, DYNAMODB_KWARGS, USERS_TABLE

SCOPE_INDEX = "scope-created-index"
EMAIL_INDEX = "email-index"


_local = threading.local()


def boto_session() -> boto3.session.Session:
    """One session per thread; boto3 sessions must not be shared across threads."""
    session = getattr(_local, "session", None)
    if session is None:
        session = _local.session = boto3.session.Session()
    return session


def _dynamodb():
    return boto_session().resource("dynamodb", region_name=AWS_REGION, **DYNAMODB_KWARGS)


def get_content_table():
    return _dynamodb().Table(CONTENT_TABLE)


def get_users_table():
    return _dynamodb().Table(USERS_TABLE)


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_timestamp(value: str) -> datetime:
    """Parse a stored ISO-8601 timestamp; naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def new_id() -> str:
    return uuid.uuid4().hex


def to_dynamo(data: dict) -> dict:
    """Convert floats to Decimal; boto3 refuses native floats."""
    return json.loads(json.dumps(data), parse_float=Decimal)


def build_update_expression(
    data: dict, defaults: dict | None = None
) -> tuple[str, dict, dict]:
    """
    Build a DynamoDB SET expression from a flat dict of {field: value}.

    Returns (UpdateExpression, ExpressionAttributeNames, ExpressionAttributeValues).

    Fields in ``defaults`` are written with if_not_exists(), so they are only
    set when the item (or attribute) is new. This is how upserts keep their
    original id and createdAt.

    All attribute names are aliased via ExpressionAttributeNames to avoid
    conflicts with DynamoDB reserved words (e.g. name, role, type).
    """
    parts: list[str] = []
    names: dict[str, str] = {}
    values: dict[str, object] = {}

    for i, (key, value) in enumerate(data.items()):
        name_ph = f"#k{i}"
        val_ph = f":v{i}"
        parts.append(f"{name_ph} = {val_ph}")
        names[name_ph] = key
        values[val_ph] = value

    for i, (key, value) in enumerate((defaults or {}).items()):
        name_ph = f"#d{i}"
        val_ph = f":d{i}"
        parts.append(f"{name_ph} = if_not_exists({name_ph}, {val_ph})")
        names[name_ph] = key
        values[val_ph] = value

    return "SET " + ", ".join(parts), names, values


# ── Table bootstrap ───────────────────────────────────────────────────────────

def _table_definition(name: str, extra_indexes: list[dict], extra_attributes: list[dict]) -> dict:
    return {
        "TableName": name,
        "KeySchema": [
            {"AttributeName": "PK", "KeyType": "HASH"},
            {"AttributeName": "SK", "KeyType": "RANGE"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "PK", "AttributeType": "S"},
            {"AttributeName": "SK", "AttributeType": "S"},
            {"AttributeName": "scope", "AttributeType": "S"},
            {"AttributeName": "createdAt", "AttributeType": "S"},
            *extra_attributes,
        ],
        "GlobalSecondaryIndexes": [
            {
                "IndexName": SCOPE_INDEX,
                "KeySchema": [
                    {"AttributeName": "scope", "KeyType": "HASH"},
                    {"AttributeName": "createdAt", "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
            *extra_indexes,
        ],
        "BillingMode": "PAY_PER_REQUEST",
    }


def table_definitions() -> list[dict]:
    return [
        _table_definition(CONTENT_TABLE, [], []),
        _table_definition(
            USERS_TABLE,
            [
                {
                    "IndexName": EMAIL_INDEX,
                    "KeySchema": [{"AttributeName": "email", "KeyType": "HASH"}],
                    "Projection": {"ProjectionType": "ALL"},
                }
            ],
            [{"AttributeName": "email", "AttributeType": "S"}],
        ),
    ]


def create_tables() -> list[str]:
    """Create any missing tables. Returns the names that were created."""
    client = boto_session().client(
        "dynamodb", region_name=AWS_REGION, **DYNAMODB_KWARGS
    )
    existing = set(client.list_tables().get("TableNames", []))
    created: list[str] = []
    for definition in table_definitions():
        if definition["TableName"] in existing:
            continue
        client.create_table(**definition)
        client.get_waiter("table_exists").wait(TableName=definition["TableName"])
        created.append(definition["TableName"])
    return created
