"""Single-table accessors for every dashboard entity.

DynamoDB key design (content table):
  Year-scoped entity:  PK=<ENTITY>#<id>      SK=METADATA  scope=<ENTITY>#<yearId>
  One-per-year entity: PK=<ENTITY>#<yearId>  SK=METADATA  scope=<ENTITY>#<yearId>
  Year:                PK=YEAR#<id>          SK=METADATA  scope=YEAR

Users live in their own table with the same layout (scope=USER) plus an
email-index GSI.

The scope-created-index GSI (scope, createdAt) serves list, count and
"most recent N" queries without scans.
"""

from __future__ import annotations

from typing import Callable

from boto3.dynamodb.conditions import Attr, Key as DynamoKey
from botocore.exceptions import ClientError

from shared.db import (
    EMAIL_INDEX,
    SCOPE_INDEX,
    build_update_expression,
    get_content_table,
    get_users_table,
    new_id,
    now_iso,
    to_dynamo,
)

_INTERNAL_ATTRIBUTES = ("PK", "SK", "scope")


def public_item(item: dict | None) -> dict | None:
    """Strip storage keys before an item leaves the repository."""
    if item is None:
        return None
    return {k: v for k, v in item.items() if k not in _INTERNAL_ATTRIBUTES}


def _is_conditional_failure(exc: ClientError) -> bool:
    return exc.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException"


def _query_all(table, **kwargs) -> list[dict]:
    items: list[dict] = []
    while True:
        response = table.query(**kwargs)
        items.extend(response.get("Items", []))
        last_key = response.get("LastEvaluatedKey")
        if not last_key:
            return items
        kwargs["ExclusiveStartKey"] = last_key


def _count_all(table, **kwargs) -> int:
    total = 0
    while True:
        response = table.query(Select="COUNT", **kwargs)
        total += response.get("Count", 0)
        last_key = response.get("LastEvaluatedKey")
        if not last_key:
            return total
        kwargs["ExclusiveStartKey"] = last_key


class EntityRepository:
    """CRUD over one entity type, optionally partitioned by yearId."""

    def __init__(
        self,
        entity: str,
        year_scoped: bool = True,
        table_getter: Callable = get_content_table,
    ):
        self.entity = entity
        self.year_scoped = year_scoped
        self._table = table_getter

    # ── Keys ──────────────────────────────────────────────────────────────────

    def _key(self, item_id: str) -> dict:
        return {"PK": f"{self.entity}#{item_id}", "SK": "METADATA"}

    def _scope(self, year_id: str | None) -> str:
        if self.year_scoped:
            if not year_id:
                raise ValueError(f"{self.entity} queries require a yearId")
            return f"{self.entity}#{year_id}"
        return self.entity

    # ── Reads ─────────────────────────────────────────────────────────────────

    def list(self, year_id: str | None = None, **filters) -> list[dict]:
        """All items in the scope, newest first. ``filters`` are equality matches."""
        kwargs: dict = {
            "IndexName": SCOPE_INDEX,
            "KeyConditionExpression": DynamoKey("scope").eq(self._scope(year_id)),
            "ScanIndexForward": False,
        }
        condition = None
        for field, value in filters.items():
            if value is None:
                continue
            clause = Attr(field).eq(value)
            condition = clause if condition is None else condition & clause
        if condition is not None:
            kwargs["FilterExpression"] = condition
        return [public_item(i) for i in _query_all(self._table(), **kwargs)]

    def get(self, item_id: str) -> dict | None:
        item = self._table().get_item(Key=self._key(item_id)).get("Item")
        return public_item(item)

    def count(self, year_id: str | None = None) -> int:
        return _count_all(
            self._table(),
            IndexName=SCOPE_INDEX,
            KeyConditionExpression=DynamoKey("scope").eq(self._scope(year_id)),
        )

    def recent(self, year_id: str | None, limit: int, fields: tuple[str, ...]) -> list[dict]:
        """The ``limit`` most recently created items, projected to ``fields`` + createdAt."""
        projected = (*fields, "createdAt")
        names = {f"#p{i}": field for i, field in enumerate(projected)}
        response = self._table().query(
            IndexName=SCOPE_INDEX,
            KeyConditionExpression=DynamoKey("scope").eq(self._scope(year_id)),
            ScanIndexForward=False,
            Limit=limit,
            ProjectionExpression=", ".join(names),
            ExpressionAttributeNames=names,
        )
        return response.get("Items", [])

    # ── Writes ────────────────────────────────────────────────────────────────

    def create(self, data: dict) -> dict:
        item_id = new_id()
        ts = now_iso()
        year_id = data.get("yearId") if self.year_scoped else None
        item = {
            **to_dynamo(data),
            **self._key(item_id),
            "scope": self._scope(year_id),
            "id": item_id,
            "createdAt": ts,
            "updatedAt": ts,
        }
        self._table().put_item(Item=item)
        return public_item(item)

    def update(self, item_id: str, changes: dict) -> dict | None:
        """Apply a partial update. Returns the new item, or None if it does not exist."""
        data = {**to_dynamo(changes), "updatedAt": now_iso()}
        expr, names, values = build_update_expression(data)
        names["#pk"] = "PK"
        try:
            response = self._table().update_item(
                Key=self._key(item_id),
                UpdateExpression=expr,
                ConditionExpression="attribute_exists(#pk)",
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ReturnValues="ALL_NEW",
            )
        except ClientError as exc:
            if _is_conditional_failure(exc):
                return None
            raise
        return public_item(response.get("Attributes"))

    def delete(self, item_id: str) -> dict | None:
        """Delete an item. Returns the deleted item, or None if it did not exist."""
        response = self._table().delete_item(Key=self._key(item_id), ReturnValues="ALL_OLD")
        return public_item(response.get("Attributes"))


class YearSingletonRepository:
    """An entity stored at most once per Year (venue, contact info, settings)."""

    def __init__(self, entity: str, table_getter: Callable = get_content_table):
        self.entity = entity
        self._table = table_getter

    def _key(self, year_id: str) -> dict:
        return {"PK": f"{self.entity}#{year_id}", "SK": "METADATA"}

    def get(self, year_id: str) -> dict | None:
        item = self._table().get_item(Key=self._key(year_id)).get("Item")
        return public_item(item)

    def count(self, year_id: str) -> int:
        return 1 if self.get(year_id) else 0

    def create(self, year_id: str, data: dict) -> dict | None:
        """Insert the record for a year. Returns None if one already exists."""
        ts = now_iso()
        item = {
            **to_dynamo(data),
            **self._key(year_id),
            "scope": f"{self.entity}#{year_id}",
            "id": new_id(),
            "yearId": year_id,
            "createdAt": ts,
            "updatedAt": ts,
        }
        try:
            self._table().put_item(
                Item=item,
                ConditionExpression="attribute_not_exists(PK)",
            )
        except ClientError as exc:
            if _is_conditional_failure(exc):
                return None
            raise
        return public_item(item)

    def upsert(self, year_id: str, changes: dict) -> dict:
        """Write ``changes`` onto the year's record, creating it if needed."""
        ts = now_iso()
        expr, names, values = build_update_expression(
            {**to_dynamo(changes), "updatedAt": ts},
            defaults={
                "id": new_id(),
                "yearId": year_id,
                "scope": f"{self.entity}#{year_id}",
                "createdAt": ts,
            },
        )
        response = self._table().update_item(
            Key=self._key(year_id),
            UpdateExpression=expr,
            ExpressionAttributeNames=names,
            ExpressionAttributeValues=values,
            ReturnValues="ALL_NEW",
        )
        return public_item(response["Attributes"])

    def delete(self, year_id: str) -> dict | None:
        response = self._table().delete_item(Key=self._key(year_id), ReturnValues="ALL_OLD")
        return public_item(response.get("Attributes"))


class UserRepository(EntityRepository):
    """Global (not year-scoped) users, looked up by id or email."""

    def __init__(self):
        super().__init__("USER", year_scoped=False, table_getter=get_users_table)

    def find_by_email(self, email: str) -> dict | None:
        """Returns the stored item including its passwordHash."""
        items = _query_all(
            self._table(),
            IndexName=EMAIL_INDEX,
            KeyConditionExpression=DynamoKey("email").eq(email.lower()),
        )
        return public_item(items[0]) if items else None

    def create(self, data: dict) -> dict:
        return super().create({**data, "email": data["email"].lower()})

    def update(self, item_id: str, changes: dict) -> dict | None:
        if changes.get("email"):
            changes = {**changes, "email": changes["email"].lower()}
        return super().update(item_id, changes)


def without_secrets(user: dict | None) -> dict | None:
    if user is None:
        return None
    return {k: v for k, v in user.items() if k != "passwordHash"}


# ── Registry ──────────────────────────────────────────────────────────────────

years = EntityRepository("YEAR", year_scoped=False)
speakers = EntityRepository("SPEAKER")
agenda = EntityRepository("AGENDA")
sponsors = EntityRepository("SPONSOR")
organizers = EntityRepository("ORGANIZER")
volunteers = EntityRepository("VOLUNTEER")
gallery = EntityRepository("GALLERY")
venues = YearSingletonRepository("VENUE")
contacts = YearSingletonRepository("CONTACT")
settings = YearSingletonRepository("SETTINGS")
users = UserRepository()
