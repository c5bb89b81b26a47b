"""
Seed the admin API with its first year and dashboard accounts.

    acd-seed                   # year + users from env
    acd-seed --create-tables   # also create any missing DynamoDB tables

Reads ADMIN_EMAIL / ADMIN_PASSWORD / ADMIN_NAME, EDITOR_EMAIL /
EDITOR_PASSWORD / EDITOR_NAME and SEED_YEAR (default 2025). Safe to re-run:
existing years and users are left untouched.
"""

import argparse
import logging
import os

from shared import repositories
from shared.auth import hash_password
from shared.config import LOG_LEVEL
from shared.db import create_tables

logger = logging.getLogger(__name__)


def seed_year(name: str) -> dict:
    for year in repositories.years.list():
        if year["name"] == name:
            logger.info("Year %s already exists", name)
            return year
    year = repositories.years.create({"name": name})
    logger.info("Created year %s", name)
    return year


def seed_user(email: str, password: str, name: str, role: str) -> dict:
    existing = repositories.users.find_by_email(email)
    if existing:
        logger.info("User %s already exists", existing["email"])
        return existing
    user = repositories.users.create(
        {
            "name": name,
            "email": email,
            "role": role,
            "avatar": None,
            "passwordHash": hash_password(password),
        }
    )
    logger.info("Created %s user %s", role, user["email"])
    return user


def _seed_account(prefix: str, role: str, default_name: str) -> None:
    email = os.getenv(f"{prefix}_EMAIL")
    password = os.getenv(f"{prefix}_PASSWORD")
    if not email or not password:
        logger.info("%s_EMAIL / %s_PASSWORD not set, skipping %s user", prefix, prefix, role)
        return
    seed_user(email, password, os.getenv(f"{prefix}_NAME", default_name), role)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="create missing DynamoDB tables before seeding",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")

    if args.create_tables:
        for table_name in create_tables():
            logger.info("Created table %s", table_name)

    seed_year(os.getenv("SEED_YEAR", "2025"))
    _seed_account("ADMIN", "ADMIN", "Admin")
    _seed_account("EDITOR", "EDITOR", "Editor")


if __name__ == "__main__":
    main()
