"""S3 media helpers: validated uploads, URL <-> key derivation and deletion."""

import logging
import re
import secrets
import time

from botocore.exceptions import BotoCoreError, ClientError

from shared.config import AWS_REGION, MAX_UPLOAD_BYTES, S3_BUCKET, S3_PUBLIC_BASE_URL
from shared.db import boto_session

logger = logging.getLogger(__name__)

# S3 does not support a local endpoint override the same way DynamoDB does.
# For local dev, moto is used in tests; the real S3 is used in production.

IMAGE_CONTENT_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}
LOGO_FOLDERS = {"sponsors", "logos"}
_FOLDER_PATTERN = re.compile(r"^[A-Za-z0-9_-]+(/[A-Za-z0-9_-]+)*$")

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/svg+xml": "svg",
}


class MediaRejected(ValueError):
    """The payload failed validation and was never sent to S3."""


def _s3():
    return boto_session().client("s3", region_name=AWS_REGION)


def allowed_content_types(folder: str) -> set[str]:
    if folder.strip("/").split("/")[0] in LOGO_FOLDERS:
        return IMAGE_CONTENT_TYPES | {"image/svg+xml"}
    return IMAGE_CONTENT_TYPES


def validate_media(content_type: str | None, size: int, folder: str = "") -> None:
    folder = folder.strip("/")
    if folder and not _FOLDER_PATTERN.match(folder):
        raise MediaRejected("directory may only contain letters, digits, - and _")
    allowed = allowed_content_types(folder)
    if content_type not in allowed:
        raise MediaRejected(f"content_type must be one of {sorted(allowed)}")
    if size == 0:
        raise MediaRejected("File is empty")
    if size > MAX_UPLOAD_BYTES:
        raise MediaRejected(f"File exceeds the {MAX_UPLOAD_BYTES // (1024 * 1024)}MB limit")


def build_s3_key(folder: str, filename: str, content_type: str) -> str:
    """
    Construct a collision-free S3 key for an uploaded asset.

    Pattern: <folder>/<epoch-ms>_<random>.<ext>  (folder omitted when empty)

    The extension comes from the original filename, falling back to the
    content type when the filename has none (or a non-alphanumeric one).
    """
    _, dot, ext = filename.rpartition(".")
    if not dot or not ext.isalnum():
        ext = _EXTENSIONS.get(content_type, "bin")
    name = f"{int(time.time() * 1000)}_{secrets.token_hex(6)}.{ext.lower()}"
    folder = folder.strip("/")
    return f"{folder}/{name}" if folder else name


def public_url(s3_key: str) -> str:
    return f"{S3_PUBLIC_BASE_URL}/{s3_key}"


def key_from_url(url: str) -> str | None:
    """Strip the public base URL. Returns None for URLs outside our bucket."""
    prefix = f"{S3_PUBLIC_BASE_URL}/"
    if not url or not url.startswith(prefix):
        return None
    return url[len(prefix):] or None


def upload_media(body: bytes, content_type: str | None, filename: str, folder: str = "") -> str:
    """Validate and store a media payload. Returns its public URL."""
    validate_media(content_type, len(body), folder)
    s3_key = build_s3_key(folder, filename, content_type)
    _s3().put_object(
        Bucket=S3_BUCKET,
        Key=s3_key,
        Body=body,
        ContentType=content_type,
    )
    logger.info("Uploaded media %s (%d bytes)", s3_key, len(body))
    return public_url(s3_key)


def delete_s3_objects(s3_keys: list[str]) -> None:
    """Batch-delete S3 objects. No-op if the list is empty."""
    if not s3_keys:
        return
    _s3().delete_objects(
        Bucket=S3_BUCKET,
        Delete={"Objects": [{"Key": k} for k in s3_keys]},
    )
    logger.info("Deleted %d media object(s)", len(s3_keys))


def delete_media_urls(urls: list[str | None]) -> None:
    """
    Delete the objects behind our own public URLs; foreign URLs are ignored.

    Runs after the owning record is deleted. S3 errors are logged, not
    raised, and leave the objects orphaned.
    """
    keys = [k for k in (key_from_url(u) for u in urls if u) if k]
    try:
        delete_s3_objects(keys)
    except (BotoCoreError, ClientError):
        logger.exception("Failed to delete media %s", keys)
