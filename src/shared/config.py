import os

ENV = os.getenv("ENV", "production")
AWS_REGION = os.getenv("AWS_REGION", "eu-west-1")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

CONTENT_TABLE = os.getenv("DYNAMODB_CONTENT_TABLE", "content")
USERS_TABLE = os.getenv("DYNAMODB_USERS_TABLE", "users")
S3_BUCKET = os.getenv("S3_BUCKET", "acd-cameroon-media")

DYNAMODB_ENDPOINT = os.getenv("DYNAMODB_ENDPOINT")  # local only (http://localhost:8002)

# Public objects are served straight from the bucket unless a CDN is configured.
S3_PUBLIC_BASE_URL = os.getenv(
    "S3_PUBLIC_BASE_URL", f"https://{S3_BUCKET}.s3.{AWS_REGION}.amazonaws.com"
).rstrip("/")

JWT_SECRET = os.getenv("JWT_SECRET", "")
SESSION_TTL_DAYS = 7
AUTH_COOKIE_NAME = "auth-token"
COOKIE_SECURE = ENV == "production"

ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

MAX_UPLOAD_BYTES = 5 * 1024 * 1024

# Injected into boto3 calls when running locally
DYNAMODB_KWARGS: dict = {}
if ENV == "local" and DYNAMODB_ENDPOINT:
    DYNAMODB_KWARGS["endpoint_url"] = DYNAMODB_ENDPOINT
