"""
Admin Lambda entry point.

Local dev:
    DYNAMODB_ENDPOINT=http://localhost:8002 ENV=local \
    PYTHONPATH=src uv run uvicorn admin.handler:app --reload --port 8001

Lambda handler:
    admin.handler.handler
"""

import logging
import time

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from mangum import Mangum

from admin.routes import (
    agenda,
    auth,
    contact,
    dashboard,
    gallery,
    settings,
    speakers,
    sponsors,
    team,
    upload,
    users,
    venue,
    years,
)
from shared.config import ALLOWED_ORIGINS, LOG_LEVEL

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="AWS Community Day Cameroon Admin API",
    description="Content API for the conference dashboard. Reads are public; writes require a session.",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "%s %s -> %d (%.1fms)",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            # Drop the "body"/"query" prefix; clients only know field names
            "field": ".".join(str(part) for part in error["loc"][1:]) or str(error["loc"][0]),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation failed", "errors": errors},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


app.include_router(auth.router)
app.include_router(years.router)
app.include_router(speakers.router)
app.include_router(agenda.router)
app.include_router(sponsors.router)
app.include_router(team.router)
app.include_router(gallery.router)
app.include_router(venue.router)
app.include_router(contact.router)
app.include_router(settings.router)
app.include_router(upload.router)
app.include_router(dashboard.router)
app.include_router(users.router)


@app.get("/health", include_in_schema=False)
def health():
    return {"status": "ok"}


# Mangum adapts the FastAPI ASGI app for AWS Lambda + API Gateway (HTTP API).
handler = Mangum(app, lifespan="off")
