"""Agenda routes: GET (public) and POST / PUT / DELETE /api/agenda.

Agenda rows are returned in running order (startTime ascending), each with a
small summary of its speaker embedded under "speaker".
"""

from fastapi import APIRouter, Depends, HTTPException, status

from admin.routes.common import get_or_404, not_found, require_changes, require_year
from shared import repositories
from shared.auth import Session, get_session
from shared.db import parse_timestamp
from shared.models import AgendaCreate, AgendaUpdate

router = APIRouter()

_SPEAKER_SUMMARY_FIELDS = ("id", "name", "title", "photoUrl")


# ── Helpers ────────────────────────────────────────────────────────────────────

def _speaker_summary(speaker: dict | None) -> dict | None:
    if not speaker:
        return None
    return {field: speaker.get(field) for field in _SPEAKER_SUMMARY_FIELDS}


def _with_speakers(items: list[dict]) -> list[dict]:
    speaker_ids = {item["speakerId"] for item in items if item.get("speakerId")}
    speakers = {sid: _speaker_summary(repositories.speakers.get(sid)) for sid in speaker_ids}
    return [{**item, "speaker": speakers.get(item.get("speakerId"))} for item in items]


def _require_speaker(speaker_id: str | None) -> None:
    if speaker_id:
        get_or_404(repositories.speakers, speaker_id, "Speaker")


# ── Routes ─────────────────────────────────────────────────────────────────────

@router.get("/api/agenda")
def list_agenda(yearId: str):
    items = repositories.agenda.list(yearId)
    items.sort(key=lambda item: parse_timestamp(item["startTime"]))
    return _with_speakers(items)


@router.get("/api/agenda/{agenda_id}")
def get_agenda_item(agenda_id: str):
    item = get_or_404(repositories.agenda, agenda_id, "Agenda item")
    return _with_speakers([item])[0]


@router.post("/api/agenda", status_code=status.HTTP_201_CREATED)
def create_agenda_item(item: AgendaCreate, _: Session = Depends(get_session)):
    require_year(item.yearId)
    _require_speaker(item.speakerId)
    created = repositories.agenda.create(item.model_dump(mode="json"))
    return _with_speakers([created])[0]


@router.put("/api/agenda/{agenda_id}")
def update_agenda_item(agenda_id: str, update: AgendaUpdate, _: Session = Depends(get_session)):
    changes = require_changes(update.changes())
    existing = get_or_404(repositories.agenda, agenda_id, "Agenda item")
    _require_speaker(changes.get("speakerId"))

    # A one-sided time change must still leave a valid slot
    start = parse_timestamp(changes.get("startTime", existing["startTime"]))
    end = parse_timestamp(changes.get("endTime", existing["endTime"]))
    if ("startTime" in changes or "endTime" in changes) and end <= start:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="endTime must be after startTime",
        )

    updated = repositories.agenda.update(agenda_id, changes)
    if updated is None:
        raise not_found("Agenda item")
    return _with_speakers([updated])[0]


@router.delete("/api/agenda/{agenda_id}")
def delete_agenda_item(agenda_id: str, _: Session = Depends(get_session)):
    if repositories.agenda.delete(agenda_id) is None:
        raise not_found("Agenda item")
    return {"id": agenda_id, "message": "Agenda item deleted"}
