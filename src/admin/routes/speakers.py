"""Speaker routes: GET (public) and POST / PUT / DELETE /api/speakers."""

from fastapi import APIRouter, Depends, status

from admin.routes.common import get_or_404, not_found, require_changes, require_year
from shared import repositories
from shared.auth import Session, get_session
from shared.models import SpeakerCreate, SpeakerUpdate
from shared.s3 import delete_media_urls

router = APIRouter()


@router.get("/api/speakers")
def list_speakers(yearId: str):
    return repositories.speakers.list(yearId)


@router.get("/api/speakers/{speaker_id}")
def get_speaker(speaker_id: str):
    return get_or_404(repositories.speakers, speaker_id, "Speaker")


@router.post("/api/speakers", status_code=status.HTTP_201_CREATED)
def create_speaker(speaker: SpeakerCreate, _: Session = Depends(get_session)):
    require_year(speaker.yearId)
    return repositories.speakers.create(speaker.model_dump(mode="json"))


@router.put("/api/speakers/{speaker_id}")
def update_speaker(speaker_id: str, update: SpeakerUpdate, _: Session = Depends(get_session)):
    changes = require_changes(update.changes())
    speaker = repositories.speakers.update(speaker_id, changes)
    if speaker is None:
        raise not_found("Speaker")
    return speaker


@router.delete("/api/speakers/{speaker_id}")
def delete_speaker(speaker_id: str, _: Session = Depends(get_session)):
    speaker = repositories.speakers.delete(speaker_id)
    if speaker is None:
        raise not_found("Speaker")

    # Owned photo goes only once the row is gone
    delete_media_urls([speaker.get("photoUrl")])
    return {"id": speaker_id, "message": "Speaker deleted"}
