"""Media routes: POST / DELETE /api/upload.

Flow:
  1. Admin UI posts the file (multipart field "file") and an optional
     "directory" such as speakers or sponsors.
  2. The payload is validated (type allow-list, 5MB cap) before S3 is touched.
  3. The response carries the public URL; the UI stores it in photoUrl /
     logoUrl / imageUrl / images[] when saving the entity.
"""

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from shared.auth import Session, get_session
from shared.config import MAX_UPLOAD_BYTES
from shared.models import UploadResponse
from shared.s3 import MediaRejected, delete_s3_objects, key_from_url, upload_media

router = APIRouter()


@router.post("/api/upload", response_model=UploadResponse)
def upload_file(
    file: UploadFile = File(...),
    directory: str = Form(default=""),
    _: Session = Depends(get_session),
):
    # One byte past the cap is enough to reject oversize files
    body = file.file.read(MAX_UPLOAD_BYTES + 1)
    try:
        url = upload_media(body, file.content_type, file.filename or "", directory)
    except MediaRejected as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return UploadResponse(url=url, key=key_from_url(url))


@router.delete("/api/upload")
def delete_file(url: str, _: Session = Depends(get_session)):
    s3_key = key_from_url(url)
    if s3_key is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="URL does not belong to the media bucket",
        )
    delete_s3_objects([s3_key])
    return {"key": s3_key, "message": "File deleted"}
