"""Gallery routes: GET (public) and POST / PUT / DELETE /api/gallery."""

from typing import Optional

from fastapi import APIRouter, Depends, status

from admin.routes.common import get_or_404, not_found, require_changes, require_year
from shared import repositories
from shared.auth import Session, get_session
from shared.models import GalleryImageCreate, GalleryImageUpdate
from shared.s3 import delete_media_urls

router = APIRouter()


@router.get("/api/gallery")
def list_gallery(yearId: str, category: Optional[str] = None):
    return repositories.gallery.list(yearId, category=category)


@router.get("/api/gallery/{image_id}")
def get_gallery_image(image_id: str):
    return get_or_404(repositories.gallery, image_id, "Image")


@router.post("/api/gallery", status_code=status.HTTP_201_CREATED)
def create_gallery_image(image: GalleryImageCreate, _: Session = Depends(get_session)):
    require_year(image.yearId)
    return repositories.gallery.create(image.model_dump(mode="json"))


@router.put("/api/gallery/{image_id}")
def update_gallery_image(
    image_id: str, update: GalleryImageUpdate, _: Session = Depends(get_session)
):
    changes = require_changes(update.changes())
    image = repositories.gallery.update(image_id, changes)
    if image is None:
        raise not_found("Image")
    return image


@router.delete("/api/gallery/{image_id}")
def delete_gallery_image(image_id: str, _: Session = Depends(get_session)):
    image = repositories.gallery.delete(image_id)
    if image is None:
        raise not_found("Image")
    delete_media_urls([image.get("imageUrl")])
    return {"id": image_id, "message": "Image deleted"}
