import io
import logging
import mimetypes
from typing import List, Optional, Tuple

from fastapi import HTTPException
from PIL import Image, UnidentifiedImageError
from sqlalchemy import asc, desc, func, or_
from sqlmodel import Session, select

from travelblog.core.config import settings
from travelblog.core.dates import utcnow
from travelblog.models.media import MediaItem, MediaType
from travelblog.schemas import MediaUpdate
from travelblog.services.pagination import Page
from travelblog.services.storage import unique_key

logger = logging.getLogger(__name__)

MEDIA_SORT_FIELDS = {
    "created_at": MediaItem.created_at,
    "original_filename": MediaItem.original_filename,
    "file_size": MediaItem.file_size,
}


def detect_media_type(mime_type: str) -> MediaType:
    if mime_type.startswith("image/"):
        return MediaType.IMAGE
    if mime_type.startswith("video/"):
        return MediaType.VIDEO
    return MediaType.DOCUMENT


def image_dimensions(data: bytes) -> Tuple[Optional[int], Optional[int]]:
    try:
        with Image.open(io.BytesIO(data)) as im:
            return im.width, im.height
    except (UnidentifiedImageError, OSError):
        return None, None


class MediaService:
    def __init__(self, session: Session, storage=None):
        self.session = session
        self.storage = storage

    def upload(
        self,
        content: bytes,
        original_filename: str,
        content_type: Optional[str] = None,
        alt_text: Optional[str] = None,
        caption: Optional[str] = None,
    ) -> MediaItem:
        if not content:
            raise HTTPException(status_code=400, detail="Uploaded file is empty")

        if len(content) > settings.MAX_UPLOAD_SIZE:
            raise HTTPException(
                status_code=413,
                detail=f"File exceeds the {settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB upload limit",
            )

        mime_type = content_type or mimetypes.guess_type(original_filename)[0] or "application/octet-stream"
        file_type = detect_media_type(mime_type)

        width = height = None
        if file_type == MediaType.IMAGE:
            width, height = image_dimensions(content)

        key = unique_key(file_type.value, original_filename)
        if not self.storage.upload_file(content, key, mime_type):
            raise HTTPException(status_code=500, detail="Failed to store uploaded file")

        item = MediaItem(
            filename=key.split("/")[-1],
            original_filename=original_filename,
            file_path=key,
            url=self.storage.get_public_url(key),
            file_size=len(content),
            file_type=file_type,
            mime_type=mime_type,
            width=width,
            height=height,
            alt_text=alt_text,
            caption=caption,
        )
        self.session.add(item)
        self.session.commit()
        self.session.refresh(item)
        logger.info("Stored media %s as %s (%d bytes)", original_filename, key, len(content))
        return item

    def list_media(
        self,
        page: int = 1,
        limit: int = 20,
        file_type: Optional[MediaType] = None,
        search: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> Tuple[List[MediaItem], Page]:
        pagination = Page(page=page, limit=limit)
        query = select(MediaItem)

        if file_type:
            query = query.where(MediaItem.file_type == file_type)

        if search:
            query = query.where(
                or_(
                    MediaItem.original_filename.ilike(f"%{search}%"),
                    MediaItem.alt_text.ilike(f"%{search}%"),
                    MediaItem.caption.ilike(f"%{search}%"),
                )
            )

        pagination.total = self.session.exec(query.with_only_columns(func.count(MediaItem.id))).first() or 0

        column = MEDIA_SORT_FIELDS.get(sort_by, MediaItem.created_at)
        direction = asc if sort_order.lower() == "asc" else desc
        items = self.session.exec(
            query.order_by(direction(column), desc(MediaItem.id)).offset(pagination.offset).limit(limit)
        ).all()
        return items, pagination

    def get_media(self, media_id: int) -> MediaItem:
        item = self.session.get(MediaItem, media_id)
        if not item:
            raise HTTPException(status_code=404, detail="Media item not found")
        return item

    def update_media(self, media_id: int, data: MediaUpdate) -> MediaItem:
        item = self.get_media(media_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(item, field, value)
        item.updated_at = utcnow()
        self.session.add(item)
        self.session.commit()
        self.session.refresh(item)
        return item

    def delete_media(self, media_id: int) -> None:
        item = self.get_media(media_id)
        # A missing stored file should not keep the row alive
        if not self.storage.delete_file(item.file_path):
            logger.warning("Stored file %s could not be removed", item.file_path)
        self.session.delete(item)
        self.session.commit()

    def count(self) -> int:
        return self.session.exec(select(func.count(MediaItem.id))).first() or 0
