from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlmodel import Session

from travelblog.db.session import get_session
from travelblog.models.admin_user import AdminUser
from travelblog.models.media import MediaType
from travelblog.routers.admin import get_admin_user, require_permission
from travelblog.schemas import MediaUpdate
from travelblog.services.media import MediaService
from travelblog.services.storage import get_storage

router = APIRouter()


def get_media_service(session: Session = Depends(get_session), storage=Depends(get_storage)) -> MediaService:
    return MediaService(session, storage)


@router.get("")
def get_media(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    type: Optional[MediaType] = None,
    search: Optional[str] = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    admin_user: AdminUser = Depends(get_admin_user),
    service: MediaService = Depends(get_media_service)
):
    require_permission(admin_user, "media.read")
    items, pagination = service.list_media(
        page=page, limit=limit, file_type=type, search=search, sort_by=sort_by, sort_order=sort_order
    )
    return {"media": items, **pagination.to_dict()}


@router.post("", status_code=201)
async def upload_media(
    file: UploadFile = File(...),
    alt_text: Optional[str] = Form(None),
    caption: Optional[str] = Form(None),
    admin_user: AdminUser = Depends(get_admin_user),
    service: MediaService = Depends(get_media_service)
):
    """
    Upload an image, video or document.
    Returns the stored media item with its public URL.
    """
    require_permission(admin_user, "media.upload")

    content = await file.read()
    return service.upload(
        content,
        original_filename=file.filename or "upload",
        content_type=file.content_type,
        alt_text=alt_text,
        caption=caption,
    )


@router.get("/{media_id}")
def get_media_item(
    media_id: int,
    admin_user: AdminUser = Depends(get_admin_user),
    service: MediaService = Depends(get_media_service)
):
    require_permission(admin_user, "media.read")
    return service.get_media(media_id)


@router.put("/{media_id}")
def update_media_item(
    media_id: int,
    data: MediaUpdate,
    admin_user: AdminUser = Depends(get_admin_user),
    service: MediaService = Depends(get_media_service)
):
    require_permission(admin_user, "media.update")
    return service.update_media(media_id, data)


@router.delete("/{media_id}")
def delete_media_item(
    media_id: int,
    admin_user: AdminUser = Depends(get_admin_user),
    service: MediaService = Depends(get_media_service)
):
    require_permission(admin_user, "media.delete")
    service.delete_media(media_id)
    return {"message": "Media deleted successfully"}
