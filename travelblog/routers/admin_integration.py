from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from travelblog.db.session import get_session
from travelblog.models.admin_user import AdminUser
from travelblog.routers.admin import get_admin_user, require_permission
from travelblog.schemas import LinkCreate
from travelblog.services.blog import BlogService
from travelblog.services.directory import DirectoryService
from travelblog.services.integration import IntegrationService

router = APIRouter()

BLOG_TO_DIRECTORY = "blogToDirec"
DIRECTORY_TO_BLOG = "direcToBlog"


def get_integration_service(session: Session = Depends(get_session)) -> IntegrationService:
    return IntegrationService(session)


@router.get("")
def get_integration(
    type: Optional[str] = None,
    id: Optional[int] = None,
    admin_user: AdminUser = Depends(get_admin_user),
    service: IntegrationService = Depends(get_integration_service),
    session: Session = Depends(get_session)
):
    """All links, or the items related to one post or listing when type and id are given"""
    require_permission(admin_user, "integration.read")

    if type and id is not None:
        if type == BLOG_TO_DIRECTORY:
            directory = DirectoryService(session)
            return {"listings": [directory.to_read(listing) for listing in service.listings_for_post(id)]}
        if type == DIRECTORY_TO_BLOG:
            blog = BlogService(session)
            return {"posts": [blog.to_summary(post) for post in service.posts_for_listing(id)]}
        raise HTTPException(status_code=400, detail="Invalid type parameter")

    return {"links": service.list_links()}


@router.post("")
def create_link(
    data: LinkCreate,
    admin_user: AdminUser = Depends(get_admin_user),
    service: IntegrationService = Depends(get_integration_service)
):
    require_permission(admin_user, "integration.manage")
    link = service.link(data.blog_post_id, data.directory_listing_id)
    return {
        "success": True,
        "message": "Blog post linked to directory listing successfully",
        "link": link,
    }


@router.delete("")
def delete_link(
    blogPostId: int = Query(...),
    directoryListingId: int = Query(...),
    admin_user: AdminUser = Depends(get_admin_user),
    service: IntegrationService = Depends(get_integration_service)
):
    require_permission(admin_user, "integration.manage")
    service.unlink(blogPostId, directoryListingId)
    return {"success": True, "message": "Blog post unlinked from directory listing successfully"}
