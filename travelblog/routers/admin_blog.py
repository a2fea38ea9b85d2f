from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlmodel import Session

from travelblog.db.session import get_session
from travelblog.models.admin_user import AdminUser
from travelblog.models.blog import PostStatus
from travelblog.models.comment import ReportStatus
from travelblog.models.user import User
from travelblog.routers.admin import get_admin_user, require_permission
from travelblog.routers.auth import get_current_user
from travelblog.schemas import PostCreate, PostUpdate, TermCreate
from travelblog.services.blog import BlogService
from travelblog.services.comments import CommentService

router = APIRouter()


class ReportResolve(BaseModel):
    status: ReportStatus


def get_blog_service(session: Session = Depends(get_session)) -> BlogService:
    return BlogService(session)


def get_comment_service(session: Session = Depends(get_session)) -> CommentService:
    return CommentService(session)


# Posts
@router.get("/posts")
def get_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    category_id: Optional[int] = None,
    tag_id: Optional[int] = None,
    search: Optional[str] = None,
    published: Optional[bool] = None,
    status: Optional[PostStatus] = None,
    author_id: Optional[int] = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    admin_user: AdminUser = Depends(get_admin_user),
    service: BlogService = Depends(get_blog_service)
):
    """Get all posts with pagination and filters"""
    require_permission(admin_user, "posts.read")

    posts, pagination = service.list_posts(
        page=page,
        limit=limit,
        category_id=category_id,
        tag_id=tag_id,
        search=search,
        published=published,
        status=status,
        author_id=author_id,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return {"posts": posts, **pagination.to_dict()}


@router.get("/posts/{post_id}")
def get_post(
    post_id: int,
    admin_user: AdminUser = Depends(get_admin_user),
    service: BlogService = Depends(get_blog_service)
):
    require_permission(admin_user, "posts.read")
    return service.to_read(service.get_post(post_id))


@router.post("/posts", status_code=201)
def create_post(
    data: PostCreate,
    current_user: User = Depends(get_current_user),
    admin_user: AdminUser = Depends(get_admin_user),
    service: BlogService = Depends(get_blog_service)
):
    """Create new post"""
    require_permission(admin_user, "posts.create")
    post = service.create_post(data, author_id=current_user.id)
    return service.to_read(post)


@router.put("/posts/{post_id}")
def update_post(
    post_id: int,
    data: PostUpdate,
    admin_user: AdminUser = Depends(get_admin_user),
    service: BlogService = Depends(get_blog_service)
):
    """Update post, only the fields sent are changed"""
    require_permission(admin_user, "posts.update")
    return service.to_read(service.update_post(post_id, data))


@router.delete("/posts/{post_id}")
def delete_post(
    post_id: int,
    admin_user: AdminUser = Depends(get_admin_user),
    service: BlogService = Depends(get_blog_service)
):
    require_permission(admin_user, "posts.delete")
    service.delete_post(post_id)
    return {"message": "Post deleted successfully"}


# Categories
@router.get("/categories")
def get_categories(
    admin_user: AdminUser = Depends(get_admin_user),
    service: BlogService = Depends(get_blog_service)
):
    require_permission(admin_user, "posts.read")
    return service.list_categories()


@router.post("/categories", status_code=201)
def create_category(
    data: TermCreate,
    admin_user: AdminUser = Depends(get_admin_user),
    service: BlogService = Depends(get_blog_service)
):
    require_permission(admin_user, "categories.manage")
    return service.create_category(data)


@router.get("/categories/{category_id}")
def get_category(
    category_id: int,
    admin_user: AdminUser = Depends(get_admin_user),
    service: BlogService = Depends(get_blog_service)
):
    require_permission(admin_user, "posts.read")
    return service.get_category(category_id)


@router.put("/categories/{category_id}")
def update_category(
    category_id: int,
    data: TermCreate,
    admin_user: AdminUser = Depends(get_admin_user),
    service: BlogService = Depends(get_blog_service)
):
    require_permission(admin_user, "categories.manage")
    return service.update_category(category_id, data)


@router.delete("/categories/{category_id}")
def delete_category(
    category_id: int,
    admin_user: AdminUser = Depends(get_admin_user),
    service: BlogService = Depends(get_blog_service)
):
    require_permission(admin_user, "categories.manage")
    service.delete_category(category_id)
    return {"message": "Category deleted successfully"}


# Tags
@router.get("/tags")
def get_tags(
    admin_user: AdminUser = Depends(get_admin_user),
    service: BlogService = Depends(get_blog_service)
):
    require_permission(admin_user, "posts.read")
    return service.list_tags()


@router.post("/tags", status_code=201)
def create_tag(
    data: TermCreate,
    admin_user: AdminUser = Depends(get_admin_user),
    service: BlogService = Depends(get_blog_service)
):
    require_permission(admin_user, "tags.manage")
    return service.create_tag(data)


@router.get("/tags/{tag_id}")
def get_tag(
    tag_id: int,
    admin_user: AdminUser = Depends(get_admin_user),
    service: BlogService = Depends(get_blog_service)
):
    require_permission(admin_user, "posts.read")
    return service.get_tag(tag_id)


@router.put("/tags/{tag_id}")
def update_tag(
    tag_id: int,
    data: TermCreate,
    admin_user: AdminUser = Depends(get_admin_user),
    service: BlogService = Depends(get_blog_service)
):
    require_permission(admin_user, "tags.manage")
    return service.update_tag(tag_id, data)


@router.delete("/tags/{tag_id}")
def delete_tag(
    tag_id: int,
    admin_user: AdminUser = Depends(get_admin_user),
    service: BlogService = Depends(get_blog_service)
):
    require_permission(admin_user, "tags.manage")
    service.delete_tag(tag_id)
    return {"message": "Tag deleted successfully"}


# Comment moderation
@router.get("/comments/reports")
def get_comment_reports(
    status: Optional[ReportStatus] = None,
    admin_user: AdminUser = Depends(get_admin_user),
    service: CommentService = Depends(get_comment_service)
):
    require_permission(admin_user, "comments.moderate")
    return service.list_reports(status)


@router.put("/comments/reports/{report_id}")
def resolve_comment_report(
    report_id: int,
    data: ReportResolve,
    admin_user: AdminUser = Depends(get_admin_user),
    service: CommentService = Depends(get_comment_service)
):
    require_permission(admin_user, "comments.moderate")
    return service.resolve_report(report_id, data.status)


@router.delete("/comments/{comment_id}")
def delete_comment(
    comment_id: int,
    admin_user: AdminUser = Depends(get_admin_user),
    service: CommentService = Depends(get_comment_service)
):
    require_permission(admin_user, "comments.moderate")
    service.delete_comment(comment_id)
    return {"message": "Comment deleted successfully"}
