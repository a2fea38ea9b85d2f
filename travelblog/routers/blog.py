from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from travelblog.db.session import get_session
from travelblog.services.blog import BlogService
from travelblog.services.directory import DirectoryService
from travelblog.services.integration import IntegrationService

router = APIRouter()


def get_blog_service(session: Session = Depends(get_session)) -> BlogService:
    return BlogService(session)


@router.get("/posts")
def read_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    category: Optional[str] = None,
    tag: Optional[str] = None,
    search: Optional[str] = None,
    service: BlogService = Depends(get_blog_service)
):
    """Published posts, newest first. category and tag are slugs."""
    category_id = tag_id = None
    if category:
        found = service.get_category_by_slug(category)
        if not found:
            raise HTTPException(status_code=404, detail="Category not found")
        category_id = found.id
    if tag:
        found = service.get_tag_by_slug(tag)
        if not found:
            raise HTTPException(status_code=404, detail="Tag not found")
        tag_id = found.id

    posts, pagination = service.list_posts(
        page=page,
        limit=limit,
        category_id=category_id,
        tag_id=tag_id,
        search=search,
        published=True,
        sort_by="published_at",
    )
    return {"posts": posts, **pagination.to_dict()}


@router.get("/posts/{slug}")
def read_post(slug: str, session: Session = Depends(get_session), service: BlogService = Depends(get_blog_service)):
    post = service.get_post_by_slug(slug, increment_views=True, visible_only=True)
    if not post:
        raise HTTPException(status_code=404, detail="Blog post not found")

    directory = DirectoryService(session)
    return {
        "post": service.to_read(post),
        "related": service.related_posts(post),
        "listings": [directory.to_read(listing) for listing in IntegrationService(session).listings_for_post(post.id)],
    }


@router.get("/categories")
def read_categories(service: BlogService = Depends(get_blog_service)):
    return service.list_categories()


@router.get("/tags")
def read_tags(service: BlogService = Depends(get_blog_service)):
    return service.list_tags()
