import logging
from enum import Enum

from sqlmodel import Session

from travelblog.services.blog import BlogService
from travelblog.services.directory import DirectoryService

logger = logging.getLogger(__name__)


class SearchType(str, Enum):
    ALL = "all"
    BLOG = "blog"
    DIRECTORY = "directory"


class SearchService:
    """Keyword search across published posts and directory listings."""

    def __init__(self, session: Session):
        self.session = session

    def search(self, query: str, type: SearchType = SearchType.ALL, page: int = 1, limit: int = 20) -> dict:
        query = query.strip()
        blog_items, blog_total = [], 0
        directory_items, directory_total = [], 0

        # Blank queries match nothing
        if query and type in (SearchType.ALL, SearchType.BLOG):
            posts, pagination = BlogService(self.session).list_posts(
                page=page, limit=limit, search=query, published=True, sort_by="published_at"
            )
            blog_items, blog_total = posts, pagination.total

        if query and type in (SearchType.ALL, SearchType.DIRECTORY):
            listings, pagination = DirectoryService(self.session).list_listings(
                page=page, limit=limit, search=query
            )
            directory_items, directory_total = listings, pagination.total

        logger.info("Search %r (%s): %d posts, %d listings", query, type.value, blog_total, directory_total)

        return {
            "query": query,
            "results": {
                "total": blog_total + directory_total,
                "blog": {"items": blog_items, "count": blog_total},
                "directory": {"items": directory_items, "count": directory_total},
            },
            "pagination": {
                "page": page,
                "limit": limit,
                "hasMore": page * limit < max(blog_total, directory_total),
            },
        }
