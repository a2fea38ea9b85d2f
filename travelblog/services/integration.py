import logging
from typing import List

from fastapi import HTTPException
from sqlalchemy import desc, func
from sqlmodel import Session, select

from travelblog.models.blog import BlogPost
from travelblog.models.directory import DirectoryListing
from travelblog.models.integration import BlogDirectoryLink, BlogDirectoryLinkRead
from travelblog.services.blog import visible_condition

logger = logging.getLogger(__name__)


class IntegrationService:
    """Links between blog posts and directory listings."""

    def __init__(self, session: Session):
        self.session = session

    def _require_both(self, blog_post_id: int, directory_listing_id: int):
        post = self.session.get(BlogPost, blog_post_id)
        if not post:
            raise HTTPException(status_code=404, detail="Blog post not found")
        listing = self.session.get(DirectoryListing, directory_listing_id)
        if not listing:
            raise HTTPException(status_code=404, detail="Directory listing not found")
        return post, listing

    def _find(self, blog_post_id: int, directory_listing_id: int):
        return self.session.exec(
            select(BlogDirectoryLink).where(
                BlogDirectoryLink.blog_post_id == blog_post_id,
                BlogDirectoryLink.directory_listing_id == directory_listing_id,
            )
        ).first()

    def link(self, blog_post_id: int, directory_listing_id: int) -> BlogDirectoryLink:
        self._require_both(blog_post_id, directory_listing_id)

        existing = self._find(blog_post_id, directory_listing_id)
        if existing:
            return existing

        link = BlogDirectoryLink(blog_post_id=blog_post_id, directory_listing_id=directory_listing_id)
        self.session.add(link)
        self.session.commit()
        self.session.refresh(link)
        logger.info("Linked post %s to listing %s", blog_post_id, directory_listing_id)
        return link

    def unlink(self, blog_post_id: int, directory_listing_id: int) -> None:
        link = self._find(blog_post_id, directory_listing_id)
        if not link:
            raise HTTPException(status_code=404, detail="Link not found")
        self.session.delete(link)
        self.session.commit()

    def listings_for_post(self, blog_post_id: int) -> List[DirectoryListing]:
        if not self.session.get(BlogPost, blog_post_id):
            raise HTTPException(status_code=404, detail="Blog post not found")
        return self.session.exec(
            select(DirectoryListing)
            .join(BlogDirectoryLink, BlogDirectoryLink.directory_listing_id == DirectoryListing.id)
            .where(BlogDirectoryLink.blog_post_id == blog_post_id)
            .order_by(DirectoryListing.name)
        ).all()

    def posts_for_listing(self, directory_listing_id: int, visible_only: bool = False) -> List[BlogPost]:
        if not self.session.get(DirectoryListing, directory_listing_id):
            raise HTTPException(status_code=404, detail="Directory listing not found")
        query = (
            select(BlogPost)
            .join(BlogDirectoryLink, BlogDirectoryLink.blog_post_id == BlogPost.id)
            .where(BlogDirectoryLink.directory_listing_id == directory_listing_id)
        )
        if visible_only:
            query = query.where(visible_condition())
        return self.session.exec(query.order_by(desc(BlogPost.created_at))).all()

    def list_links(self) -> List[BlogDirectoryLinkRead]:
        rows = self.session.exec(
            select(BlogDirectoryLink, BlogPost.title, DirectoryListing.name)
            .join(BlogPost, BlogPost.id == BlogDirectoryLink.blog_post_id)
            .join(DirectoryListing, DirectoryListing.id == BlogDirectoryLink.directory_listing_id)
            .order_by(desc(BlogDirectoryLink.created_at), desc(BlogDirectoryLink.id))
        ).all()
        return [
            BlogDirectoryLinkRead(
                id=link.id,
                blog_post_id=link.blog_post_id,
                directory_listing_id=link.directory_listing_id,
                blog_post_title=title,
                directory_listing_name=name,
                created_at=link.created_at,
            )
            for link, title, name in rows
        ]

    def count(self) -> int:
        return self.session.exec(select(func.count(BlogDirectoryLink.id))).first() or 0
