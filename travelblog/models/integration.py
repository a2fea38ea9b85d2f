from typing import Optional
from datetime import datetime
from sqlmodel import Field, SQLModel
from sqlalchemy import UniqueConstraint

from travelblog.core.dates import utcnow


class BlogDirectoryLink(SQLModel, table=True):
    """Cross-reference between a blog post and a directory listing."""
    __tablename__ = "blog_directory_links"
    __table_args__ = (UniqueConstraint("blog_post_id", "directory_listing_id"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    blog_post_id: int = Field(foreign_key="blog_posts.id", index=True)
    directory_listing_id: int = Field(foreign_key="directory_listings.id", index=True)
    created_at: datetime = Field(default_factory=utcnow)


class BlogDirectoryLinkRead(SQLModel):
    id: int
    blog_post_id: int
    directory_listing_id: int
    blog_post_title: str
    directory_listing_name: str
    created_at: datetime
