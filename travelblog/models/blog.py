from typing import Optional, List
from datetime import datetime
from enum import Enum
from sqlmodel import Field, Relationship, SQLModel, Column
from sqlalchemy import Text

from travelblog.core.dates import utcnow


class PostStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    SCHEDULED = "scheduled"


class BlogPostTag(SQLModel, table=True):
    __tablename__ = "blog_post_tags"

    post_id: Optional[int] = Field(default=None, foreign_key="blog_posts.id", primary_key=True)
    tag_id: Optional[int] = Field(default=None, foreign_key="blog_tags.id", primary_key=True)


class BlogCategory(SQLModel, table=True):
    __tablename__ = "blog_categories"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=100)
    slug: str = Field(max_length=150, unique=True, index=True)
    description: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class BlogTag(SQLModel, table=True):
    __tablename__ = "blog_tags"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=100)
    slug: str = Field(max_length=150, unique=True, index=True)

    created_at: datetime = Field(default_factory=utcnow)

    posts: List["BlogPost"] = Relationship(back_populates="tags", link_model=BlogPostTag)


class BlogPost(SQLModel, table=True):
    __tablename__ = "blog_posts"

    id: Optional[int] = Field(default=None, primary_key=True)

    # Content
    title: str = Field(max_length=255, index=True)
    slug: str = Field(max_length=300, unique=True, index=True)
    content: str = Field(sa_column=Column(Text, nullable=False))
    excerpt: Optional[str] = Field(default=None, sa_column=Column(Text))
    featured_image: Optional[str] = None

    # References
    author_id: Optional[int] = Field(default=None, foreign_key="user.id", index=True)
    category_id: Optional[int] = Field(default=None, foreign_key="blog_categories.id", index=True)

    # Status
    status: PostStatus = Field(default=PostStatus.DRAFT, index=True)
    published: bool = Field(default=False, index=True)
    published_at: Optional[datetime] = Field(default=None, index=True)

    # SEO
    meta_title: Optional[str] = Field(default=None, max_length=255)
    meta_description: Optional[str] = None

    views_count: int = Field(default=0)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    tags: List[BlogTag] = Relationship(back_populates="posts", link_model=BlogPostTag)


# Response shapes

class TagRead(SQLModel):
    id: int
    name: str
    slug: str


class CategoryRead(SQLModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    post_count: int = 0


class TagWithCount(TagRead):
    post_count: int = 0


class BlogPostRead(SQLModel):
    id: int
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    author_id: Optional[int] = None
    author_name: Optional[str] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    category_slug: Optional[str] = None
    status: PostStatus
    published: bool
    published_at: Optional[datetime] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    views_count: int = 0
    created_at: datetime
    updated_at: datetime
    tags: List[TagRead] = []


class BlogPostSummary(SQLModel):
    id: int
    title: str
    slug: str
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    author_name: Optional[str] = None
    category_name: Optional[str] = None
    category_slug: Optional[str] = None
    status: PostStatus
    published: bool
    published_at: Optional[datetime] = None
    views_count: int = 0
    created_at: datetime
    updated_at: datetime
    tags: List[TagRead] = []
