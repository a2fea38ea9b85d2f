from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from travelblog.models.blog import PostStatus


class PostCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    slug: Optional[str] = None
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    category_id: Optional[int] = None
    tags: List[int] = []
    published: bool = False
    status: Optional[PostStatus] = None
    publish_date: Optional[datetime] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None


class PostUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = None
    slug: Optional[str] = None
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    category_id: Optional[int] = None
    tags: Optional[List[int]] = None
    published: Optional[bool] = None
    status: Optional[PostStatus] = None
    publish_date: Optional[datetime] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None


class TermCreate(BaseModel):
    """Category or tag payload."""
    name: str = Field(min_length=1, max_length=100)
    slug: Optional[str] = None
    description: Optional[str] = None


class CommentCreate(BaseModel):
    post_id: int
    user_name: str = Field(min_length=1, max_length=100)
    user_email: EmailStr
    content: str = Field(min_length=1, max_length=5000)
    parent_id: Optional[int] = None

    @field_validator("user_name", "content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


class ReportCreate(BaseModel):
    reason: Optional[str] = Field(default=None, max_length=1000)


class ListingBase(BaseModel):
    description: Optional[str] = None
    location: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    website: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    price_range: Optional[str] = None


class ListingCreate(ListingBase):
    name: str = Field(min_length=1, max_length=255)
    category_id: int
    slug: Optional[str] = None
    hours: Dict[str, str] = {}
    images: List[str] = []
    featured: bool = False


class ListingUpdate(ListingBase):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category_id: Optional[int] = None
    slug: Optional[str] = None
    hours: Optional[Dict[str, str]] = None
    images: Optional[List[str]] = None
    featured: Optional[bool] = None


class ReviewCreate(BaseModel):
    listing_id: int
    user_name: str = Field(min_length=1, max_length=100)
    user_email: Optional[EmailStr] = None
    rating: int = Field(ge=1, le=5)
    content: str = Field(min_length=10, max_length=5000)

    @field_validator("content")
    @classmethod
    def long_enough(cls, v: str) -> str:
        if len(v.strip()) < 10:
            raise ValueError("Review content must be at least 10 characters")
        return v.strip()


class ReviewResponseCreate(BaseModel):
    content: str = Field(min_length=1)
    respondent_name: str = Field(min_length=1, max_length=100)


class LinkCreate(BaseModel):
    blog_post_id: int = Field(alias="blogPostId")
    directory_listing_id: int = Field(alias="directoryListingId")

    model_config = {"populate_by_name": True}


class MediaUpdate(BaseModel):
    alt_text: Optional[str] = None
    caption: Optional[str] = None
