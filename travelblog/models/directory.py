from typing import Optional, List, Dict
from datetime import datetime
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import JSON, Text

from travelblog.core.dates import utcnow


class DirectoryCategory(SQLModel, table=True):
    __tablename__ = "directory_categories"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=100)
    slug: str = Field(max_length=150, unique=True, index=True)
    description: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow)


class DirectoryListing(SQLModel, table=True):
    __tablename__ = "directory_listings"

    id: Optional[int] = Field(default=None, primary_key=True)

    # Basic Info
    name: str = Field(max_length=255, index=True)
    slug: str = Field(max_length=300, unique=True, index=True)
    description: Optional[str] = Field(default=None, sa_column=Column(Text))

    # Location
    location: Optional[str] = Field(default=None, index=True)  # e.g., "Sydney"
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    # Contact
    website: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None

    price_range: Optional[str] = Field(default=None, index=True)  # e.g., "$$"

    # Opening hours keyed by day, e.g., {"monday": "9am - 5pm"}
    hours: Dict[str, str] = Field(default={}, sa_column=Column(JSON))
    # Image URLs, first one is used as the cover
    images: List[str] = Field(default=[], sa_column=Column(JSON))

    category_id: int = Field(foreign_key="directory_categories.id", index=True)
    featured: bool = Field(default=False, index=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class DirectoryReview(SQLModel, table=True):
    __tablename__ = "directory_reviews"

    id: Optional[int] = Field(default=None, primary_key=True)
    listing_id: int = Field(foreign_key="directory_listings.id", index=True)

    user_name: str = Field(max_length=100)
    user_email: Optional[str] = None

    rating: int = Field(ge=1, le=5)  # 1-5 stars
    content: str = Field(sa_column=Column(Text, nullable=False))
    helpful_count: int = Field(default=0)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: Optional[datetime] = None


class DirectoryReviewResponse(SQLModel, table=True):
    __tablename__ = "directory_review_responses"

    id: Optional[int] = Field(default=None, primary_key=True)
    review_id: int = Field(foreign_key="directory_reviews.id", index=True)
    content: str = Field(sa_column=Column(Text, nullable=False))
    respondent_name: str
    created_at: datetime = Field(default_factory=utcnow)


class DirectoryReviewReport(SQLModel, table=True):
    __tablename__ = "directory_review_reports"

    id: Optional[int] = Field(default=None, primary_key=True)
    review_id: int = Field(foreign_key="directory_reviews.id", index=True)
    reason: Optional[str] = None
    reported_at: datetime = Field(default_factory=utcnow)


# Response shapes

class DirectoryCategoryRead(SQLModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    listing_count: int = 0


class DirectoryListingRead(SQLModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    location: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    price_range: Optional[str] = None
    hours: Dict[str, str] = {}
    images: List[str] = []
    category_id: int
    category_name: Optional[str] = None
    category_slug: Optional[str] = None
    featured: bool
    created_at: datetime
    updated_at: datetime


class ReviewResponseRead(SQLModel):
    content: str
    respondent_name: str
    created_at: datetime


class DirectoryReviewRead(SQLModel):
    id: int
    listing_id: int
    user_name: str
    rating: int
    content: str
    helpful_count: int
    created_at: datetime
    response: Optional[ReviewResponseRead] = None
