from typing import Optional
from datetime import datetime
from enum import Enum
from sqlmodel import Field, SQLModel

from travelblog.core.dates import utcnow


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    DOCUMENT = "document"


class MediaItem(SQLModel, table=True):
    __tablename__ = "media_items"

    id: Optional[int] = Field(default=None, primary_key=True)

    # File
    filename: str = Field(max_length=255)  # Stored (unique) name
    original_filename: str = Field(max_length=255)
    file_path: str = Field(max_length=255)  # Storage key, e.g., "image/<uuid>.jpg"
    url: str  # Public URL
    file_size: int
    file_type: MediaType = Field(index=True)
    mime_type: str = Field(max_length=100)

    # Image dimensions
    width: Optional[int] = None
    height: Optional[int] = None

    # Descriptive
    alt_text: Optional[str] = None
    caption: Optional[str] = None

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
