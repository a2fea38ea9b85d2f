from typing import Optional, List
from datetime import datetime
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import JSON
from enum import Enum

from travelblog.core.dates import utcnow


class AdminRole(str, Enum):
    SUPER_ADMIN = "super_admin"  # Full access, manages other admins
    EDITOR = "editor"  # Blog posts, categories, tags, media
    DIRECTORY_MANAGER = "directory_manager"  # Directory listings and categories
    MODERATOR = "moderator"  # Comments, reports and reviews

# Permissions each role gets without any granular grants
ROLE_PERMISSIONS = {
    AdminRole.EDITOR: [
        "dashboard.read",
        "posts.read", "posts.create", "posts.update", "posts.delete",
        "categories.manage", "tags.manage",
        "media.read", "media.upload", "media.update", "media.delete",
        "integration.read", "integration.manage",
    ],
    AdminRole.DIRECTORY_MANAGER: [
        "dashboard.read",
        "directory.read", "directory.create", "directory.update", "directory.delete",
        "directory.categories.manage",
        "media.read", "media.upload",
        "integration.read", "integration.manage",
    ],
    AdminRole.MODERATOR: [
        "dashboard.read",
        "posts.read", "comments.moderate", "reviews.moderate",
    ],
}

class AdminUser(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    # Link to main User table
    user_id: int = Field(foreign_key="user.id", unique=True, index=True)

    # Role & Permissions
    role: AdminRole = Field(default=AdminRole.EDITOR)

    # Granular permissions on top of the role defaults
    # e.g., ["directory.create", "comments.moderate"]
    permissions: List[str] = Field(default=[], sa_column=Column(JSON))

    # Status
    is_active: bool = Field(default=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
