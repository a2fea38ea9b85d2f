from typing import Optional, List
from datetime import datetime
from enum import Enum
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import Text

from travelblog.core.dates import utcnow


class ReportStatus(str, Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    DISMISSED = "dismissed"


class Comment(SQLModel, table=True):
    __tablename__ = "blog_comments"

    id: Optional[int] = Field(default=None, primary_key=True)

    # References
    post_id: int = Field(foreign_key="blog_posts.id", index=True)
    parent_id: Optional[int] = Field(default=None, foreign_key="blog_comments.id", index=True)

    # Author (visitors are anonymous, identified by name and email only)
    user_name: str = Field(max_length=100)
    user_email: str = Field(max_length=255)

    content: str = Field(sa_column=Column(Text, nullable=False))
    likes: int = Field(default=0)

    created_at: datetime = Field(default_factory=utcnow)


class CommentReport(SQLModel, table=True):
    __tablename__ = "comment_reports"

    id: Optional[int] = Field(default=None, primary_key=True)
    comment_id: int = Field(foreign_key="blog_comments.id", index=True)
    reason: Optional[str] = None
    status: ReportStatus = Field(default=ReportStatus.PENDING, index=True)
    reported_at: datetime = Field(default_factory=utcnow)


class CommentRead(SQLModel):
    id: int
    post_id: int
    parent_id: Optional[int] = None
    user_name: str
    content: str
    likes: int
    created_at: datetime


class CommentThread(CommentRead):
    replies: List[CommentRead] = []
