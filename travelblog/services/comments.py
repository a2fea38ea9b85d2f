import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import asc, desc, func
from sqlmodel import Session, delete, select

from travelblog.models.blog import BlogPost
from travelblog.models.comment import (
    Comment,
    CommentRead,
    CommentReport,
    CommentThread,
    ReportStatus,
)
from travelblog.schemas import CommentCreate
from travelblog.services.blog import visible_condition

logger = logging.getLogger(__name__)


class CommentService:
    def __init__(self, session: Session):
        self.session = session

    def get_thread(self, post_id: int) -> List[CommentThread]:
        """Top-level comments newest first, each with its replies oldest first."""
        top_level = self.session.exec(
            select(Comment)
            .where(Comment.post_id == post_id, Comment.parent_id == None)  # noqa: E711
            .order_by(desc(Comment.created_at), desc(Comment.id))
        ).all()

        replies = self.session.exec(
            select(Comment)
            .where(Comment.post_id == post_id, Comment.parent_id != None)  # noqa: E711
            .order_by(asc(Comment.created_at), asc(Comment.id))
        ).all()

        by_parent = {}
        for reply in replies:
            by_parent.setdefault(reply.parent_id, []).append(CommentRead.model_validate(reply))

        return [
            CommentThread(**CommentRead.model_validate(comment).model_dump(), replies=by_parent.get(comment.id, []))
            for comment in top_level
        ]

    def get_comment(self, comment_id: int) -> Comment:
        comment = self.session.get(Comment, comment_id)
        if not comment:
            raise HTTPException(status_code=404, detail="Comment not found")
        return comment

    def require_visible_post(self, post_id: int) -> BlogPost:
        """Comments are only open on posts the public can see."""
        post = self.session.exec(select(BlogPost).where(BlogPost.id == post_id, visible_condition())).first()
        if not post:
            raise HTTPException(status_code=404, detail="Blog post not found")
        return post

    def create_comment(self, data: CommentCreate) -> Comment:
        self.require_visible_post(data.post_id)

        if data.parent_id is not None:
            parent = self.session.get(Comment, data.parent_id)
            if not parent or parent.post_id != data.post_id:
                raise HTTPException(status_code=400, detail="Parent comment does not belong to this post")
            # Replies are one level deep, a reply to a reply joins the same thread
            if parent.parent_id is not None:
                data.parent_id = parent.parent_id

        comment = Comment(
            post_id=data.post_id,
            parent_id=data.parent_id,
            user_name=data.user_name,
            user_email=str(data.user_email),
            content=data.content,
        )
        self.session.add(comment)
        self.session.commit()
        self.session.refresh(comment)
        return comment

    def like(self, comment_id: int) -> int:
        comment = self.get_comment(comment_id)
        comment.likes = (comment.likes or 0) + 1
        self.session.add(comment)
        self.session.commit()
        self.session.refresh(comment)
        return comment.likes

    def report(self, comment_id: int, reason: Optional[str] = None) -> CommentReport:
        self.get_comment(comment_id)
        report = CommentReport(comment_id=comment_id, reason=reason)
        self.session.add(report)
        self.session.commit()
        self.session.refresh(report)
        logger.info("Comment %s reported", comment_id)
        return report

    # Moderation

    def list_reports(self, status: Optional[ReportStatus] = None) -> List[CommentReport]:
        query = select(CommentReport)
        if status:
            query = query.where(CommentReport.status == status)
        return self.session.exec(query.order_by(desc(CommentReport.reported_at))).all()

    def resolve_report(self, report_id: int, status: ReportStatus) -> CommentReport:
        report = self.session.get(CommentReport, report_id)
        if not report:
            raise HTTPException(status_code=404, detail="Report not found")
        report.status = status
        self.session.add(report)
        self.session.commit()
        self.session.refresh(report)
        return report

    def delete_comment(self, comment_id: int) -> None:
        comment = self.get_comment(comment_id)
        ids = [comment.id] + list(self.session.exec(select(Comment.id).where(Comment.parent_id == comment.id)).all())
        self.session.exec(delete(CommentReport).where(CommentReport.comment_id.in_(ids)))
        self.session.exec(delete(Comment).where(Comment.parent_id == comment.id))
        self.session.delete(comment)
        self.session.commit()

    def count(self) -> int:
        return self.session.exec(select(func.count(Comment.id))).first() or 0

    def count_pending_reports(self) -> int:
        return self.session.exec(
            select(func.count(CommentReport.id)).where(CommentReport.status == ReportStatus.PENDING)
        ).first() or 0
