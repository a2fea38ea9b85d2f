from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from travelblog.db.session import get_session
from travelblog.models.comment import CommentRead
from travelblog.schemas import CommentCreate, ReportCreate
from travelblog.services.comments import CommentService

router = APIRouter()


def get_comment_service(session: Session = Depends(get_session)) -> CommentService:
    return CommentService(session)


@router.get("")
def read_comments(postId: int = Query(...), service: CommentService = Depends(get_comment_service)):
    """Threaded comments of a post"""
    service.require_visible_post(postId)
    return {"comments": service.get_thread(postId)}


@router.post("", status_code=201)
def create_comment(data: CommentCreate, service: CommentService = Depends(get_comment_service)):
    comment = service.create_comment(data)
    return {"success": True, "comment": CommentRead.model_validate(comment)}


@router.post("/{comment_id}/like")
def like_comment(comment_id: int, service: CommentService = Depends(get_comment_service)):
    return {"success": True, "likes": service.like(comment_id)}


@router.post("/{comment_id}/report")
def report_comment(
    comment_id: int,
    data: ReportCreate,
    service: CommentService = Depends(get_comment_service)
):
    service.report(comment_id, data.reason)
    return {"success": True, "message": "Comment reported"}
