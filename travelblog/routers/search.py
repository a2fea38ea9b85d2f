from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from travelblog.db.session import get_session
from travelblog.services.search import SearchService, SearchType

router = APIRouter()


@router.get("")
def search(
    q: str = Query(..., min_length=1),
    type: SearchType = SearchType.ALL,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=50),
    session: Session = Depends(get_session)
):
    """Search published posts and directory listings"""
    return SearchService(session).search(q, type=type, page=page, limit=limit)
