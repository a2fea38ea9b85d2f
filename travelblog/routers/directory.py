from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from travelblog.db.session import get_session
from travelblog.models.directory import DirectoryReviewRead
from travelblog.schemas import ReportCreate, ReviewCreate
from travelblog.services.blog import BlogService
from travelblog.services.directory import LISTING_SORT_FIELDS, DirectoryService
from travelblog.services.integration import IntegrationService

router = APIRouter()


def get_directory_service(session: Session = Depends(get_session)) -> DirectoryService:
    return DirectoryService(session)


@router.get("/directory-listings")
def read_listings(
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    category: Optional[str] = None,
    location: Optional[str] = None,
    price_range: Optional[str] = None,
    featured: Optional[bool] = None,
    search: Optional[str] = None,
    sort: str = "name",
    order: str = "ASC",
    service: DirectoryService = Depends(get_directory_service)
):
    """Listings with optional filters; category is a slug"""
    if sort not in LISTING_SORT_FIELDS:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid sort field. Allowed fields: {', '.join(LISTING_SORT_FIELDS)}",
        )

    listings, pagination = service.list_listings(
        page=page,
        limit=limit,
        category_slug=category,
        location=location,
        price_range=price_range,
        featured=featured,
        search=search,
        sort=sort,
        order=order,
    )
    return {"data": listings, "pagination": pagination.to_dict()}


@router.get("/directory-listings/{id_or_slug}")
def read_listing(
    id_or_slug: str,
    session: Session = Depends(get_session),
    service: DirectoryService = Depends(get_directory_service)
):
    if id_or_slug.isdigit():
        listing = service.get_listing(int(id_or_slug))
    else:
        listing = service.get_listing_by_slug(id_or_slug)
        if not listing:
            raise HTTPException(status_code=404, detail="Directory listing not found")

    blog = BlogService(session)
    posts = IntegrationService(session).posts_for_listing(listing.id, visible_only=True)
    return {
        "listing": service.to_read(listing),
        "posts": [blog.to_summary(p) for p in posts],
        **service.review_summary(listing.id),
    }


@router.get("/directory-categories")
def read_categories(service: DirectoryService = Depends(get_directory_service)):
    return service.list_categories()


@router.get("/directory-categories/{slug}")
def read_category(slug: str, service: DirectoryService = Depends(get_directory_service)):
    category = service.get_category_by_slug(slug)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


# Reviews
@router.get("/directory/reviews")
def read_reviews(listing_id: int = Query(...), service: DirectoryService = Depends(get_directory_service)):
    service.get_listing(listing_id)
    return service.review_summary(listing_id)


@router.post("/directory/reviews", status_code=201)
def create_review(data: ReviewCreate, service: DirectoryService = Depends(get_directory_service)):
    review = service.create_review(data)
    return {"message": "Review submitted successfully", "review": DirectoryReviewRead.model_validate(review)}


@router.post("/directory/reviews/{review_id}/helpful")
def mark_review_helpful(review_id: int, service: DirectoryService = Depends(get_directory_service)):
    review = service.mark_helpful(review_id)
    return {"message": "Review marked as helpful", "helpful_count": review.helpful_count}


@router.post("/directory/reviews/{review_id}/report")
def report_review(
    review_id: int,
    data: ReportCreate,
    service: DirectoryService = Depends(get_directory_service)
):
    service.report_review(review_id, data.reason)
    return {"message": "Review reported successfully"}
