import logging
from typing import Dict, List, Optional, Tuple

from fastapi import HTTPException
from sqlalchemy import asc, desc, func, or_
from sqlmodel import Session, delete, select

from travelblog.core.dates import utcnow
from travelblog.models.directory import (
    DirectoryCategory,
    DirectoryCategoryRead,
    DirectoryListing,
    DirectoryListingRead,
    DirectoryReview,
    DirectoryReviewRead,
    DirectoryReviewReport,
    DirectoryReviewResponse,
    ReviewResponseRead,
)
from travelblog.models.integration import BlogDirectoryLink
from travelblog.schemas import ListingCreate, ListingUpdate, ReviewCreate, TermCreate
from travelblog.services.pagination import Page
from travelblog.services.slugs import resolve_slug

logger = logging.getLogger(__name__)

LISTING_SORT_FIELDS = {
    "name": DirectoryListing.name,
    "created_at": DirectoryListing.created_at,
    "updated_at": DirectoryListing.updated_at,
    "location": DirectoryListing.location,
    "price_range": DirectoryListing.price_range,
}


class DirectoryService:
    def __init__(self, session: Session):
        self.session = session

    # Categories

    def list_categories(self) -> List[DirectoryCategoryRead]:
        rows = self.session.exec(
            select(DirectoryCategory, func.count(DirectoryListing.id))
            .join(DirectoryListing, DirectoryListing.category_id == DirectoryCategory.id, isouter=True)
            .group_by(DirectoryCategory.id)
            .order_by(asc(DirectoryCategory.name))
        ).all()
        return [
            DirectoryCategoryRead(id=c.id, name=c.name, slug=c.slug, description=c.description, listing_count=count)
            for c, count in rows
        ]

    def get_category(self, category_id: int) -> DirectoryCategory:
        category = self.session.get(DirectoryCategory, category_id)
        if not category:
            raise HTTPException(status_code=404, detail="Directory category not found")
        return category

    def get_category_by_slug(self, slug: str) -> Optional[DirectoryCategory]:
        return self.session.exec(select(DirectoryCategory).where(DirectoryCategory.slug == slug)).first()

    def create_category(self, data: TermCreate) -> DirectoryCategory:
        category = DirectoryCategory(
            name=data.name.strip(),
            slug=resolve_slug(self.session, DirectoryCategory, data.name, data.slug),
            description=data.description,
        )
        self.session.add(category)
        self.session.commit()
        self.session.refresh(category)
        return category

    def update_category(self, category_id: int, data: TermCreate) -> DirectoryCategory:
        category = self.get_category(category_id)
        category.name = data.name.strip()
        if data.slug != category.slug:
            category.slug = resolve_slug(self.session, DirectoryCategory, data.name, data.slug, exclude_id=category.id)
        category.description = data.description
        self.session.add(category)
        self.session.commit()
        self.session.refresh(category)
        return category

    def delete_category(self, category_id: int) -> None:
        category = self.get_category(category_id)
        in_use = self.session.exec(
            select(func.count(DirectoryListing.id)).where(DirectoryListing.category_id == category_id)
        ).first()
        if in_use:
            raise HTTPException(
                status_code=409,
                detail=f"Category still has {in_use} listing(s); move or delete them first",
            )
        self.session.delete(category)
        self.session.commit()

    # Listings

    def list_listings(
        self,
        page: int = 1,
        limit: int = 10,
        category_id: Optional[int] = None,
        category_slug: Optional[str] = None,
        location: Optional[str] = None,
        price_range: Optional[str] = None,
        featured: Optional[bool] = None,
        search: Optional[str] = None,
        sort: str = "name",
        order: str = "ASC",
    ) -> Tuple[List[DirectoryListingRead], Page]:
        pagination = Page(page=page, limit=limit)

        if category_slug and not category_id:
            category = self.get_category_by_slug(category_slug)
            if not category:
                return [], pagination
            category_id = category.id

        query = select(DirectoryListing)

        if category_id:
            query = query.where(DirectoryListing.category_id == category_id)

        if location:
            query = query.where(DirectoryListing.location == location)

        if price_range:
            query = query.where(DirectoryListing.price_range == price_range)

        if featured is not None:
            query = query.where(DirectoryListing.featured == featured)

        if search:
            query = query.where(
                or_(
                    DirectoryListing.name.ilike(f"%{search}%"),
                    DirectoryListing.description.ilike(f"%{search}%"),
                    DirectoryListing.location.ilike(f"%{search}%"),
                )
            )

        # Get total count
        total_query = query.with_only_columns(func.count(DirectoryListing.id))
        pagination.total = self.session.exec(total_query).first() or 0

        # Unknown sort fields fall back to name
        column = LISTING_SORT_FIELDS.get(sort, DirectoryListing.name)
        direction = desc if order.upper() == "DESC" else asc

        listings = self.session.exec(
            query.order_by(direction(column), asc(DirectoryListing.id)).offset(pagination.offset).limit(limit)
        ).all()

        return [self.to_read(listing) for listing in listings], pagination

    def get_listing(self, listing_id: int) -> DirectoryListing:
        listing = self.session.get(DirectoryListing, listing_id)
        if not listing:
            raise HTTPException(status_code=404, detail="Directory listing not found")
        return listing

    def get_listing_by_slug(self, slug: str) -> Optional[DirectoryListing]:
        return self.session.exec(select(DirectoryListing).where(DirectoryListing.slug == slug)).first()

    def create_listing(self, data: ListingCreate) -> DirectoryListing:
        self._require_category(data.category_id)

        listing = DirectoryListing(
            **data.model_dump(exclude={"slug"}),
            slug=resolve_slug(self.session, DirectoryListing, data.name, data.slug),
        )
        self.session.add(listing)
        self.session.commit()
        self.session.refresh(listing)
        logger.info("Created directory listing %s (%s)", listing.id, listing.slug)
        return listing

    def update_listing(self, listing_id: int, data: ListingUpdate) -> DirectoryListing:
        listing = self.get_listing(listing_id)
        fields = data.model_dump(exclude_unset=True)

        if fields.get("category_id") is not None:
            self._require_category(fields["category_id"])

        slug = fields.pop("slug", None)
        for field, value in fields.items():
            # name, category and flags cannot be cleared
            if value is None and field in ("name", "category_id", "featured", "hours", "images"):
                continue
            setattr(listing, field, value)

        if slug and slug != listing.slug:
            listing.slug = resolve_slug(self.session, DirectoryListing, listing.name, slug, exclude_id=listing.id)

        listing.updated_at = utcnow()
        self.session.add(listing)
        self.session.commit()
        self.session.refresh(listing)
        return listing

    def delete_listing(self, listing_id: int) -> None:
        listing = self.get_listing(listing_id)

        review_ids = select(DirectoryReview.id).where(DirectoryReview.listing_id == listing_id)
        self.session.exec(delete(DirectoryReviewResponse).where(DirectoryReviewResponse.review_id.in_(review_ids)))
        self.session.exec(delete(DirectoryReviewReport).where(DirectoryReviewReport.review_id.in_(review_ids)))
        self.session.exec(delete(DirectoryReview).where(DirectoryReview.listing_id == listing_id))
        self.session.exec(delete(BlogDirectoryLink).where(BlogDirectoryLink.directory_listing_id == listing_id))

        self.session.delete(listing)
        self.session.commit()
        logger.info("Deleted directory listing %s", listing_id)

    def featured_listings(self, limit: int = 6) -> List[DirectoryListingRead]:
        listings, _ = self.list_listings(page=1, limit=limit, featured=True, sort="updated_at", order="DESC")
        return listings

    def count_by_location(self, category_id: Optional[int] = None) -> List[Dict]:
        query = select(DirectoryListing.location, func.count(DirectoryListing.id)).where(
            DirectoryListing.location != None  # noqa: E711
        )
        if category_id:
            query = query.where(DirectoryListing.category_id == category_id)
        rows = self.session.exec(query.group_by(DirectoryListing.location).order_by(asc(DirectoryListing.location))).all()
        return [{"location": location, "count": count} for location, count in rows]

    def price_ranges(self, category_id: Optional[int] = None) -> List[str]:
        query = select(DirectoryListing.price_range).distinct()
        if category_id:
            query = query.where(DirectoryListing.category_id == category_id)
        rows = self.session.exec(query.order_by(asc(DirectoryListing.price_range))).all()
        return [r for r in rows if r]

    def _require_category(self, category_id: int) -> DirectoryCategory:
        category = self.session.get(DirectoryCategory, category_id)
        if not category:
            raise HTTPException(status_code=400, detail=f"Unknown directory category id: {category_id}")
        return category

    def to_read(self, listing: DirectoryListing) -> DirectoryListingRead:
        category = self.session.get(DirectoryCategory, listing.category_id)
        return DirectoryListingRead(
            **listing.model_dump(),
            category_name=category.name if category else None,
            category_slug=category.slug if category else None,
        )

    # Reviews

    def list_reviews(self, listing_id: int) -> List[DirectoryReviewRead]:
        reviews = self.session.exec(
            select(DirectoryReview)
            .where(DirectoryReview.listing_id == listing_id)
            .order_by(desc(DirectoryReview.created_at), desc(DirectoryReview.id))
        ).all()

        result = []
        for review in reviews:
            response = self.session.exec(
                select(DirectoryReviewResponse).where(DirectoryReviewResponse.review_id == review.id)
            ).first()
            result.append(DirectoryReviewRead(
                **review.model_dump(),
                response=ReviewResponseRead.model_validate(response) if response else None,
            ))
        return result

    def review_summary(self, listing_id: int) -> dict:
        reviews = self.list_reviews(listing_id)
        average = sum(r.rating for r in reviews) / len(reviews) if reviews else 0
        return {
            "reviews": reviews,
            "averageRating": round(average, 2),
            "totalReviews": len(reviews),
        }

    def create_review(self, data: ReviewCreate) -> DirectoryReview:
        self.get_listing(data.listing_id)
        review = DirectoryReview(
            listing_id=data.listing_id,
            user_name=data.user_name.strip(),
            user_email=str(data.user_email) if data.user_email else None,
            rating=data.rating,
            content=data.content,
        )
        self.session.add(review)
        self.session.commit()
        self.session.refresh(review)
        return review

    def get_review(self, review_id: int) -> DirectoryReview:
        review = self.session.get(DirectoryReview, review_id)
        if not review:
            raise HTTPException(status_code=404, detail="Review not found")
        return review

    def mark_helpful(self, review_id: int, increment: bool = True) -> DirectoryReview:
        review = self.get_review(review_id)
        if increment:
            review.helpful_count += 1
        else:
            review.helpful_count = max(0, review.helpful_count - 1)
        self.session.add(review)
        self.session.commit()
        self.session.refresh(review)
        return review

    def respond(self, review_id: int, content: str, respondent_name: str) -> DirectoryReviewResponse:
        self.get_review(review_id)
        response = DirectoryReviewResponse(review_id=review_id, content=content, respondent_name=respondent_name)
        self.session.add(response)
        self.session.commit()
        self.session.refresh(response)
        return response

    def report_review(self, review_id: int, reason: Optional[str] = None) -> DirectoryReviewReport:
        self.get_review(review_id)
        report = DirectoryReviewReport(review_id=review_id, reason=reason)
        self.session.add(report)
        self.session.commit()
        self.session.refresh(report)
        logger.info("Review %s reported", review_id)
        return report
