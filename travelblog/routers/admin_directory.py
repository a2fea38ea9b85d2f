from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from travelblog.db.session import get_session
from travelblog.models.admin_user import AdminUser
from travelblog.routers.admin import get_admin_user, require_permission
from travelblog.schemas import ListingCreate, ListingUpdate, ReviewResponseCreate, TermCreate
from travelblog.services.directory import DirectoryService

router = APIRouter()


def get_directory_service(session: Session = Depends(get_session)) -> DirectoryService:
    return DirectoryService(session)


# Listings
@router.get("/listings")
def get_listings(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    category_id: Optional[int] = None,
    location: Optional[str] = None,
    price_range: Optional[str] = None,
    featured: Optional[bool] = None,
    search: Optional[str] = None,
    sort: str = "name",
    order: str = "ASC",
    admin_user: AdminUser = Depends(get_admin_user),
    service: DirectoryService = Depends(get_directory_service)
):
    """Get listings with pagination; an unknown sort field falls back to name"""
    require_permission(admin_user, "directory.read")

    listings, pagination = service.list_listings(
        page=page,
        limit=limit,
        category_id=category_id,
        location=location,
        price_range=price_range,
        featured=featured,
        search=search,
        sort=sort,
        order=order,
    )
    return {"listings": listings, **pagination.to_dict()}


@router.get("/listings/locations")
def get_listing_locations(
    category_id: Optional[int] = None,
    admin_user: AdminUser = Depends(get_admin_user),
    service: DirectoryService = Depends(get_directory_service)
):
    require_permission(admin_user, "directory.read")
    return {
        "locations": service.count_by_location(category_id),
        "priceRanges": service.price_ranges(category_id),
    }


@router.get("/listings/{listing_id}")
def get_listing(
    listing_id: int,
    admin_user: AdminUser = Depends(get_admin_user),
    service: DirectoryService = Depends(get_directory_service)
):
    require_permission(admin_user, "directory.read")
    return service.to_read(service.get_listing(listing_id))


@router.post("/listings", status_code=201)
def create_listing(
    data: ListingCreate,
    admin_user: AdminUser = Depends(get_admin_user),
    service: DirectoryService = Depends(get_directory_service)
):
    require_permission(admin_user, "directory.create")
    return service.to_read(service.create_listing(data))


@router.put("/listings/{listing_id}")
def update_listing(
    listing_id: int,
    data: ListingUpdate,
    admin_user: AdminUser = Depends(get_admin_user),
    service: DirectoryService = Depends(get_directory_service)
):
    require_permission(admin_user, "directory.update")
    return service.to_read(service.update_listing(listing_id, data))


@router.delete("/listings/{listing_id}")
def delete_listing(
    listing_id: int,
    admin_user: AdminUser = Depends(get_admin_user),
    service: DirectoryService = Depends(get_directory_service)
):
    require_permission(admin_user, "directory.delete")
    service.delete_listing(listing_id)
    return {"message": "Listing deleted successfully"}


# Categories
@router.get("/categories")
def get_categories(
    admin_user: AdminUser = Depends(get_admin_user),
    service: DirectoryService = Depends(get_directory_service)
):
    require_permission(admin_user, "directory.read")
    return service.list_categories()


@router.post("/categories", status_code=201)
def create_category(
    data: TermCreate,
    admin_user: AdminUser = Depends(get_admin_user),
    service: DirectoryService = Depends(get_directory_service)
):
    require_permission(admin_user, "directory.categories.manage")
    return service.create_category(data)


@router.put("/categories/{category_id}")
def update_category(
    category_id: int,
    data: TermCreate,
    admin_user: AdminUser = Depends(get_admin_user),
    service: DirectoryService = Depends(get_directory_service)
):
    require_permission(admin_user, "directory.categories.manage")
    return service.update_category(category_id, data)


@router.delete("/categories/{category_id}")
def delete_category(
    category_id: int,
    admin_user: AdminUser = Depends(get_admin_user),
    service: DirectoryService = Depends(get_directory_service)
):
    """Delete a category; refused with 409 while listings still use it"""
    require_permission(admin_user, "directory.categories.manage")
    service.delete_category(category_id)
    return {"message": "Category deleted successfully"}


# Reviews
@router.post("/reviews/{review_id}/response", status_code=201)
def respond_to_review(
    review_id: int,
    data: ReviewResponseCreate,
    admin_user: AdminUser = Depends(get_admin_user),
    service: DirectoryService = Depends(get_directory_service)
):
    require_permission(admin_user, "reviews.moderate")
    return service.respond(review_id, data.content, data.respondent_name)
