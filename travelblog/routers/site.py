"""Server-rendered public pages, the XML sitemap and the RSS feed."""
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import RedirectResponse
from pydantic import ValidationError
from sqlmodel import Session

from travelblog.core.templates import templates
from travelblog.db.session import get_session
from travelblog.models.blog import BlogPost
from travelblog.models.directory import DirectoryListing
from travelblog.schemas import CommentCreate, ReviewCreate
from travelblog.services import destinations as catalog
from travelblog.services import seo
from travelblog.services.blog import BlogService
from travelblog.services.comments import CommentService
from travelblog.services.directory import DirectoryService
from travelblog.services.integration import IntegrationService
from travelblog.services.search import SearchService, SearchType

router = APIRouter()

BLOG_PAGE_SIZE = 6
DIRECTORY_PAGE_SIZE = 12


def render(request: Request, name: str, context: dict, status_code: int = 200):
    return templates.TemplateResponse(request, name, context, status_code=status_code)


def not_found(request: Request, message: str = "The page you are looking for does not exist."):
    return render(
        request,
        "404.html",
        {"meta": seo.page_meta("Page not found", path=request.url.path), "message": message},
        status_code=404,
    )


def _validation_message(exc: ValidationError) -> str:
    return "; ".join(f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors())


@router.get("/")
def home(request: Request, session: Session = Depends(get_session)):
    blog = BlogService(session)
    directory = DirectoryService(session)
    posts, _ = blog.list_posts(page=1, limit=BLOG_PAGE_SIZE, published=True, sort_by="published_at")
    return render(request, "home.html", {
        "meta": seo.page_meta(path="/"),
        "posts": posts,
        "listings": directory.featured_listings(),
        "directory_categories": directory.list_categories(),
        "destinations": catalog.DESTINATIONS[:4],
    })


# Blog

@router.get("/blog")
def blog_index(request: Request, page: int = Query(1, ge=1), session: Session = Depends(get_session)):
    blog = BlogService(session)
    posts, pagination = blog.list_posts(page=page, limit=BLOG_PAGE_SIZE, published=True, sort_by="published_at")
    return render(request, "blog/index.html", {
        "meta": seo.page_meta("Blog", "Travel stories, guides and tips from around Australia.", "/blog"),
        "posts": posts,
        "pagination": pagination,
        "categories": blog.list_categories(),
        "base_path": "/blog",
    })


def _render_post(
    request: Request,
    session: Session,
    post: BlogPost,
    error: Optional[str] = None,
    status_code: int = 200,
):
    blog = BlogService(session)
    directory = DirectoryService(session)
    detail = blog.to_read(post)
    return render(request, "blog/post.html", {
        "meta": seo.page_meta(
            post.meta_title or post.title,
            post.meta_description or post.excerpt,
            f"/blog/{post.slug}",
            image=post.featured_image,
            og_type="article",
        ),
        "post": detail,
        "related": blog.related_posts(post),
        "listings": [directory.to_read(listing) for listing in IntegrationService(session).listings_for_post(post.id)],
        "comments": CommentService(session).get_thread(post.id),
        "error": error,
    }, status_code=status_code)


@router.get("/blog/{slug}")
def blog_post(request: Request, slug: str, session: Session = Depends(get_session)):
    post = BlogService(session).get_post_by_slug(slug, increment_views=True, visible_only=True)
    if not post:
        return not_found(request, "That blog post could not be found.")
    return _render_post(request, session, post)


@router.post("/blog/{slug}/comments")
def blog_post_comment(
    request: Request,
    slug: str,
    user_name: str = Form(""),
    user_email: str = Form(""),
    content: str = Form(""),
    parent_id: Optional[int] = Form(None),
    session: Session = Depends(get_session),
):
    post = BlogService(session).get_post_by_slug(slug, visible_only=True)
    if not post:
        return not_found(request, "That blog post could not be found.")

    try:
        data = CommentCreate(
            post_id=post.id, user_name=user_name, user_email=user_email, content=content, parent_id=parent_id
        )
    except ValidationError as e:
        return _render_post(request, session, post, error=_validation_message(e), status_code=400)

    CommentService(session).create_comment(data)
    return RedirectResponse(f"/blog/{slug}#comments", status_code=303)


@router.get("/category/{slug}")
def blog_category(request: Request, slug: str, page: int = Query(1, ge=1), session: Session = Depends(get_session)):
    blog = BlogService(session)
    category = blog.get_category_by_slug(slug)
    if not category:
        return not_found(request, "That category does not exist.")
    posts, pagination = blog.list_posts(
        page=page, limit=BLOG_PAGE_SIZE, category_id=category.id, published=True, sort_by="published_at"
    )
    return render(request, "blog/category.html", {
        "meta": seo.page_meta(category.name, category.description, f"/category/{slug}"),
        "category": category,
        "posts": posts,
        "pagination": pagination,
        "base_path": f"/category/{slug}",
    })


@router.get("/tags")
def tag_index(request: Request, session: Session = Depends(get_session)):
    return render(request, "blog/tags.html", {
        "meta": seo.page_meta("Tags", "Browse posts by tag.", "/tags"),
        "tags": BlogService(session).list_tags(),
    })


@router.get("/tags/{slug}")
def tag_page(request: Request, slug: str, page: int = Query(1, ge=1), session: Session = Depends(get_session)):
    blog = BlogService(session)
    tag = blog.get_tag_by_slug(slug)
    if not tag:
        return not_found(request, "That tag does not exist.")
    posts, pagination = blog.list_posts(
        page=page, limit=BLOG_PAGE_SIZE, tag_id=tag.id, published=True, sort_by="published_at"
    )
    return render(request, "blog/tag.html", {
        "meta": seo.page_meta(f"Posts tagged {tag.name}", path=f"/tags/{slug}"),
        "tag": tag,
        "posts": posts,
        "pagination": pagination,
        "base_path": f"/tags/{slug}",
    })


# Directory

@router.get("/directory")
def directory_index(
    request: Request,
    page: int = Query(1, ge=1),
    category: Optional[str] = None,
    location: Optional[str] = None,
    price_range: Optional[str] = None,
    search: Optional[str] = None,
    sort: str = "name",
    order: str = "ASC",
    session: Session = Depends(get_session),
):
    directory = DirectoryService(session)
    listings, pagination = directory.list_listings(
        page=page,
        limit=DIRECTORY_PAGE_SIZE,
        category_slug=category or None,
        location=location or None,
        price_range=price_range or None,
        search=search or None,
        sort=sort,
        order=order,
    )
    filters = {
        "category": category or "",
        "location": location or "",
        "price_range": price_range or "",
        "search": search or "",
        "sort": sort,
        "order": order,
    }
    return render(request, "directory/index.html", {
        "meta": seo.page_meta("Directory", "Places to stay, eat and explore across Australia.", "/directory"),
        "listings": listings,
        "pagination": pagination,
        "categories": directory.list_categories(),
        "locations": directory.count_by_location(),
        "price_ranges": directory.price_ranges(),
        "filters": filters,
        "query_string": urlencode({k: v for k, v in filters.items() if v}),
        "base_path": "/directory",
    })


@router.get("/directory/category/{slug}")
def directory_category(
    request: Request,
    slug: str,
    page: int = Query(1, ge=1),
    location: Optional[str] = None,
    price_range: Optional[str] = None,
    sort: str = "name",
    order: str = "ASC",
    session: Session = Depends(get_session),
):
    directory = DirectoryService(session)
    category = directory.get_category_by_slug(slug)
    if not category:
        return not_found(request, "That directory category does not exist.")
    listings, pagination = directory.list_listings(
        page=page,
        limit=DIRECTORY_PAGE_SIZE,
        category_id=category.id,
        location=location or None,
        price_range=price_range or None,
        sort=sort,
        order=order,
    )
    filters = {
        "location": location or "",
        "price_range": price_range or "",
        "sort": sort,
        "order": order,
    }
    return render(request, "directory/category.html", {
        "meta": seo.page_meta(category.name, category.description, f"/directory/category/{slug}"),
        "category": category,
        "listings": listings,
        "locations": directory.count_by_location(category.id),
        "price_ranges": directory.price_ranges(category.id),
        "filters": filters,
        "query_string": urlencode({k: v for k, v in filters.items() if v}),
        "pagination": pagination,
        "base_path": f"/directory/category/{slug}",
    })


def _render_listing(
    request: Request,
    session: Session,
    listing: DirectoryListing,
    error: Optional[str] = None,
    status_code: int = 200,
):
    directory = DirectoryService(session)
    blog = BlogService(session)
    detail = directory.to_read(listing)
    posts = IntegrationService(session).posts_for_listing(listing.id, visible_only=True)
    return render(request, "directory/listing.html", {
        "meta": seo.page_meta(
            listing.name,
            listing.description,
            f"/directory/{listing.slug}",
            image=listing.images[0] if listing.images else None,
            og_type="place",
        ),
        "listing": detail,
        "posts": [blog.to_summary(p) for p in posts],
        "error": error,
        **directory.review_summary(listing.id),
    }, status_code=status_code)


@router.get("/directory/{slug}")
def directory_listing(request: Request, slug: str, session: Session = Depends(get_session)):
    listing = DirectoryService(session).get_listing_by_slug(slug)
    if not listing:
        return not_found(request, "That listing could not be found.")
    return _render_listing(request, session, listing)


@router.post("/directory/{slug}/reviews")
def directory_listing_review(
    request: Request,
    slug: str,
    user_name: str = Form(""),
    user_email: Optional[str] = Form(None),
    rating: int = Form(0),
    content: str = Form(""),
    session: Session = Depends(get_session),
):
    directory = DirectoryService(session)
    listing = directory.get_listing_by_slug(slug)
    if not listing:
        return not_found(request, "That listing could not be found.")

    try:
        data = ReviewCreate(
            listing_id=listing.id, user_name=user_name, user_email=user_email or None, rating=rating, content=content
        )
    except ValidationError as e:
        return _render_listing(request, session, listing, error=_validation_message(e), status_code=400)

    directory.create_review(data)
    return RedirectResponse(f"/directory/{slug}#reviews", status_code=303)


# Destinations

@router.get("/destinations")
def destination_index(request: Request):
    return render(request, "destinations/index.html", {
        "meta": seo.page_meta(
            "Destinations",
            "Explore the diverse regions and must-visit destinations across Australia, from coastal cities to the stunning Outback.",
            "/destinations",
        ),
        "destinations": catalog.DESTINATIONS,
    })


@router.get("/destinations/{slug}")
def destination_page(request: Request, slug: str, session: Session = Depends(get_session)):
    destination = catalog.get_destination(slug)
    if not destination:
        return not_found(request, "That destination is not in our guide yet.")
    blog = BlogService(session)
    directory = DirectoryService(session)
    return render(request, "destinations/detail.html", {
        "meta": seo.page_meta(destination.name, destination.description, f"/destinations/{slug}", image=destination.image),
        "destination": destination,
        "posts": [blog.to_summary(p) for p in catalog.destination_posts(session, destination)],
        "listings": [directory.to_read(listing) for listing in catalog.destination_listings(session, destination)],
    })


# Search

@router.get("/search")
def search_page(
    request: Request,
    q: str = "",
    type: SearchType = SearchType.ALL,
    page: int = Query(1, ge=1),
    session: Session = Depends(get_session),
):
    results = SearchService(session).search(q, type=type, page=page, limit=DIRECTORY_PAGE_SIZE) if q.strip() else None
    return render(request, "search.html", {
        "meta": seo.page_meta(f"Search: {q}" if q else "Search", path="/search"),
        "q": q,
        "type": type.value,
        "results": results,
    })


# Feeds

@router.get("/sitemap.xml")
def sitemap(request: Request, session: Session = Depends(get_session)):
    return templates.TemplateResponse(
        request,
        "sitemap.xml",
        {"entries": seo.sitemap_entries(session)},
        media_type="application/xml",
    )


@router.get("/rss")
def rss(request: Request, session: Session = Depends(get_session)):
    return templates.TemplateResponse(
        request,
        "rss.xml",
        {"channel": seo.feed_channel(), "items": seo.feed_items(session)},
        media_type="application/xml",
    )
