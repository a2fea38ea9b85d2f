"""Server-rendered admin dashboard.

Forms post back here and call the same services as the JSON admin API.
Authentication uses the access token stored in a cookie at login.
"""
from datetime import datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile
from fastapi.responses import RedirectResponse
from pydantic import ValidationError
from sqlmodel import Session

from travelblog.core.config import settings
from travelblog.core.security import create_access_token
from travelblog.core.templates import templates
from travelblog.db.session import get_session
from travelblog.models.admin_user import AdminUser
from travelblog.models.blog import PostStatus
from travelblog.models.media import MediaType
from travelblog.models.user import User
from travelblog.routers.admin import dashboard_stats, require_permission
from travelblog.routers.auth import ACCESS_TOKEN_COOKIE, token_from_request, user_from_token
from travelblog.schemas import ListingCreate, ListingUpdate, MediaUpdate, PostCreate, PostUpdate, TermCreate
from travelblog.services.auth import AuthService, check_permission
from travelblog.services.blog import BlogService
from travelblog.services.directory import DirectoryService
from travelblog.services.integration import IntegrationService
from travelblog.services.media import MediaService
from travelblog.services.storage import get_storage

router = APIRouter()

PAGE_SIZE = 20


class LoginRequired(Exception):
    """Raised when a dashboard page is requested without a valid admin session."""


def get_dashboard_admin(request: Request, session: Session = Depends(get_session)) -> AdminUser:
    service = AuthService(session)
    user = user_from_token(token_from_request(request, None), service)
    if not user:
        raise LoginRequired()
    admin_user = service.get_admin_for_user(user)
    if not admin_user or not admin_user.is_active:
        raise LoginRequired()
    return admin_user


def render(request: Request, name: str, admin_user: Optional[AdminUser], session: Session, status_code: int = 200, **context):
    if admin_user:
        user = session.get(User, admin_user.user_id)
        context["admin_name"] = user.name or user.email
        context["can"] = lambda permission: check_permission(admin_user, permission)
    context.setdefault("error", None)
    return templates.TemplateResponse(request, f"admin/{name}", context, status_code=status_code)


def redirect(path: str) -> RedirectResponse:
    return RedirectResponse(path, status_code=303)


def _int_or_none(value: Optional[str]) -> Optional[int]:
    value = (value or "").strip()
    return int(value) if value.isdigit() else None


def _float_or_none(value: Optional[str]) -> Optional[float]:
    value = (value or "").strip()
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"'{value}' is not a number")


def _datetime_or_none(value: Optional[str]) -> Optional[datetime]:
    value = (value or "").strip()
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"'{value}' is not a valid date")


def _lines(value: Optional[str]) -> List[str]:
    return [line.strip() for line in (value or "").splitlines() if line.strip()]


def parse_hours(value: Optional[str]) -> Dict[str, str]:
    """One "day: hours" pair per line."""
    hours = {}
    for line in _lines(value):
        if ":" not in line:
            continue
        day, text = line.split(":", 1)
        hours[day.strip().lower()] = text.strip()
    return hours


def format_hours(hours: Optional[Dict[str, str]]) -> str:
    return "\n".join(f"{day}: {text}" for day, text in (hours or {}).items())


def _error_message(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        return "; ".join(f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors())
    return str(exc.detail)


def _error_status(exc: Exception) -> int:
    return exc.status_code if isinstance(exc, HTTPException) else 400


# Login

@router.get("/login")
def login_form(request: Request, session: Session = Depends(get_session)):
    return render(request, "login.html", None, session)


@router.post("/login")
def login(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    session: Session = Depends(get_session),
):
    service = AuthService(session)
    user, error_message = service.authenticate_user(email, password)
    if user:
        admin_user = service.get_admin_for_user(user)
        if not admin_user or not admin_user.is_active:
            user, error_message = None, "This account does not have admin access"
    if not user:
        return render(request, "login.html", None, session, status_code=401, error=error_message, email=email)

    response = redirect("/admin")
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        create_access_token(data={"sub": user.email}),
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
    )
    return response


@router.post("/logout")
def logout():
    response = redirect("/admin/login")
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    return response


@router.get("")
def overview(
    request: Request,
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "dashboard.read")
    return render(request, "overview.html", admin_user, session, stats=dashboard_stats(session))


# Posts

@router.get("/posts")
def post_list(
    request: Request,
    page: int = Query(1, ge=1),
    search: Optional[str] = None,
    status: Optional[PostStatus] = None,
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "posts.read")
    posts, pagination = BlogService(session).list_posts(
        page=page, limit=PAGE_SIZE, search=search or None, status=status
    )
    return render(
        request, "posts.html", admin_user, session,
        posts=posts, pagination=pagination, search=search or "", status=status.value if status else "",
    )


def _post_form(request: Request, admin_user: AdminUser, session: Session, post=None, form=None, error=None, status_code=200):
    blog = BlogService(session)
    return render(
        request, "post_form.html", admin_user, session, status_code=status_code,
        post=post, form=form or {}, error=error,
        categories=blog.list_categories(), tags=blog.list_tags(), statuses=list(PostStatus),
    )


def _post_fields(
    title: str,
    slug: str,
    content: str,
    excerpt: str,
    featured_image: str,
    category_id: str,
    tags: List[str],
    status: str,
    publish_date: str,
    meta_title: str,
    meta_description: str,
) -> dict:
    return {
        "title": title,
        "slug": slug.strip() or None,
        "content": content,
        "excerpt": excerpt or None,
        "featured_image": featured_image or None,
        "category_id": _int_or_none(category_id),
        "tags": [int(t) for t in tags if t.isdigit()],
        "status": status or PostStatus.DRAFT.value,
        "publish_date": _datetime_or_none(publish_date),
        "meta_title": meta_title or None,
        "meta_description": meta_description or None,
    }


@router.get("/posts/new")
def post_new(
    request: Request,
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "posts.create")
    return _post_form(request, admin_user, session)


@router.post("/posts/new")
def post_create(
    request: Request,
    title: str = Form(""),
    slug: str = Form(""),
    content: str = Form(""),
    excerpt: str = Form(""),
    featured_image: str = Form(""),
    category_id: str = Form(""),
    tags: List[str] = Form([]),
    status: str = Form("draft"),
    publish_date: str = Form(""),
    meta_title: str = Form(""),
    meta_description: str = Form(""),
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "posts.create")
    form = dict(
        title=title, slug=slug, content=content, excerpt=excerpt, featured_image=featured_image,
        category_id=category_id, tags=tags, status=status, publish_date=publish_date,
        meta_title=meta_title, meta_description=meta_description,
    )
    try:
        data = PostCreate(**_post_fields(**form))
        BlogService(session).create_post(data, author_id=admin_user.user_id)
    except (ValidationError, HTTPException) as e:
        return _post_form(request, admin_user, session, form=form, error=_error_message(e), status_code=_error_status(e))
    return redirect("/admin/posts")


@router.get("/posts/{post_id}/edit")
def post_edit(
    request: Request,
    post_id: int,
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "posts.update")
    blog = BlogService(session)
    post = blog.to_read(blog.get_post(post_id))
    form = post.model_dump()
    form["tags"] = [str(t.id) for t in post.tags]
    form["category_id"] = str(post.category_id or "")
    form["publish_date"] = post.published_at.strftime("%Y-%m-%dT%H:%M") if post.published_at else ""
    return _post_form(request, admin_user, session, post=post, form=form)


@router.post("/posts/{post_id}/edit")
def post_update(
    request: Request,
    post_id: int,
    title: str = Form(""),
    slug: str = Form(""),
    content: str = Form(""),
    excerpt: str = Form(""),
    featured_image: str = Form(""),
    category_id: str = Form(""),
    tags: List[str] = Form([]),
    status: str = Form("draft"),
    publish_date: str = Form(""),
    meta_title: str = Form(""),
    meta_description: str = Form(""),
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "posts.update")
    blog = BlogService(session)
    post = blog.get_post(post_id)
    form = dict(
        title=title, slug=slug, content=content, excerpt=excerpt, featured_image=featured_image,
        category_id=category_id, tags=tags, status=status, publish_date=publish_date,
        meta_title=meta_title, meta_description=meta_description,
    )
    try:
        blog.update_post(post_id, PostUpdate(**_post_fields(**form)))
    except (ValidationError, HTTPException) as e:
        return _post_form(
            request, admin_user, session, post=blog.to_read(post), form=form,
            error=_error_message(e), status_code=_error_status(e),
        )
    return redirect("/admin/posts")


@router.post("/posts/{post_id}/delete")
def post_delete(
    post_id: int,
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "posts.delete")
    BlogService(session).delete_post(post_id)
    return redirect("/admin/posts")


# Categories and tags

@router.get("/categories")
def category_list(
    request: Request,
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "posts.read")
    return render(
        request, "terms.html", admin_user, session,
        kind="categories", title="Categories", terms=BlogService(session).list_categories(),
    )


@router.post("/categories")
def category_create(
    request: Request,
    name: str = Form(""),
    slug: str = Form(""),
    description: str = Form(""),
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "categories.manage")
    blog = BlogService(session)
    try:
        blog.create_category(TermCreate(name=name, slug=slug.strip() or None, description=description or None))
    except (ValidationError, HTTPException) as e:
        return render(
            request, "terms.html", admin_user, session, status_code=_error_status(e),
            kind="categories", title="Categories", terms=blog.list_categories(), error=_error_message(e),
        )
    return redirect("/admin/categories")


@router.post("/categories/{category_id}/delete")
def category_delete(
    category_id: int,
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "categories.manage")
    BlogService(session).delete_category(category_id)
    return redirect("/admin/categories")


@router.get("/tags")
def tag_list(
    request: Request,
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "posts.read")
    return render(request, "terms.html", admin_user, session, kind="tags", title="Tags", terms=BlogService(session).list_tags())


@router.post("/tags")
def tag_create(
    request: Request,
    name: str = Form(""),
    slug: str = Form(""),
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "tags.manage")
    blog = BlogService(session)
    try:
        blog.create_tag(TermCreate(name=name, slug=slug.strip() or None))
    except (ValidationError, HTTPException) as e:
        return render(
            request, "terms.html", admin_user, session, status_code=_error_status(e),
            kind="tags", title="Tags", terms=blog.list_tags(), error=_error_message(e),
        )
    return redirect("/admin/tags")


@router.post("/tags/{tag_id}/delete")
def tag_delete(
    tag_id: int,
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "tags.manage")
    BlogService(session).delete_tag(tag_id)
    return redirect("/admin/tags")


# Media

def _media_page(request, admin_user, session, page=1, type=None, search=None, error=None, status_code=200):
    items, pagination = MediaService(session).list_media(page=page, limit=PAGE_SIZE, file_type=type, search=search)
    return render(
        request, "media.html", admin_user, session, status_code=status_code,
        items=items, pagination=pagination, type=type.value if type else "", search=search or "",
        types=list(MediaType), error=error,
    )


@router.get("/media")
def media_list(
    request: Request,
    page: int = Query(1, ge=1),
    type: Optional[MediaType] = None,
    search: Optional[str] = None,
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "media.read")
    return _media_page(request, admin_user, session, page=page, type=type, search=search or None)


@router.post("/media")
async def media_upload(
    request: Request,
    file: UploadFile = File(...),
    alt_text: str = Form(""),
    caption: str = Form(""),
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
    storage=Depends(get_storage),
):
    require_permission(admin_user, "media.upload")
    content = await file.read()
    try:
        MediaService(session, storage).upload(
            content,
            original_filename=file.filename or "upload",
            content_type=file.content_type,
            alt_text=alt_text or None,
            caption=caption or None,
        )
    except HTTPException as e:
        return _media_page(request, admin_user, session, error=e.detail, status_code=e.status_code)
    return redirect("/admin/media")


@router.post("/media/{media_id}/edit")
def media_update(
    media_id: int,
    alt_text: str = Form(""),
    caption: str = Form(""),
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "media.update")
    MediaService(session).update_media(media_id, MediaUpdate(alt_text=alt_text or None, caption=caption or None))
    return redirect("/admin/media")


@router.post("/media/{media_id}/delete")
def media_delete(
    media_id: int,
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
    storage=Depends(get_storage),
):
    require_permission(admin_user, "media.delete")
    MediaService(session, storage).delete_media(media_id)
    return redirect("/admin/media")


# Directory

@router.get("/directory")
def listing_list(
    request: Request,
    page: int = Query(1, ge=1),
    search: Optional[str] = None,
    category_id: Optional[str] = None,
    sort: str = "name",
    order: str = "ASC",
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "directory.read")
    directory = DirectoryService(session)
    listings, pagination = directory.list_listings(
        page=page, limit=PAGE_SIZE, search=search or None, category_id=_int_or_none(category_id), sort=sort, order=order
    )
    return render(
        request, "listings.html", admin_user, session,
        listings=listings, pagination=pagination, categories=directory.list_categories(),
        search=search or "", category_id=category_id or "", sort=sort, order=order,
    )


@router.get("/directory/categories")
def directory_category_list(
    request: Request,
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "directory.read")
    return render(
        request, "terms.html", admin_user, session,
        kind="directory/categories", title="Directory categories", terms=DirectoryService(session).list_categories(),
    )


@router.post("/directory/categories")
def directory_category_create(
    request: Request,
    name: str = Form(""),
    slug: str = Form(""),
    description: str = Form(""),
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "directory.categories.manage")
    directory = DirectoryService(session)
    try:
        directory.create_category(TermCreate(name=name, slug=slug.strip() or None, description=description or None))
    except (ValidationError, HTTPException) as e:
        return render(
            request, "terms.html", admin_user, session, status_code=_error_status(e),
            kind="directory/categories", title="Directory categories",
            terms=directory.list_categories(), error=_error_message(e),
        )
    return redirect("/admin/directory/categories")


@router.post("/directory/categories/{category_id}/delete")
def directory_category_delete(
    request: Request,
    category_id: int,
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "directory.categories.manage")
    directory = DirectoryService(session)
    try:
        directory.delete_category(category_id)
    except HTTPException as e:
        return render(
            request, "terms.html", admin_user, session, status_code=e.status_code,
            kind="directory/categories", title="Directory categories",
            terms=directory.list_categories(), error=e.detail,
        )
    return redirect("/admin/directory/categories")


def _listing_form(request, admin_user, session, listing=None, form=None, error=None, status_code=200):
    return render(
        request, "listing_form.html", admin_user, session, status_code=status_code,
        listing=listing, form=form or {}, error=error, categories=DirectoryService(session).list_categories(),
    )


def _listing_fields(form: dict) -> dict:
    return {
        "name": form["name"],
        "slug": form["slug"].strip() or None,
        "category_id": _int_or_none(form["category_id"]),
        "description": form["description"] or None,
        "location": form["location"] or None,
        "address": form["address"] or None,
        "latitude": _float_or_none(form["latitude"]),
        "longitude": _float_or_none(form["longitude"]),
        "website": form["website"] or None,
        "phone": form["phone"] or None,
        "email": form["email"] or None,
        "price_range": form["price_range"] or None,
        "hours": parse_hours(form["hours"]),
        "images": _lines(form["images"]),
        "featured": bool(form["featured"]),
    }


@router.get("/directory/new")
def listing_new(
    request: Request,
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "directory.create")
    return _listing_form(request, admin_user, session)


@router.post("/directory/new")
def listing_create(
    request: Request,
    name: str = Form(""),
    slug: str = Form(""),
    category_id: str = Form(""),
    description: str = Form(""),
    location: str = Form(""),
    address: str = Form(""),
    latitude: str = Form(""),
    longitude: str = Form(""),
    website: str = Form(""),
    phone: str = Form(""),
    email: str = Form(""),
    price_range: str = Form(""),
    hours: str = Form(""),
    images: str = Form(""),
    featured: Optional[str] = Form(None),
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "directory.create")
    form = dict(
        name=name, slug=slug, category_id=category_id, description=description, location=location,
        address=address, latitude=latitude, longitude=longitude, website=website, phone=phone, email=email,
        price_range=price_range, hours=hours, images=images, featured=featured,
    )
    try:
        DirectoryService(session).create_listing(ListingCreate(**_listing_fields(form)))
    except (ValidationError, HTTPException) as e:
        return _listing_form(request, admin_user, session, form=form, error=_error_message(e), status_code=_error_status(e))
    return redirect("/admin/directory")


@router.get("/directory/{listing_id}/edit")
def listing_edit(
    request: Request,
    listing_id: int,
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "directory.update")
    listing = DirectoryService(session).get_listing(listing_id)
    form = listing.model_dump()
    form["hours"] = format_hours(listing.hours)
    form["images"] = "\n".join(listing.images or [])
    form["category_id"] = str(listing.category_id)
    return _listing_form(request, admin_user, session, listing=listing, form=form)


@router.post("/directory/{listing_id}/edit")
def listing_update(
    request: Request,
    listing_id: int,
    name: str = Form(""),
    slug: str = Form(""),
    category_id: str = Form(""),
    description: str = Form(""),
    location: str = Form(""),
    address: str = Form(""),
    latitude: str = Form(""),
    longitude: str = Form(""),
    website: str = Form(""),
    phone: str = Form(""),
    email: str = Form(""),
    price_range: str = Form(""),
    hours: str = Form(""),
    images: str = Form(""),
    featured: Optional[str] = Form(None),
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "directory.update")
    directory = DirectoryService(session)
    listing = directory.get_listing(listing_id)
    form = dict(
        name=name, slug=slug, category_id=category_id, description=description, location=location,
        address=address, latitude=latitude, longitude=longitude, website=website, phone=phone, email=email,
        price_range=price_range, hours=hours, images=images, featured=featured,
    )
    try:
        directory.update_listing(listing_id, ListingUpdate(**_listing_fields(form)))
    except (ValidationError, HTTPException) as e:
        return _listing_form(
            request, admin_user, session, listing=listing, form=form,
            error=_error_message(e), status_code=_error_status(e),
        )
    return redirect("/admin/directory")


@router.post("/directory/{listing_id}/delete")
def listing_delete(
    listing_id: int,
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "directory.delete")
    DirectoryService(session).delete_listing(listing_id)
    return redirect("/admin/directory")


# Integration

def _integration_page(request, admin_user, session, error=None, status_code=200):
    blog = BlogService(session)
    directory = DirectoryService(session)
    posts, _ = blog.list_posts(page=1, limit=100, sort_by="title", sort_order="asc")
    listings, _ = directory.list_listings(page=1, limit=100)
    return render(
        request, "integration.html", admin_user, session, status_code=status_code,
        links=IntegrationService(session).list_links(), posts=posts, listings=listings, error=error,
    )


@router.get("/integration")
def integration(
    request: Request,
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "integration.read")
    return _integration_page(request, admin_user, session)


@router.post("/integration/link")
def integration_link(
    request: Request,
    blog_post_id: int = Form(...),
    directory_listing_id: int = Form(...),
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "integration.manage")
    try:
        IntegrationService(session).link(blog_post_id, directory_listing_id)
    except HTTPException as e:
        return _integration_page(request, admin_user, session, error=e.detail, status_code=e.status_code)
    return redirect("/admin/integration")


@router.post("/integration/unlink")
def integration_unlink(
    blog_post_id: int = Form(...),
    directory_listing_id: int = Form(...),
    admin_user: AdminUser = Depends(get_dashboard_admin),
    session: Session = Depends(get_session),
):
    require_permission(admin_user, "integration.manage")
    IntegrationService(session).unlink(blog_post_id, directory_listing_id)
    return redirect("/admin/integration")
