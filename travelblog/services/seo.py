from dataclasses import dataclass
from datetime import datetime
from email.utils import format_datetime
from typing import List, Optional

from sqlalchemy import desc
from sqlmodel import Session, select

from travelblog.core.config import settings
from travelblog.core.dates import as_utc, utcnow
from travelblog.models.blog import BlogCategory, BlogPost, BlogTag
from travelblog.models.directory import DirectoryCategory, DirectoryListing
from travelblog.models.user import User
from travelblog.services.blog import visible_condition
from travelblog.services.destinations import DESTINATIONS

RSS_ITEM_LIMIT = 20


@dataclass
class SitemapEntry:
    loc: str
    lastmod: datetime
    changefreq: str
    priority: float


@dataclass
class FeedItem:
    title: str
    link: str
    guid: str
    description: str
    pub_date: str
    author: str
    categories: List[str]


def absolute_url(path: str = "") -> str:
    return f"{settings.BASE_URL.rstrip('/')}/{path.lstrip('/')}" if path else settings.BASE_URL.rstrip("/")


def page_meta(
    title: Optional[str] = None,
    description: Optional[str] = None,
    path: str = "",
    image: Optional[str] = None,
    og_type: str = "website",
) -> dict:
    """Title, description, canonical URL and Open Graph values for a page."""
    full_title = f"{title} | {settings.SITE_NAME}" if title else settings.SITE_NAME
    if image and image.startswith("/"):
        image = absolute_url(image)
    return {
        "title": full_title,
        "description": description or settings.SITE_DESCRIPTION,
        "canonical": absolute_url(path),
        "og_type": og_type,
        "image": image,
        "site_name": settings.SITE_NAME,
    }


def sitemap_entries(session: Session) -> List[SitemapEntry]:
    now = utcnow()
    entries = [
        SitemapEntry(absolute_url(), now, "daily", 1.0),
        SitemapEntry(absolute_url("/blog"), now, "daily", 0.9),
        SitemapEntry(absolute_url("/directory"), now, "weekly", 0.9),
        SitemapEntry(absolute_url("/destinations"), now, "weekly", 0.9),
        SitemapEntry(absolute_url("/tags"), now, "weekly", 0.6),
    ]

    posts = session.exec(select(BlogPost).where(visible_condition()).order_by(desc(BlogPost.published_at))).all()
    for post in posts:
        entries.append(SitemapEntry(
            absolute_url(f"/blog/{post.slug}"),
            post.updated_at or post.published_at or post.created_at,
            "weekly",
            0.8,
        ))

    for category in session.exec(select(BlogCategory).order_by(BlogCategory.name)).all():
        entries.append(SitemapEntry(absolute_url(f"/category/{category.slug}"), category.updated_at, "weekly", 0.7))

    for tag in session.exec(select(BlogTag).order_by(BlogTag.name)).all():
        entries.append(SitemapEntry(absolute_url(f"/tags/{tag.slug}"), tag.created_at, "weekly", 0.5))

    for listing in session.exec(select(DirectoryListing).order_by(DirectoryListing.name)).all():
        entries.append(SitemapEntry(
            absolute_url(f"/directory/{listing.slug}"),
            listing.updated_at or listing.created_at,
            "weekly",
            0.8,
        ))

    for category in session.exec(select(DirectoryCategory).order_by(DirectoryCategory.name)).all():
        entries.append(SitemapEntry(absolute_url(f"/directory/category/{category.slug}"), now, "weekly", 0.7))

    for destination in DESTINATIONS:
        entries.append(SitemapEntry(absolute_url(f"/destinations/{destination.slug}"), now, "weekly", 0.8))

    return entries


def feed_items(session: Session, limit: int = RSS_ITEM_LIMIT) -> List[FeedItem]:
    posts = session.exec(
        select(BlogPost).where(visible_condition()).order_by(desc(BlogPost.published_at), desc(BlogPost.id)).limit(limit)
    ).all()

    items = []
    for post in posts:
        author = session.get(User, post.author_id) if post.author_id else None
        items.append(FeedItem(
            title=post.title,
            link=absolute_url(f"/blog/{post.slug}"),
            guid=str(post.id),
            description=post.excerpt or "",
            pub_date=format_datetime(as_utc(post.published_at or post.created_at)),
            author=author.name if author and author.name else settings.COPYRIGHT,
            categories=[t.name for t in post.tags],
        ))
    return items


def feed_channel() -> dict:
    return {
        "title": settings.SITE_NAME,
        "description": settings.SITE_DESCRIPTION,
        "link": absolute_url(),
        "feed_url": absolute_url("/rss"),
        "language": "en",
        "pub_date": format_datetime(utcnow()),
        "copyright": f"{utcnow().year} {settings.COPYRIGHT}",
    }
