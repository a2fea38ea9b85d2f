"""Slug generation and validation shared by posts, terms and listings."""
import re
from typing import Optional, Type

from fastapi import HTTPException
from slugify import slugify
from sqlmodel import Session, SQLModel, select

MAX_SLUG_LENGTH = 300
SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def make_slug(text: Optional[str]) -> str:
    """Lowercase, ASCII only, words joined by single hyphens."""
    return slugify(text or "", max_length=MAX_SLUG_LENGTH)


def is_valid_slug(slug: Optional[str]) -> bool:
    if not slug or len(slug) > MAX_SLUG_LENGTH:
        return False
    return SLUG_PATTERN.match(slug) is not None


def slug_exists(session: Session, model: Type[SQLModel], slug: str, exclude_id: Optional[int] = None) -> bool:
    query = select(model.id).where(model.slug == slug)
    if exclude_id is not None:
        query = query.where(model.id != exclude_id)
    return session.exec(query).first() is not None


def unique_slug(session: Session, model: Type[SQLModel], base: str, exclude_id: Optional[int] = None) -> str:
    """Return base, or base-2, base-3, ... whichever is free first."""
    slug = base
    i = 2
    while slug_exists(session, model, slug, exclude_id):
        suffix = f"-{i}"
        slug = f"{base[:MAX_SLUG_LENGTH - len(suffix)]}{suffix}"
        i += 1
    return slug


def resolve_slug(
    session: Session,
    model: Type[SQLModel],
    source: Optional[str],
    requested: Optional[str] = None,
    exclude_id: Optional[int] = None,
) -> str:
    """Validate an explicitly requested slug, or derive a free one from source."""
    if requested:
        requested = requested.strip()
        if not is_valid_slug(requested):
            raise HTTPException(
                status_code=400,
                detail="Slug may only contain lowercase letters, numbers and single hyphens",
            )
        if slug_exists(session, model, requested, exclude_id):
            raise HTTPException(status_code=409, detail=f"Slug '{requested}' is already in use")
        return requested

    base = make_slug(source)
    if not base:
        raise HTTPException(status_code=400, detail="A slug cannot be derived from an empty name")
    return unique_slug(session, model, base, exclude_id)
