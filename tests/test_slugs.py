import pytest
from fastapi import HTTPException

from travelblog.models.blog import BlogCategory
from travelblog.services.slugs import is_valid_slug, make_slug, resolve_slug


def test_make_slug_normalises_text():
    assert make_slug("48 Hours in Sydney!") == "48-hours-in-sydney"
    assert make_slug("  Café   Crawl  ") == "cafe-crawl"
    assert make_slug(None) == ""


def test_is_valid_slug():
    assert is_valid_slug("gold-coast")
    assert not is_valid_slug("Gold-Coast")
    assert not is_valid_slug("gold--coast")
    assert not is_valid_slug("-gold")
    assert not is_valid_slug("")


def test_resolve_slug_appends_counter_when_taken(session):
    session.add(BlogCategory(name="Guides", slug="guides"))
    session.commit()

    assert resolve_slug(session, BlogCategory, "Guides") == "guides-2"


def test_resolve_slug_rejects_taken_or_malformed_request(session):
    session.add(BlogCategory(name="Guides", slug="guides"))
    session.commit()

    with pytest.raises(HTTPException) as exc:
        resolve_slug(session, BlogCategory, "Other", "guides")
    assert exc.value.status_code == 409

    with pytest.raises(HTTPException) as exc:
        resolve_slug(session, BlogCategory, "Other", "Not A Slug")
    assert exc.value.status_code == 400


def test_resolve_slug_ignores_own_row(session):
    category = BlogCategory(name="Guides", slug="guides")
    session.add(category)
    session.commit()

    assert resolve_slug(session, BlogCategory, "Guides", "guides", exclude_id=category.id) == "guides"
