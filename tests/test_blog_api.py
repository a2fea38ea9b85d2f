from datetime import datetime, timedelta, timezone

from travelblog.models.blog import BlogPost, PostStatus


def test_public_list_only_shows_published(client, published_post, draft_post):
    response = client.get("/api/v1/blog/posts")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["pages"] == 1
    assert [p["slug"] for p in data["posts"]] == ["48-hours-in-sydney"]


def test_public_list_filters_by_category_and_tag(client, published_post):
    assert client.get("/api/v1/blog/posts", params={"category": "travel-guides"}).json()["total"] == 1
    assert client.get("/api/v1/blog/posts", params={"tag": "beaches"}).json()["total"] == 1
    assert client.get("/api/v1/blog/posts", params={"tag": "missing"}).status_code == 404


def test_post_detail_counts_views(client, published_post):
    client.get("/api/v1/blog/posts/48-hours-in-sydney")
    response = client.get("/api/v1/blog/posts/48-hours-in-sydney")
    assert response.status_code == 200
    post = response.json()["post"]
    assert post["views_count"] == 2
    assert post["category_name"] == "Travel Guides"
    assert [t["slug"] for t in post["tags"]] == ["beaches"]


def test_draft_detail_is_hidden(client, draft_post):
    assert client.get(f"/api/v1/blog/posts/{draft_post.slug}").status_code == 404


def test_scheduled_post_becomes_visible_after_publish_date(client, session, category):
    session.add(BlogPost(
        title="Future", slug="future", content="x", status=PostStatus.SCHEDULED,
        published_at=datetime.now(timezone.utc) + timedelta(days=1),
    ))
    session.add(BlogPost(
        title="Past", slug="past", content="x", status=PostStatus.SCHEDULED,
        published_at=datetime.now(timezone.utc) - timedelta(hours=1),
    ))
    session.commit()

    slugs = [p["slug"] for p in client.get("/api/v1/blog/posts").json()["posts"]]
    assert slugs == ["past"]


def test_admin_create_post_generates_unique_slug(client, auth_headers, published_post, category, tag):
    response = client.post(
        "/api/v1/admin/blog/posts",
        json={"title": "48 Hours in Sydney", "content": "Second take", "category_id": category.id, "tags": [tag.id]},
        headers=auth_headers,
    )
    assert response.status_code == 201
    data = response.json()
    assert data["slug"] == "48-hours-in-sydney-2"
    assert data["status"] == "draft"
    assert data["author_name"] == "Site Admin"


def test_admin_create_post_with_unknown_category(client, auth_headers):
    response = client.post(
        "/api/v1/admin/blog/posts",
        json={"title": "Nowhere", "content": "x", "category_id": 999},
        headers=auth_headers,
    )
    assert response.status_code == 400


def test_scheduling_requires_publish_date(client, auth_headers):
    response = client.post(
        "/api/v1/admin/blog/posts",
        json={"title": "Later", "content": "x", "status": "scheduled"},
        headers=auth_headers,
    )
    assert response.status_code == 400


def test_publishing_keeps_original_date(client, auth_headers, draft_post):
    first = client.put(f"/api/v1/admin/blog/posts/{draft_post.id}", json={"published": True}, headers=auth_headers).json()
    assert first["status"] == "published"

    second = client.put(
        f"/api/v1/admin/blog/posts/{draft_post.id}", json={"excerpt": "Updated", "published": True}, headers=auth_headers
    ).json()
    assert second["published_at"] == first["published_at"]
    assert second["excerpt"] == "Updated"


def test_unpublishing_hides_post(client, auth_headers, published_post):
    response = client.put(
        f"/api/v1/admin/blog/posts/{published_post.id}", json={"status": "draft"}, headers=auth_headers
    )
    assert response.json()["published"] is False
    assert client.get("/api/v1/blog/posts").json()["total"] == 0


def test_admin_list_includes_drafts_and_filters(client, auth_headers, published_post, draft_post):
    data = client.get("/api/v1/admin/blog/posts", headers=auth_headers).json()
    assert data["total"] == 2

    data = client.get("/api/v1/admin/blog/posts", params={"status": "draft"}, headers=auth_headers).json()
    assert [p["id"] for p in data["posts"]] == [draft_post.id]


def test_delete_post(client, auth_headers, published_post):
    assert client.delete(f"/api/v1/admin/blog/posts/{published_post.id}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/v1/admin/blog/posts/{published_post.id}", headers=auth_headers).status_code == 404


def test_moderator_cannot_create_posts(client, moderator_headers):
    response = client.post("/api/v1/admin/blog/posts", json={"title": "x", "content": "x"}, headers=moderator_headers)
    assert response.status_code == 403
    assert response.json()["detail"] == "Insufficient permissions"


def test_categories_and_tags_with_counts(client, auth_headers, published_post):
    categories = client.get("/api/v1/blog/categories").json()
    assert categories[0]["post_count"] == 1

    response = client.post("/api/v1/admin/blog/tags", json={"name": "Road Trip"}, headers=auth_headers)
    assert response.status_code == 201
    assert response.json()["slug"] == "road-trip"

    tags = {t["slug"]: t["post_count"] for t in client.get("/api/v1/blog/tags").json()}
    assert tags == {"beaches": 1, "road-trip": 0}


def test_duplicate_category_slug_is_rejected(client, auth_headers, category):
    response = client.post(
        "/api/v1/admin/blog/categories", json={"name": "Other", "slug": category.slug}, headers=auth_headers
    )
    assert response.status_code == 409


def test_published_filters_do_not_overlap(client, auth_headers, session, published_post, draft_post):
    session.add(BlogPost(
        title="Gone Live", slug="gone-live", content="x", status=PostStatus.SCHEDULED,
        published_at=datetime.now(timezone.utc) - timedelta(days=1),
    ))
    session.add(BlogPost(
        title="Next Week", slug="next-week", content="x", status=PostStatus.SCHEDULED,
        published_at=datetime.now(timezone.utc) + timedelta(days=7),
    ))
    session.commit()

    def slugs(published):
        response = client.get("/api/v1/admin/blog/posts", params={"published": published}, headers=auth_headers)
        return {p["slug"] for p in response.json()["posts"]}

    assert slugs(True) == {published_post.slug, "gone-live"}
    assert slugs(False) == {draft_post.slug, "next-week"}


def test_schedule_with_offset_date_is_stored_in_utc(client, auth_headers, draft_post):
    response = client.put(
        f"/api/v1/admin/blog/posts/{draft_post.id}",
        json={"status": "scheduled", "publish_date": "2030-01-01T10:00:00+10:00"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["published_at"].startswith("2030-01-01T00:00:00")
