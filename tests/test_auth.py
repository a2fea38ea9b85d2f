from datetime import datetime, timedelta, timezone

from tests.conftest import ADMIN_EMAIL, ADMIN_PASSWORD
from travelblog.models.blog import BlogPost, PostStatus


def test_login_returns_bearer_token(client, admin_user):
    response = client.post("/api/v1/auth/token", data={"username": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["access_token"]


def test_login_with_wrong_password(client, admin_user):
    response = client.post("/api/v1/auth/token", data={"username": ADMIN_EMAIL, "password": "wrong-password"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Incorrect email or password"


def test_email_lookup_is_case_insensitive(client, admin_user):
    response = client.post("/api/v1/auth/token", data={"username": ADMIN_EMAIL.upper(), "password": ADMIN_PASSWORD})
    assert response.status_code == 200


def test_admin_routes_require_token(client):
    assert client.get("/api/v1/admin/me").status_code == 401


def test_admin_me(client, auth_headers):
    response = client.get("/api/v1/admin/me", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["email"] == ADMIN_EMAIL
    assert data["role"] == "super_admin"


def test_permission_check_by_role(client, editor_headers):
    allowed = client.get("/api/v1/admin/permissions/check", params={"permission": "posts.create"}, headers=editor_headers)
    denied = client.get("/api/v1/admin/permissions/check", params={"permission": "directory.create"}, headers=editor_headers)
    assert allowed.json() == {"hasPermission": True}
    assert denied.json() == {"hasPermission": False}


def test_admin_user_management_is_super_admin_only(client, auth_headers, editor_headers):
    response = client.post(
        "/api/v1/admin/admin-users",
        json={"email": "mod@example.com", "password": "modpass123", "role": "moderator"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    new_admin = response.json()
    assert new_admin["role"] == "moderator"

    assert client.get("/api/v1/admin/admin-users", headers=editor_headers).status_code == 403

    response = client.put(
        f"/api/v1/admin/admin-users/{new_admin['id']}",
        json={"permissions": ["directory.read"]},
        headers=auth_headers,
    )
    assert response.json()["permissions"] == ["directory.read"]

    response = client.delete(f"/api/v1/admin/admin-users/{new_admin['id']}", headers=auth_headers)
    assert response.status_code == 200
    emails = [a["email"] for a in client.get("/api/v1/admin/admin-users", headers=auth_headers).json()]
    assert "mod@example.com" not in emails


def test_admin_cannot_remove_themselves(client, auth_headers, admin_user):
    response = client.delete(f"/api/v1/admin/admin-users/{admin_user.id}", headers=auth_headers)
    assert response.status_code == 400


def test_dashboard_stats(client, auth_headers, published_post, draft_post, listing):
    response = client.get("/api/v1/admin/dashboard/stats", headers=auth_headers)
    assert response.status_code == 200
    stats = response.json()
    assert stats["totalPosts"] == 2
    assert stats["publishedPosts"] == 1
    assert stats["draftPosts"] == 1
    assert stats["totalListings"] == 1
    assert len(stats["recentPosts"]) == 2


def test_email_lookup_does_not_match_patterns(client, admin_user):
    for username in ["%", "_dmin@example.com", "admin@%"]:
        response = client.post("/api/v1/auth/token", data={"username": username, "password": ADMIN_PASSWORD})
        assert response.status_code == 401


def test_new_admin_with_lookalike_email_is_created(client, auth_headers, admin_user):
    response = client.post(
        "/api/v1/admin/admin-users",
        json={"email": "_dmin@example.com", "password": "lookalike123", "role": "editor"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    assert response.json()["email"] == "_dmin@example.com"
    assert response.json()["user_id"] != admin_user.id


def test_dashboard_stats_count_live_scheduled_posts_as_published(client, auth_headers, session, published_post):
    session.add(BlogPost(
        title="Gone Live", slug="gone-live", content="x", status=PostStatus.SCHEDULED,
        published_at=datetime.now(timezone.utc) - timedelta(days=1),
    ))
    session.add(BlogPost(
        title="Next Week", slug="next-week", content="x", status=PostStatus.SCHEDULED,
        published_at=datetime.now(timezone.utc) + timedelta(days=7),
    ))
    session.commit()

    stats = client.get("/api/v1/admin/dashboard/stats", headers=auth_headers).json()
    assert stats["totalPosts"] == 3
    assert stats["publishedPosts"] == 2
    assert stats["scheduledPosts"] == 1
    assert stats["draftPosts"] == 0
