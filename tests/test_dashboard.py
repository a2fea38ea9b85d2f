import pytest

from tests.conftest import ADMIN_EMAIL, ADMIN_PASSWORD
from travelblog.routers.dashboard import format_hours, parse_hours


@pytest.fixture
def logged_in(client, admin_user):
    response = client.post(
        "/admin/login", data={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}, follow_redirects=False
    )
    assert response.status_code == 303
    assert "access_token" in response.cookies
    return client


def test_parse_hours_round_trip():
    hours = parse_hours("Monday: 9am - 5pm\n\nbad line\nSunday:  closed ")
    assert hours == {"monday": "9am - 5pm", "sunday": "closed"}
    assert format_hours(hours) == "monday: 9am - 5pm\nsunday: closed"


def test_dashboard_redirects_to_login(client):
    response = client.get("/admin", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/admin/login"


def test_bad_login(client, admin_user):
    response = client.post("/admin/login", data={"email": ADMIN_EMAIL, "password": "wrong"})
    assert response.status_code == 401
    assert "Incorrect email or password" in response.text


def test_non_admin_cannot_log_in(client, session):
    from travelblog.services.auth import AuthService

    AuthService(session).create_user("reader@example.com", "readerpass1")
    response = client.post("/admin/login", data={"email": "reader@example.com", "password": "readerpass1"})
    assert response.status_code == 401


def test_overview(logged_in, published_post):
    response = logged_in.get("/admin")
    assert response.status_code == 200
    assert "Overview" in response.text
    assert "48 Hours in Sydney" in response.text


def test_create_and_edit_post(logged_in, category, tag):
    response = logged_in.post("/admin/posts/new", data={
        "title": "Tasmania Road Trip",
        "content": "<p>Hobart to Cradle Mountain.</p>",
        "category_id": str(category.id),
        "tags": [str(tag.id)],
        "status": "published",
    }, follow_redirects=False)
    assert response.status_code == 303

    listing = logged_in.get("/admin/posts", params={"search": "Tasmania"})
    assert "Tasmania Road Trip" in listing.text

    public = logged_in.get("/api/v1/blog/posts/tasmania-road-trip").json()["post"]
    post_id = public["id"]
    assert public["category_name"] == "Travel Guides"

    edit = logged_in.get(f"/admin/posts/{post_id}/edit")
    assert 'value="Tasmania Road Trip"' in edit.text

    response = logged_in.post(f"/admin/posts/{post_id}/edit", data={
        "title": "Tasmania Road Trip Guide",
        "slug": "tasmania-road-trip",
        "content": "<p>Updated.</p>",
        "status": "published",
    }, follow_redirects=False)
    assert response.status_code == 303
    # Slug stays put when it is submitted unchanged
    assert logged_in.get("/api/v1/blog/posts/tasmania-road-trip").json()["post"]["title"] == "Tasmania Road Trip Guide"


def test_post_form_shows_errors(logged_in):
    response = logged_in.post("/admin/posts/new", data={"title": "", "content": ""})
    assert response.status_code == 400
    assert 'class="error"' in response.text


def test_delete_post(logged_in, published_post):
    response = logged_in.post(f"/admin/posts/{published_post.id}/delete", follow_redirects=False)
    assert response.status_code == 303
    assert logged_in.get("/api/v1/blog/posts").json()["total"] == 0


def test_categories_and_tags(logged_in):
    logged_in.post("/admin/categories", data={"name": "Outdoors"})
    logged_in.post("/admin/tags", data={"name": "Hiking"})
    assert "Outdoors" in logged_in.get("/admin/categories").text
    assert "Hiking" in logged_in.get("/admin/tags").text

    duplicate = logged_in.post("/admin/tags", data={"name": "Other", "slug": "hiking"})
    assert duplicate.status_code == 409


def test_directory_listing_screens(logged_in, directory_category):
    response = logged_in.post("/admin/directory/new", data={
        "name": "Cradle Mountain Lodge",
        "category_id": str(directory_category.id),
        "location": "Tasmania",
        "latitude": "-41.6",
        "longitude": "145.9",
        "hours": "monday: 8am - 6pm",
        "images": "https://example.com/a.jpg\nhttps://example.com/b.jpg",
        "featured": "1",
    }, follow_redirects=False)
    assert response.status_code == 303

    detail = logged_in.get("/api/v1/directory-listings/cradle-mountain-lodge").json()["listing"]
    assert detail["hours"] == {"monday": "8am - 6pm"}
    assert len(detail["images"]) == 2
    assert detail["featured"] is True

    edit = logged_in.get(f"/admin/directory/{detail['id']}/edit")
    assert "monday: 8am - 6pm" in edit.text

    bad = logged_in.post(f"/admin/directory/{detail['id']}/edit", data={
        "name": "Cradle Mountain Lodge", "category_id": str(directory_category.id), "latitude": "north",
    })
    assert bad.status_code == 400


def test_directory_category_in_use(logged_in, listing, directory_category):
    response = logged_in.post(f"/admin/directory/categories/{directory_category.id}/delete")
    assert response.status_code == 409
    assert "Accommodation" in response.text


def test_media_upload_screen(logged_in, storage):
    response = logged_in.post(
        "/admin/media",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        data={"alt_text": "Notes"},
        follow_redirects=False,
    )
    assert response.status_code == 303
    assert "notes.txt" in logged_in.get("/admin/media").text


def test_integration_screen(logged_in, published_post, listing):
    response = logged_in.post(
        "/admin/integration/link",
        data={"blog_post_id": published_post.id, "directory_listing_id": listing.id},
        follow_redirects=False,
    )
    assert response.status_code == 303
    page = logged_in.get("/admin/integration")
    assert "Bondi Beach House" in page.text

    logged_in.post(
        "/admin/integration/unlink",
        data={"blog_post_id": published_post.id, "directory_listing_id": listing.id},
    )
    assert "No links yet." in logged_in.get("/admin/integration").text


def test_logout_clears_cookie(logged_in):
    response = logged_in.post("/admin/logout", follow_redirects=False)
    assert response.status_code == 303
    logged_in.cookies.clear()
    assert logged_in.get("/admin", follow_redirects=False).status_code == 303


def test_listing_form_rejects_out_of_range_coordinates(logged_in, directory_category):
    response = logged_in.post("/admin/directory/new", data={
        "name": "Off The Map", "category_id": str(directory_category.id), "latitude": "91", "longitude": "-181",
    })
    assert response.status_code == 400
    assert 'class="error"' in response.text
    assert "latitude" in response.text
    assert logged_in.get("/api/v1/directory-listings/off-the-map").status_code == 404
