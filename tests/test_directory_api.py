import pytest

from travelblog.schemas import ListingCreate
from travelblog.services.directory import DirectoryService


@pytest.fixture
def more_listings(session, directory_category):
    service = DirectoryService(session)
    service.create_listing(ListingCreate(
        name="Alpine Lodge", category_id=directory_category.id, location="Hobart", price_range="$$",
    ))
    service.create_listing(ListingCreate(
        name="Harbour Hostel", category_id=directory_category.id, location="Sydney", price_range="$",
    ))


def test_listings_sorted_by_name(client, listing, more_listings):
    response = client.get("/api/v1/directory-listings")
    assert response.status_code == 200
    data = response.json()
    assert [l["name"] for l in data["data"]] == ["Alpine Lodge", "Bondi Beach House", "Harbour Hostel"]
    assert data["pagination"] == {"total": 3, "page": 1, "limit": 12, "pages": 1}


def test_listings_filters(client, listing, more_listings):
    data = client.get("/api/v1/directory-listings", params={"location": "Sydney"}).json()
    assert {l["name"] for l in data["data"]} == {"Bondi Beach House", "Harbour Hostel"}

    data = client.get("/api/v1/directory-listings", params={"price_range": "$"}).json()
    assert [l["name"] for l in data["data"]] == ["Harbour Hostel"]

    data = client.get("/api/v1/directory-listings", params={"featured": True}).json()
    assert [l["name"] for l in data["data"]] == ["Bondi Beach House"]

    data = client.get("/api/v1/directory-listings", params={"category": "no-such-category"}).json()
    assert data["data"] == []


def test_listings_sort_descending(client, listing, more_listings):
    data = client.get("/api/v1/directory-listings", params={"sort": "name", "order": "DESC", "limit": 1}).json()
    assert data["data"][0]["name"] == "Harbour Hostel"
    assert data["pagination"]["pages"] == 3


def test_invalid_sort_field(client):
    response = client.get("/api/v1/directory-listings", params={"sort": "password"})
    assert response.status_code == 400
    assert response.json()["detail"].startswith("Invalid sort field")


def test_listing_detail_by_slug_or_id(client, listing):
    by_slug = client.get("/api/v1/directory-listings/bondi-beach-house").json()
    by_id = client.get(f"/api/v1/directory-listings/{listing.id}").json()
    assert by_slug["listing"]["id"] == by_id["listing"]["id"] == listing.id
    assert by_slug["listing"]["category_name"] == "Accommodation"
    assert by_slug["totalReviews"] == 0
    assert client.get("/api/v1/directory-listings/missing").status_code == 404


def test_categories_with_counts(client, listing):
    categories = client.get("/api/v1/directory-categories").json()
    assert categories[0]["listing_count"] == 1
    assert client.get("/api/v1/directory-categories/accommodation").status_code == 200
    assert client.get("/api/v1/directory-categories/nope").status_code == 404


def test_reviews_flow(client, auth_headers, listing):
    response = client.post("/api/v1/directory/reviews", json={
        "listing_id": listing.id, "user_name": "Kim", "rating": 5, "content": "Lovely stay by the beach.",
    })
    assert response.status_code == 201
    review_id = response.json()["review"]["id"]
    client.post("/api/v1/directory/reviews", json={
        "listing_id": listing.id, "user_name": "Lee", "rating": 4, "content": "Good value, friendly hosts.",
    })

    summary = client.get("/api/v1/directory/reviews", params={"listing_id": listing.id}).json()
    assert summary["totalReviews"] == 2
    assert summary["averageRating"] == 4.5

    helpful = client.post(f"/api/v1/directory/reviews/{review_id}/helpful").json()
    assert helpful["helpful_count"] == 1

    assert client.post(f"/api/v1/directory/reviews/{review_id}/report", json={"reason": "Fake"}).status_code == 200

    response = client.post(
        f"/api/v1/admin/directory/reviews/{review_id}/response",
        json={"content": "Thanks Kim!", "respondent_name": "Owner"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    reviews = client.get("/api/v1/directory/reviews", params={"listing_id": listing.id}).json()["reviews"]
    responded = next(r for r in reviews if r["id"] == review_id)
    assert responded["response"]["respondent_name"] == "Owner"


def test_review_validation(client, listing):
    response = client.post("/api/v1/directory/reviews", json={
        "listing_id": listing.id, "user_name": "Kim", "rating": 6, "content": "Too short",
    })
    assert response.status_code == 422


def test_admin_listing_crud(client, auth_headers, directory_category):
    response = client.post("/api/v1/admin/directory/listings", json={
        "name": "Reef Tours", "category_id": directory_category.id, "location": "Cairns",
        "hours": {"monday": "8am - 5pm"}, "images": ["https://example.com/reef.jpg"],
    }, headers=auth_headers)
    assert response.status_code == 201
    created = response.json()
    assert created["slug"] == "reef-tours"

    response = client.put(
        f"/api/v1/admin/directory/listings/{created['id']}",
        json={"price_range": "$$", "featured": True},
        headers=auth_headers,
    )
    updated = response.json()
    assert updated["price_range"] == "$$"
    assert updated["featured"] is True
    assert updated["hours"] == {"monday": "8am - 5pm"}

    locations = client.get("/api/v1/admin/directory/listings/locations", headers=auth_headers).json()
    assert locations["locations"] == [{"location": "Cairns", "count": 1}]
    assert locations["priceRanges"] == ["$$"]

    assert client.delete(f"/api/v1/admin/directory/listings/{created['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/v1/admin/directory/listings/{created['id']}", headers=auth_headers).status_code == 404


def test_listing_with_unknown_category(client, auth_headers):
    response = client.post(
        "/api/v1/admin/directory/listings", json={"name": "Nowhere", "category_id": 42}, headers=auth_headers
    )
    assert response.status_code == 400


def test_category_in_use_cannot_be_deleted(client, auth_headers, listing, directory_category):
    response = client.delete(f"/api/v1/admin/directory/categories/{directory_category.id}", headers=auth_headers)
    assert response.status_code == 409


def test_editor_cannot_manage_directory(client, editor_headers, directory_category):
    response = client.post(
        "/api/v1/admin/directory/listings",
        json={"name": "Nope", "category_id": directory_category.id},
        headers=editor_headers,
    )
    assert response.status_code == 403


def test_created_review_hides_email(client, listing):
    response = client.post("/api/v1/directory/reviews", json={
        "listing_id": listing.id, "user_name": "Ann", "user_email": "ann@secret.example",
        "rating": 4, "content": "Quiet street, comfy beds.",
    })
    assert response.status_code == 201
    review = response.json()["review"]
    assert review["user_name"] == "Ann"
    assert "user_email" not in review


def test_admin_listing_coordinates_are_bounded(client, auth_headers, directory_category, listing):
    response = client.post("/api/v1/admin/directory/listings", json={
        "name": "Off The Map", "category_id": directory_category.id, "latitude": 91, "longitude": 0,
    }, headers=auth_headers)
    assert response.status_code == 422

    response = client.put(
        f"/api/v1/admin/directory/listings/{listing.id}", json={"longitude": -181}, headers=auth_headers
    )
    assert response.status_code == 422

    response = client.put(
        f"/api/v1/admin/directory/listings/{listing.id}", json={"latitude": -90, "longitude": 180}, headers=auth_headers
    )
    assert response.status_code == 200
