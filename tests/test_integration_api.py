URL = "/api/v1/admin/blog/directory-integration"


def test_link_and_query_both_directions(client, auth_headers, published_post, listing):
    response = client.post(
        URL, json={"blogPostId": published_post.id, "directoryListingId": listing.id}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["success"] is True

    listings = client.get(URL, params={"type": "blogToDirec", "id": published_post.id}, headers=auth_headers).json()
    assert [l["id"] for l in listings["listings"]] == [listing.id]

    posts = client.get(URL, params={"type": "direcToBlog", "id": listing.id}, headers=auth_headers).json()
    assert [p["id"] for p in posts["posts"]] == [published_post.id]

    links = client.get(URL, headers=auth_headers).json()["links"]
    assert links[0]["blog_post_title"] == "48 Hours in Sydney"
    assert links[0]["directory_listing_name"] == "Bondi Beach House"


def test_linking_twice_keeps_one_link(client, auth_headers, published_post, listing):
    payload = {"blogPostId": published_post.id, "directoryListingId": listing.id}
    first = client.post(URL, json=payload, headers=auth_headers).json()["link"]
    second = client.post(URL, json=payload, headers=auth_headers).json()["link"]
    assert first["id"] == second["id"]
    assert len(client.get(URL, headers=auth_headers).json()["links"]) == 1


def test_link_to_missing_listing(client, auth_headers, published_post):
    response = client.post(URL, json={"blogPostId": published_post.id, "directoryListingId": 999}, headers=auth_headers)
    assert response.status_code == 404


def test_invalid_type(client, auth_headers):
    assert client.get(URL, params={"type": "sideways", "id": 1}, headers=auth_headers).status_code == 400


def test_unlink(client, auth_headers, published_post, listing):
    client.post(URL, json={"blogPostId": published_post.id, "directoryListingId": listing.id}, headers=auth_headers)
    params = {"blogPostId": published_post.id, "directoryListingId": listing.id}

    assert client.delete(URL, params=params, headers=auth_headers).status_code == 200
    assert client.delete(URL, params=params, headers=auth_headers).status_code == 404


def test_linked_listing_shows_on_public_post(client, auth_headers, published_post, listing):
    client.post(URL, json={"blogPostId": published_post.id, "directoryListingId": listing.id}, headers=auth_headers)

    post = client.get(f"/api/v1/blog/posts/{published_post.slug}").json()
    assert [l["slug"] for l in post["listings"]] == ["bondi-beach-house"]

    detail = client.get(f"/api/v1/directory-listings/{listing.slug}").json()
    assert [p["slug"] for p in detail["posts"]] == [published_post.slug]


def test_deleting_post_removes_links(client, auth_headers, published_post, listing):
    client.post(URL, json={"blogPostId": published_post.id, "directoryListingId": listing.id}, headers=auth_headers)
    client.delete(f"/api/v1/admin/blog/posts/{published_post.id}", headers=auth_headers)
    assert client.get(URL, headers=auth_headers).json()["links"] == []
