def test_search_all(client, published_post, listing):
    response = client.get("/api/v1/search", params={"q": "sydney"})
    assert response.status_code == 200
    data = response.json()
    assert data["query"] == "sydney"
    assert data["results"]["blog"]["count"] == 1
    assert data["results"]["directory"]["count"] == 1
    assert data["results"]["total"] == 2
    assert data["pagination"]["hasMore"] is False


def test_search_by_type(client, published_post, listing):
    data = client.get("/api/v1/search", params={"q": "sydney", "type": "directory"}).json()
    assert data["results"]["blog"]["count"] == 0
    assert data["results"]["directory"]["items"][0]["name"] == "Bondi Beach House"


def test_search_skips_drafts(client, draft_post):
    data = client.get("/api/v1/search", params={"q": "outback"}).json()
    assert data["results"]["total"] == 0


def test_search_requires_query(client):
    assert client.get("/api/v1/search", params={"q": ""}).status_code == 422


def test_blank_search_matches_nothing(client, published_post, listing):
    response = client.get("/api/v1/search", params={"q": "   "})
    assert response.status_code == 200
    data = response.json()
    assert data["query"] == ""
    assert data["results"]["total"] == 0
    assert data["results"]["blog"]["items"] == []
    assert data["results"]["directory"]["items"] == []
