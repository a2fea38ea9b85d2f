import pytest


@pytest.fixture
def comment(client, published_post):
    response = client.post("/api/v1/comments", json={
        "post_id": published_post.id,
        "user_name": "Jess",
        "user_email": "jess@example.com",
        "content": "Great guide, thanks!",
    })
    assert response.status_code == 201
    return response.json()["comment"]


def test_comment_hides_email(comment):
    assert comment["user_name"] == "Jess"
    assert "user_email" not in comment


def test_comment_validation(client, published_post):
    response = client.post("/api/v1/comments", json={
        "post_id": published_post.id,
        "user_name": "   ",
        "user_email": "not-an-email",
        "content": "Hi",
    })
    assert response.status_code == 422


def test_comment_on_missing_post(client):
    response = client.post("/api/v1/comments", json={
        "post_id": 999, "user_name": "Jess", "user_email": "jess@example.com", "content": "Hello",
    })
    assert response.status_code == 404


def test_replies_are_threaded_one_level_deep(client, published_post, comment):
    reply = client.post("/api/v1/comments", json={
        "post_id": published_post.id, "user_name": "Sam", "user_email": "sam@example.com",
        "content": "Agreed", "parent_id": comment["id"],
    }).json()["comment"]
    nested = client.post("/api/v1/comments", json={
        "post_id": published_post.id, "user_name": "Ali", "user_email": "ali@example.com",
        "content": "Me too", "parent_id": reply["id"],
    }).json()["comment"]
    assert nested["parent_id"] == comment["id"]

    thread = client.get("/api/v1/comments", params={"postId": published_post.id}).json()["comments"]
    assert len(thread) == 1
    assert [r["user_name"] for r in thread[0]["replies"]] == ["Sam", "Ali"]


def test_like_and_report(client, auth_headers, comment):
    assert client.post(f"/api/v1/comments/{comment['id']}/like").json() == {"success": True, "likes": 1}
    assert client.post(f"/api/v1/comments/{comment['id']}/like").json()["likes"] == 2

    response = client.post(f"/api/v1/comments/{comment['id']}/report", json={"reason": "Spam"})
    assert response.status_code == 200

    reports = client.get("/api/v1/admin/blog/comments/reports", params={"status": "pending"}, headers=auth_headers).json()
    assert len(reports) == 1
    assert reports[0]["reason"] == "Spam"

    response = client.put(
        f"/api/v1/admin/blog/comments/reports/{reports[0]['id']}", json={"status": "reviewed"}, headers=auth_headers
    )
    assert response.json()["status"] == "reviewed"


def test_moderator_deletes_comment(client, moderator_headers, published_post, comment):
    response = client.delete(f"/api/v1/admin/blog/comments/{comment['id']}", headers=moderator_headers)
    assert response.status_code == 200
    assert client.get("/api/v1/comments", params={"postId": published_post.id}).json()["comments"] == []


def test_comments_closed_on_draft_posts(client, draft_post):
    response = client.post("/api/v1/comments", json={
        "post_id": draft_post.id, "user_name": "Jess", "user_email": "jess@example.com", "content": "Hello",
    })
    assert response.status_code == 404
    assert client.get("/api/v1/comments", params={"postId": draft_post.id}).status_code == 404
