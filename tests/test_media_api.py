import io

from PIL import Image

from travelblog.core.config import settings


def png_bytes(width=40, height=30):
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color=(11, 110, 79)).save(buffer, format="PNG")
    return buffer.getvalue()


def upload(client, headers, name="harbour.png", content=None, content_type="image/png", **data):
    return client.post(
        "/api/v1/admin/media",
        files={"file": (name, content if content is not None else png_bytes(), content_type)},
        data=data,
        headers=headers,
    )


def test_upload_image_records_dimensions(client, auth_headers, storage):
    response = upload(client, auth_headers, alt_text="Sydney Harbour")
    assert response.status_code == 201
    item = response.json()
    assert item["file_type"] == "image"
    assert (item["width"], item["height"]) == (40, 30)
    assert item["alt_text"] == "Sydney Harbour"
    assert item["url"].startswith("/uploads/image/")
    assert (storage.root / item["file_path"]).exists()


def test_upload_document(client, auth_headers):
    response = upload(client, auth_headers, name="guide.pdf", content=b"%PDF-1.4 test", content_type="application/pdf")
    assert response.status_code == 201
    item = response.json()
    assert item["file_type"] == "document"
    assert item["width"] is None


def test_empty_upload_is_rejected(client, auth_headers):
    assert upload(client, auth_headers, content=b"").status_code == 400


def test_oversized_upload_is_rejected(client, auth_headers, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 10)
    assert upload(client, auth_headers).status_code == 413


def test_list_filter_update_and_delete(client, auth_headers, storage):
    image = upload(client, auth_headers, name="reef.png").json()
    upload(client, auth_headers, name="menu.pdf", content=b"%PDF", content_type="application/pdf")

    data = client.get("/api/v1/admin/media", params={"type": "image"}, headers=auth_headers).json()
    assert data["total"] == 1
    assert data["media"][0]["original_filename"] == "reef.png"

    data = client.get("/api/v1/admin/media", params={"search": "menu"}, headers=auth_headers).json()
    assert [m["original_filename"] for m in data["media"]] == ["menu.pdf"]

    response = client.put(f"/api/v1/admin/media/{image['id']}", json={"caption": "Outer reef"}, headers=auth_headers)
    assert response.json()["caption"] == "Outer reef"

    assert client.delete(f"/api/v1/admin/media/{image['id']}", headers=auth_headers).status_code == 200
    assert not (storage.root / image["file_path"]).exists()
    assert client.get(f"/api/v1/admin/media/{image['id']}", headers=auth_headers).status_code == 404


def test_moderator_cannot_upload(client, moderator_headers):
    assert upload(client, moderator_headers).status_code == 403
