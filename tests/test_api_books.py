from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from library_api.main import app


def _create(client, payload):
    resp = client.post("/books", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def test_root_and_health(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.text == "Library Management Server is running!"

    assert client.get("/health").json() == {"ok": True}


def test_create_book_envelope(client, book_payload):
    resp = client.post("/books", json=book_payload)
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Book created successfully"

    data = body["data"]
    for key in ("title", "author", "genre", "isbn", "description", "copies"):
        assert data[key] == book_payload[key]
    assert data["available"] is True
    assert data["id"]
    assert "createdAt" in data
    assert "updatedAt" in data
    # Timestamps go out with an explicit UTC offset.
    assert data["createdAt"].endswith(("Z", "+00:00"))
    assert data["updatedAt"].endswith(("Z", "+00:00"))


def test_create_book_validation_error(client, book_payload):
    book_payload["isbn"] = "97805533801A3"
    resp = client.post("/books", json=book_payload)
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "ISBN validation failed"
    assert body["error"]["kind"] == "ValidationError"
    detail = body["error"]["details"][0]
    assert detail["field"] == "isbn"
    assert detail["value"] == "97805533801A3"
    assert "help" in detail


def test_create_book_duplicate_isbn_conflict(client, book_payload):
    _create(client, book_payload)
    resp = client.post("/books", json={**book_payload, "title": "Another"})
    assert resp.status_code == 409
    body = resp.json()
    assert body["success"] is False
    assert body["error"]["kind"] == "DuplicateKeyError"
    assert body["error"]["details"]["field"] == "isbn"


@pytest.mark.parametrize("copies", [10**19, 1e20])
def test_create_book_rejects_oversized_copies(client, book_payload, copies):
    resp = client.post("/books", json={**book_payload, "copies": copies})
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"]["kind"] == "ValidationError"
    assert [d["field"] for d in body["error"]["details"]] == ["copies"]
    assert client.get("/books").json()["data"] == []


def test_create_book_rejects_non_object_body(client):
    resp = client.post("/books", json=[1, 2, 3])
    assert resp.status_code == 400
    assert resp.json()["error"]["kind"] == "ValidationError"


def test_list_books_with_query(client, book_payload):
    _create(client, book_payload)
    _create(client, {**book_payload, "isbn": "0-7475-3269-9", "genre": "FANTASY", "title": "HP"})

    resp = client.get("/books")
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Books retrieved successfully"
    assert len(body["data"]) == 2

    resp = client.get("/books", params={"filter": "SCIENCE", "sortBy": "createdAt", "sort": "desc", "limit": 5})
    data = resp.json()["data"]
    assert [b["genre"] for b in data] == ["SCIENCE"]

    resp = client.get("/books", params={"sortBy": "title", "limit": 1})
    assert [b["title"] for b in resp.json()["data"]] == ["HP"]


def test_list_books_rejects_bad_limit(client):
    resp = client.get("/books", params={"limit": "many"})
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_get_book(client, book_payload):
    created = _create(client, book_payload)
    resp = client.get(f"/books/{created['id']}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Book retrieved successfully"
    assert body["data"]["id"] == created["id"]


def test_get_book_bad_id_and_missing(client):
    resp = client.get("/books/not-a-valid-id")
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid book ID format"

    resp = client.get(f"/books/{uuid4()}")
    assert resp.status_code == 404
    assert resp.json() == {
        "success": False,
        "message": "Book not found",
        "error": {"kind": "NotFound"},
    }


def test_update_book(client, book_payload):
    created = _create(client, book_payload)
    resp = client.put(f"/books/{created['id']}", json={"copies": 0})
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Book updated successfully"
    assert body["data"]["copies"] == 0
    assert body["data"]["available"] is False


def test_update_book_unknown_field(client, book_payload):
    created = _create(client, book_payload)
    resp = client.put(f"/books/{created['id']}", json={"unknownField": 1})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Unknown fields: unknownField"

    again = client.get(f"/books/{created['id']}").json()["data"]
    assert again["copies"] == created["copies"]
    assert again["title"] == created["title"]


def test_update_missing_book(client):
    resp = client.put(f"/books/{uuid4()}", json={"copies": 1})
    assert resp.status_code == 404


def test_delete_book(client, book_payload):
    created = _create(client, book_payload)
    resp = client.delete(f"/books/{created['id']}")
    assert resp.status_code == 200
    assert resp.json() == {
        "success": True,
        "message": "Book deleted successfully",
        "data": None,
    }

    assert client.delete(f"/books/{created['id']}").status_code == 404
    assert client.get(f"/books/{created['id']}").status_code == 404


def test_unknown_route_returns_structured_404(client):
    resp = client.get("/nowhere")
    assert resp.status_code == 404
    assert resp.json() == {
        "success": False,
        "message": "Not Found",
        "error": {"path": "/nowhere", "message": "API endpoint not found"},
    }


def test_unsupported_method_returns_structured_404(client):
    resp = client.patch("/books", json={})
    assert resp.status_code == 404
    assert resp.json() == {
        "success": False,
        "message": "Not Found",
        "error": {"path": "/books", "message": "API endpoint not found"},
    }


def test_request_id_header(client):
    resp = client.get("/health", headers={"X-Request-Id": "abc-123"})
    assert resp.headers["X-Request-Id"] == "abc-123"
    assert client.get("/health").headers.get("X-Request-Id")


def test_unhandled_error_returns_500(db_session, monkeypatch):
    from library_api.db.session import get_db
    from library_api.services import book_service

    def boom(*args, **kwargs):
        raise RuntimeError("kaboom")

    monkeypatch.setattr(book_service, "list_books", boom)

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        with TestClient(app, raise_server_exceptions=False) as c:
            resp = c.get("/books", headers={"X-Request-Id": "rid-1"})
            generated = c.get("/books")
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == 500
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "Something went wrong!"
    assert body["error"]["kind"] == "InternalError"
    # Non-production env exposes the failure details.
    assert body["error"]["details"]["type"] == "RuntimeError"
    assert resp.headers["X-Request-Id"] == "rid-1"
    assert generated.status_code == 500
    assert generated.headers.get("X-Request-Id")
