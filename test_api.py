"""
Endpoint tests for the blog API
Run: pytest test_api.py
"""

from datetime import timedelta
from pathlib import Path

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.config import settings
from app.core.security import create_access_token, decode_token
from app.crud import crud_post
from conftest import (
    JPEG_BYTES,
    PNG_BYTES,
    auth_headers,
    create_post,
    login,
    register,
    stored_path,
)


# ----- Users -----

def test_register_and_login(client):
    response = register(client)
    assert response.status_code == 201
    assert response.json() == {"message": "new user jane@example.com registered"}

    response = login(client, email="JANE@example.com")
    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Jane Doe"
    claim = decode_token(body["token"])
    assert claim["id"] == body["id"]
    assert claim["name"] == "Jane Doe"


def test_register_duplicate_email_rejected(client):
    register(client)
    response = register(client, name="Imposter", email="Jane@Example.com")
    assert response.status_code == 422
    assert response.json() == {"message": "Email already exists"}


def test_register_validation_messages(client):
    response = client.post("/api/users/register", json={"name": "Jane", "email": "jane@example.com"})
    assert response.status_code == 422
    assert response.json()["message"] == "Fill in all the fields"

    response = register(client, password="abc")
    assert response.status_code == 422
    assert response.json()["message"] == "Password should be at least 6 characters."

    response = client.post(
        "/api/users/register",
        json={"name": "Jane", "email": "jane@example.com", "password": "secret123", "confirmPassword": "secret124"},
    )
    assert response.status_code == 422
    assert response.json()["message"] == "Passwords do not match"


def test_login_wrong_password_rejected(client):
    register(client)
    response = login(client, password="not-the-password")
    assert response.status_code == 422
    assert response.json() == {"message": "Invalid credentials"}

    response = login(client, email="ghost@example.com")
    assert response.status_code == 422

    response = client.post("/api/users/login", json={"email": "jane@example.com"})
    assert response.status_code == 422
    assert response.json()["message"] == "Please fill in all the fields"


def test_authors_and_profile_hide_password(client, author):
    user_id, _ = author

    authors = client.get("/api/users/authors").json()
    assert [a["email"] for a in authors] == ["jane@example.com"]
    assert "password" not in authors[0] and "password_hash" not in authors[0]

    for method in (client.post, client.get):
        response = method(f"/api/users/{user_id}")
        assert response.status_code == 200
        assert response.json()["name"] == "Jane Doe"
        assert "password_hash" not in response.json()

    response = client.post("/api/users/9999")
    assert response.status_code == 404
    assert response.json() == {"message": "User Not Found"}


def test_edit_user(client, author, other_user):
    user_id, headers = author

    response = client.patch("/api/users/edit-user", json={"email": "john@example.com"}, headers=headers)
    assert response.status_code == 422
    assert response.json()["message"] == "Email already exists"

    response = client.patch(
        "/api/users/edit-user",
        json={
            "currentPassword": "wrong-pass",
            "newPassword": "newsecret1",
            "confirmNewPassword": "newsecret1",
        },
        headers=headers,
    )
    assert response.status_code == 422
    assert response.json()["message"] == "Invalid current password"

    response = client.patch(
        "/api/users/edit-user",
        json={"name": "Short", "currentPassword": "secret123", "newPassword": "abc", "confirmNewPassword": "abc"},
        headers=headers,
    )
    assert response.status_code == 422
    assert response.json()["message"] == "Password should be at least 6 characters."
    assert login(client, password="secret123").status_code == 200
    assert client.get(f"/api/users/{user_id}").json()["name"] == "Jane Doe"

    response = client.patch(
        "/api/users/edit-user",
        json={
            "name": "Jane Q. Doe",
            "email": "janeq@example.com",
            "currentPassword": "secret123",
            "newPassword": "newsecret1",
            "confirmNewPassword": "newsecret1",
        },
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Jane Q. Doe"
    assert response.json()["email"] == "janeq@example.com"

    assert login(client, email="janeq@example.com", password="newsecret1").status_code == 200
    assert login(client, email="janeq@example.com", password="secret123").status_code == 422


def test_change_avatar_replaces_old_asset(client, author):
    _, headers = author

    response = client.post(
        "/api/users/change-avatar",
        files={"avatar": ("me.png", PNG_BYTES, "image/png")},
        headers=headers,
    )
    assert response.status_code == 200
    first_url = response.json()["avatar"]
    assert stored_path(first_url).is_file()

    response = client.post(
        "/api/users/change-avatar",
        files={"avatar": ("me.jpg", JPEG_BYTES, "image/jpeg")},
        headers=headers,
    )
    assert response.status_code == 200
    second_url = response.json()["avatar"]
    assert second_url != first_url
    assert stored_path(second_url).is_file()
    assert not stored_path(first_url).exists()


def test_change_avatar_rejects_missing_or_large_file(client, author):
    _, headers = author

    response = client.post("/api/users/change-avatar", headers=headers)
    assert response.status_code == 422
    assert response.json() == {"message": "Please choose an image less than 500KB"}

    big = b"\x89PNG\r\n\x1a\n" + b"\x00" * 500_000
    response = client.post(
        "/api/users/change-avatar",
        files={"avatar": ("big.png", big, "image/png")},
        headers=headers,
    )
    assert response.status_code == 422

    response = client.post(
        "/api/users/change-avatar",
        files={"avatar": ("fake.png", b"not really a png", "image/png")},
        headers=headers,
    )
    assert response.status_code == 422


# ----- Auth -----

def test_protected_route_without_token(client):
    response = client.patch("/api/users/edit-user", json={"name": "x"})
    assert response.status_code == 401
    assert response.json() == {"message": "Unauthorized. No token"}


def test_protected_route_with_invalid_token(client):
    response = client.patch(
        "/api/users/edit-user", json={"name": "x"}, headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 403
    assert response.json() == {"message": "Unauthorized. Invalid token"}


def test_expired_token_rejected(client, author):
    user_id, _ = author
    token = create_access_token({"id": user_id, "name": "Jane Doe"}, expires_delta=timedelta(seconds=-5))
    response = client.patch(
        "/api/users/edit-user", json={"name": "x"}, headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 403


# ----- Posts -----

def test_create_and_read_post(client, author):
    user_id, headers = author

    response = create_post(client, headers)
    assert response.status_code == 201
    post = response.json()
    assert post["creator"] == user_id
    assert post["category"] == "Agriculture"
    assert post["comments"] == []
    assert stored_path(post["thumbnail"]).is_file()

    assert client.get(f"/api/posts/{post['id']}").json()["title"] == "Harvest report"
    assert client.get(f"/api/users/{user_id}").json()["posts"] == 1

    response = client.get("/api/posts/9999")
    assert response.status_code == 404
    assert response.json() == {"message": "Post not found"}


def test_create_post_requires_fields_and_thumbnail(client, author):
    _, headers = author

    response = client.post("/api/posts", data={"title": "Only a title"}, headers=headers)
    assert response.status_code == 422
    assert response.json()["message"] == "Please fill all the fields"

    response = client.post(
        "/api/posts",
        data={"title": "t", "description": "d", "category": "Art"},
        headers=headers,
    )
    assert response.status_code == 422
    assert response.json()["message"] == "Please choose a thumbnail"


def test_create_post_with_unlisted_category_rejected(client, author):
    user_id, headers = author

    response = create_post(client, headers, category="Cooking")
    assert response.status_code == 422
    assert "Invalid category" in response.json()["message"]
    assert client.get("/api/posts").json() == []
    assert client.get(f"/api/users/{user_id}").json()["posts"] == 0


def test_post_listings(client, author, other_user):
    user_id, headers = author
    other_id, other_headers = other_user

    art = create_post(client, headers, title="Gallery", category="Art").json()
    weather = create_post(client, other_headers, title="Storm", category="Weather").json()
    art2 = create_post(client, headers, title="Sculpture", category="Art").json()

    assert [p["id"] for p in client.get("/api/posts").json()] == [art2["id"], weather["id"], art["id"]]
    assert [p["id"] for p in client.get("/api/posts/categories/Art").json()] == [art2["id"], art["id"]]
    assert client.get("/api/posts/categories/Cooking").json() == []
    assert [p["id"] for p in client.get(f"/api/posts/users/{other_id}").json()] == [weather["id"]]
    assert len(client.get(f"/api/posts/users/{user_id}").json()) == 2


def test_only_creator_can_edit_post(client, author, other_user):
    _, headers = author
    _, other_headers = other_user
    post = create_post(client, headers).json()

    response = client.patch(f"/api/posts/{post['id']}", data={"title": "Hijacked"}, headers=other_headers)
    assert response.status_code == 401
    assert response.json() == {"message": "Unauthorized or post not found"}

    response = client.patch(
        f"/api/posts/{post['id']}",
        data={"title": "Harvest report, revised", "category": "Business"},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["title"] == "Harvest report, revised"
    assert response.json()["category"] == "Business"

    response = client.patch(f"/api/posts/{post['id']}", data={"category": "Cooking"}, headers=headers)
    assert response.status_code == 422

    response = client.patch("/api/posts/9999", data={"title": "x"}, headers=headers)
    assert response.status_code == 404


def test_edit_post_thumbnail_deletes_old_asset(client, author):
    _, headers = author
    post = create_post(client, headers).json()
    old_path = stored_path(post["thumbnail"])

    response = client.patch(
        f"/api/posts/{post['id']}",
        files={"thumbnail": ("new.jpg", JPEG_BYTES, "image/jpeg")},
        headers=headers,
    )
    assert response.status_code == 200
    new_url = response.json()["thumbnail"]
    assert new_url != post["thumbnail"]
    assert stored_path(new_url).is_file()
    assert not old_path.exists()


def _thumbnail_files():
    folder = Path(settings.UPLOAD_DIR) / "thumbnails"
    return sorted(folder.iterdir()) if folder.is_dir() else []


def test_edit_post_with_bad_thumbnail_changes_nothing(client, author):
    _, headers = author
    post = create_post(client, headers).json()
    files_before = _thumbnail_files()

    response = client.patch(
        f"/api/posts/{post['id']}",
        data={"title": "Changed"},
        files={"thumbnail": ("bad.png", b"not a png", "image/png")},
        headers=headers,
    )
    assert response.status_code == 422

    current = client.get(f"/api/posts/{post['id']}").json()
    assert current["title"] == "Harvest report"
    assert current["thumbnail"] == post["thumbnail"]
    assert stored_path(post["thumbnail"]).is_file()
    assert _thumbnail_files() == files_before


def test_edit_post_with_bad_category_keeps_thumbnail(client, author):
    _, headers = author
    post = create_post(client, headers).json()
    files_before = _thumbnail_files()

    response = client.patch(
        f"/api/posts/{post['id']}",
        data={"title": "Changed", "category": "Cooking"},
        files={"thumbnail": ("new.jpg", JPEG_BYTES, "image/jpeg")},
        headers=headers,
    )
    assert response.status_code == 422

    current = client.get(f"/api/posts/{post['id']}").json()
    assert current["title"] == "Harvest report"
    assert current["thumbnail"] == post["thumbnail"]
    assert _thumbnail_files() == files_before


def test_create_post_database_failure_discards_thumbnail(client, author, monkeypatch):
    _, headers = author
    files_before = _thumbnail_files()

    def failing_create_post(db, **kwargs):
        raise SQLAlchemyError("database unavailable")

    monkeypatch.setattr(crud_post, "create_post", failing_create_post)

    with pytest.raises(SQLAlchemyError):
        create_post(client, headers)

    assert _thumbnail_files() == files_before


def test_only_creator_can_delete_post(client, author, other_user):
    _, headers = author
    _, other_headers = other_user
    post = create_post(client, headers).json()

    response = client.delete(f"/api/posts/{post['id']}", headers=other_headers)
    assert response.status_code == 401
    assert client.get(f"/api/posts/{post['id']}").status_code == 200


def test_delete_post_removes_thumbnail(client, author):
    user_id, headers = author
    post = create_post(client, headers).json()
    thumbnail_path = stored_path(post["thumbnail"])
    assert thumbnail_path.is_file()

    response = client.delete(f"/api/posts/{post['id']}", headers=headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Post deleted"}

    assert not thumbnail_path.exists()
    assert client.get(f"/api/posts/{post['id']}").status_code == 404
    assert client.get(f"/api/users/{user_id}").json()["posts"] == 0


# ----- Comments -----

def test_comment_flow(client, author, other_user):
    user_id, headers = author
    other_id, other_headers = other_user
    post = create_post(client, headers).json()

    response = client.post(f"/api/comments/{post['id']}", json={"text": "Great read"}, headers=other_headers)
    assert response.status_code == 201
    comment = response.json()
    assert comment["comment"] == "Great read"
    assert comment["creator"] == other_id
    assert comment["post_id"] == post["id"]

    comments = client.get(f"/api/comments/{post['id']}").json()
    assert [c["id"] for c in comments] == [comment["id"]]
    assert comments[0]["creator_name"] == "John Roe"
    assert client.get(f"/api/posts/{post['id']}").json()["comments"] == [comment["id"]]

    # The post's author does not own the comment
    response = client.delete(f"/api/comments/{post['id']}/{comment['id']}", headers=headers)
    assert response.status_code == 401
    assert response.json() == {"message": "You are not authorized to delete this comment"}

    response = client.delete(f"/api/comments/{post['id']}/{comment['id']}", headers=other_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Comment deleted successfully"}
    assert client.get(f"/api/comments/{post['id']}").json() == []


def test_comment_validation(client, author):
    _, headers = author
    post = create_post(client, headers).json()

    response = client.post(f"/api/comments/{post['id']}", json={"text": ""}, headers=headers)
    assert response.status_code == 422
    assert response.json() == {"message": "Please enter a comment"}

    response = client.post("/api/comments/9999", json={"text": "hello"}, headers=headers)
    assert response.status_code == 404

    assert client.get("/api/comments/9999").status_code == 404

    response = client.delete(f"/api/comments/{post['id']}/9999", headers=headers)
    assert response.status_code == 404
    assert response.json() == {"message": "Comment not found"}

    response = client.post(f"/api/comments/{post['id']}", json={"text": "hello"})
    assert response.status_code == 401


# ----- Service -----

def test_unknown_route_and_health(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.json() == {"message": "Not Found - /api/nothing-here"}

    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/db-test").json()["status"] == "success"
