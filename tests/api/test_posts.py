# mypy: ignore-errors
# tests/api/test_posts.py
"""Tests for post creation, editing and deletion."""

from fastapi import status

from contentlynk.models import Post


def test_create_post_derives_text_fields(client, auth_token, test_user) -> None:
    """Creating a post fills in slug, excerpt and reading time."""
    body = "word " * 450
    response = client.post(
        "/api/posts",
        json={"title": "What's New? (2024)", "content": body, "content_type": "ARTICLE"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["slug"] == "whats-new-2024"
    assert data["author_id"] == test_user.id
    assert data["reading_time"] == 3
    assert data["excerpt"].endswith("...")
    assert data["published"] is True
    assert data["likes"] == 0


def test_create_post_requires_auth(client) -> None:
    response = client.post("/api/posts", json={"content": "hello"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "Unauthorized"}


def test_create_post_rejects_invalid_token(client) -> None:
    response = client.post(
        "/api/posts",
        json={"content": "hello"},
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_create_post_validation_error_is_400(client, auth_token) -> None:
    """Schema violations use the error shape with status 400."""
    response = client.post("/api/posts", json={"content": ""}, headers=auth_token)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "error" in response.json()


def test_duplicate_titles_get_numbered_slugs(client, auth_token, other_auth_token) -> None:
    """Slugs are unique per author; other authors may reuse the base slug."""
    slugs = []
    for _ in range(3):
        r = client.post("/api/posts", json={"title": "Hello World", "content": "x"}, headers=auth_token)
        assert r.status_code == status.HTTP_201_CREATED
        slugs.append(r.json()["slug"])
    assert slugs == ["hello-world", "hello-world-1", "hello-world-2"]

    r = client.post("/api/posts", json={"title": "Hello World", "content": "x"}, headers=other_auth_token)
    assert r.json()["slug"] == "hello-world"


def test_get_post(client, test_post) -> None:
    response = client.get(f"/api/posts/{test_post.id}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["title"] == "Hello World"


def test_get_missing_post_is_404(client) -> None:
    response = client.get("/api/posts/999999")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "Post not found"}


def test_edit_title_reslugs_without_colliding_with_itself(client, auth_token, test_post) -> None:
    """Renaming to the same title keeps the slug; a new title gets a new slug."""
    same = client.patch(f"/api/posts/{test_post.id}", json={"title": "Hello World"}, headers=auth_token)
    assert same.status_code == status.HTTP_200_OK
    assert same.json()["slug"] == "hello-world"

    renamed = client.patch(f"/api/posts/{test_post.id}", json={"title": "Brand New Title"}, headers=auth_token)
    assert renamed.json()["slug"] == "brand-new-title"


def test_edit_content_updates_excerpt(client, auth_token, test_post) -> None:
    response = client.patch(
        f"/api/posts/{test_post.id}",
        json={"content": "<p>Fresh   words</p>"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["excerpt"] == "Fresh words"


def test_only_author_can_edit(client, other_auth_token, test_post) -> None:
    response = client.patch(f"/api/posts/{test_post.id}", json={"title": "Hijack"}, headers=other_auth_token)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_unpublish_via_status(client, auth_token, test_post) -> None:
    response = client.patch(f"/api/posts/{test_post.id}", json={"status": "DRAFT"}, headers=auth_token)
    assert response.json()["published"] is False


def test_delete_is_soft(client, auth_token, other_auth_token, test_post, db_session) -> None:
    forbidden = client.delete(f"/api/posts/{test_post.id}", headers=other_auth_token)
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN

    response = client.delete(f"/api/posts/{test_post.id}", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert client.get(f"/api/posts/{test_post.id}").status_code == status.HTTP_404_NOT_FOUND

    row = db_session.get(Post, test_post.id)
    assert row is not None and row.deleted is True


def _create_draft(client, headers) -> int:
    response = client.post(
        "/api/posts",
        json={"title": "Work in progress", "content": "Not ready yet", "status": "DRAFT"},
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["published"] is False
    return response.json()["id"]


def test_draft_is_visible_to_author_only(client, auth_token, other_auth_token) -> None:
    post_id = _create_draft(client, auth_token)

    assert client.get(f"/api/posts/{post_id}", headers=auth_token).status_code == status.HTTP_200_OK

    anonymous = client.get(f"/api/posts/{post_id}")
    assert anonymous.status_code == status.HTTP_404_NOT_FOUND
    assert anonymous.json() == {"error": "Post not found"}
    assert client.get(f"/api/posts/{post_id}", headers=other_auth_token).status_code == 404


def test_draft_cannot_be_engaged_with_by_others(client, auth_token, other_auth_token, db_session) -> None:
    """Likes, views, comments and bookmarks treat someone else's draft as missing."""
    post_id = _create_draft(client, auth_token)

    assert client.post(f"/api/posts/{post_id}/like", headers=other_auth_token).status_code == 404
    assert client.post(f"/api/posts/{post_id}/view").status_code == 404
    assert client.post(f"/api/posts/{post_id}/bookmark", headers=other_auth_token).status_code == 404
    assert client.get(f"/api/posts/{post_id}/comment").status_code == 404
    consumption = client.post("/api/track-consumption", json={"post_id": post_id, "scroll_depth": 0.5})
    assert consumption.status_code == 404

    post = db_session.get(Post, post_id)
    db_session.refresh(post)
    assert post.likes == 0
    assert post.total_views == 0


def test_author_can_preview_own_draft(client, auth_token) -> None:
    post_id = _create_draft(client, auth_token)
    response = client.post(f"/api/posts/{post_id}/view", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["is_authenticated"] is True


def test_unpublished_post_disappears_for_readers(client, auth_token, test_post) -> None:
    client.patch(f"/api/posts/{test_post.id}", json={"status": "DRAFT"}, headers=auth_token)
    assert client.get(f"/api/posts/{test_post.id}").status_code == status.HTTP_404_NOT_FOUND
