# mypy: ignore-errors
# tests/api/test_feed.py
"""Tests for the authenticated home feed."""

from fastapi import status

from contentlynk.services.post_service import create_post


def _seed(db_session, author_id: int, count: int) -> list:
    return [
        create_post(db_session, author_id=author_id, title=f"Post {i}", content=f"body {i}")
        for i in range(count)
    ]


def test_feed_requires_auth(client) -> None:
    response = client.get("/api/feed")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_feed_newest_first_with_pagination(client, auth_token, test_user, db_session) -> None:
    posts = _seed(db_session, test_user.id, 5)
    db_session.commit()

    response = client.get("/api/feed", params={"limit": 2, "offset": 0}, headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert [p["id"] for p in data["posts"]] == [posts[4].id, posts[3].id]
    assert data["pagination"] == {"total": 5, "limit": 2, "offset": 0, "has_more": True}

    last_page = client.get("/api/feed", params={"limit": 2, "offset": 4}, headers=auth_token).json()
    assert len(last_page["posts"]) == 1
    assert last_page["pagination"]["has_more"] is False


def test_feed_hides_drafts_and_deleted(client, auth_token, test_user, db_session) -> None:
    visible = create_post(db_session, author_id=test_user.id, title="Visible", content="x")
    create_post(db_session, author_id=test_user.id, title="Draft", content="x", status="DRAFT")
    gone = create_post(db_session, author_id=test_user.id, title="Gone", content="x")
    gone.deleted = True
    db_session.commit()

    data = client.get("/api/feed", headers=auth_token).json()
    assert [p["id"] for p in data["posts"]] == [visible.id]
    assert data["pagination"]["total"] == 1


def test_feed_marks_liked_posts(client, auth_token, other_auth_token, test_post) -> None:
    client.post(f"/api/posts/{test_post.id}/like", headers=auth_token)

    mine = client.get("/api/feed", headers=auth_token).json()["posts"][0]
    theirs = client.get("/api/feed", headers=other_auth_token).json()["posts"][0]
    assert mine["is_liked_by_user"] is True
    assert theirs["is_liked_by_user"] is False
    assert mine["author"]["username"] == "testuser"


def test_feed_includes_three_latest_comments(client, auth_token, test_post) -> None:
    for i in range(5):
        client.post(f"/api/posts/{test_post.id}/comment", json={"content": f"c{i}"}, headers=auth_token)

    post = client.get("/api/feed", headers=auth_token).json()["posts"][0]
    assert [c["content"] for c in post["recent_comments"]] == ["c4", "c3", "c2"]
    assert post["comments"] == 5


def test_feed_rejects_out_of_range_limit(client, auth_token) -> None:
    response = client.get("/api/feed", params={"limit": 0}, headers=auth_token)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
