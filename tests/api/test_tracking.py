# mypy: ignore-errors
# tests/api/test_tracking.py
"""Tests for consumption tracking reports."""

from fastapi import status

from contentlynk.models import Post, PostConsumption


def test_first_report_issues_session(client, test_post, db_session) -> None:
    """A report without a session id gets an anonymous one back."""
    response = client.post(
        "/api/track-consumption",
        json={"post_id": test_post.id, "scroll_depth": 0.3, "time_spent": 12},
        headers={"User-Agent": "pytest-agent", "X-Forwarded-For": "203.0.113.9, 10.0.0.1"},
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["session_id"].startswith("anon-")
    assert data["updated"] is False
    assert data["scroll_depth"] == 0.3

    record = db_session.query(PostConsumption).one()
    assert record.ip_address == "203.0.113.9"
    assert record.user_agent == "pytest-agent"
    assert record.user_id is None


def test_reports_keep_maximum_depth(client, test_post) -> None:
    """Out-of-order reports never lower depth or undo completion."""
    first = client.post(
        "/api/track-consumption",
        json={"post_id": test_post.id, "scroll_depth": 0.9, "completed": True},
    ).json()
    session_id = first["session_id"]

    late = client.post(
        "/api/track-consumption",
        json={"post_id": test_post.id, "session_id": session_id, "scroll_depth": 0.4},
    )
    data = late.json()
    assert data["updated"] is True
    assert data["session_id"] == session_id
    assert data["scroll_depth"] == 0.9
    assert data["completed"] is True


def test_authenticated_report_records_user(client, auth_token, test_user, test_post, db_session) -> None:
    client.post(
        "/api/track-consumption",
        json={"post_id": test_post.id, "session_id": "s-1", "watch_percentage": 0.5},
        headers=auth_token,
    )
    record = db_session.query(PostConsumption).filter(PostConsumption.session_id == "s-1").one()
    assert record.user_id == test_user.id


def test_post_aggregates_follow_reports(client, test_post, db_session) -> None:
    client.post("/api/track-consumption", json={"post_id": test_post.id, "session_id": "a", "scroll_depth": 0.2})
    client.post(
        "/api/track-consumption",
        json={"post_id": test_post.id, "session_id": "b", "scroll_depth": 0.8, "completed": True},
    )

    post = db_session.get(Post, test_post.id)
    db_session.refresh(post)
    assert abs(post.average_scroll_depth - 0.5) < 1e-9
    assert post.total_completions == 1


def test_depth_out_of_range_is_rejected(client, test_post) -> None:
    response = client.post(
        "/api/track-consumption",
        json={"post_id": test_post.id, "scroll_depth": 1.5},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_unknown_post_is_404(client) -> None:
    response = client.post("/api/track-consumption", json={"post_id": 99999, "scroll_depth": 0.1})
    assert response.status_code == status.HTTP_404_NOT_FOUND
