# mypy: ignore-errors
# tests/services/test_bot_detection.py
"""Tests for the bot scoring heuristics."""

from datetime import timedelta

from contentlynk.db.time import utcnow
from contentlynk.services.bot_detection import (
    UserSignals,
    analyze_user,
    has_corporate_email,
    has_disposable_email,
    has_random_username,
)


def _signals(**overrides) -> UserSignals:
    fields = {
        "username": "maria",
        "email": "maria@gmail.com",
        "email_verified": True,
        "created_at": utcnow(),
        "posts": 1,
        "comments": 0,
    }
    fields.update(overrides)
    return UserSignals(**fields)


def test_random_username_patterns() -> None:
    assert has_random_username("abcdefgh123")
    assert has_random_username("JohnPaulSmith")
    assert has_random_username("qwrtzplk")
    assert not has_random_username("maria")
    assert not has_random_username("")


def test_email_domain_classification() -> None:
    assert has_disposable_email("x@Mailinator.com")
    assert not has_disposable_email("x@gmail.com")
    assert has_corporate_email("x@acme.io")
    assert not has_corporate_email("x@gmail.com")
    assert not has_corporate_email(None)


def test_active_verified_user_scores_zero() -> None:
    analysis = analyze_user(_signals())
    assert analysis.score == 0
    assert analysis.indicators == []
    assert not analysis.is_suspicious
    assert not analysis.is_likely_bot


def test_unverified_inactive_free_mail_is_suspicious() -> None:
    analysis = analyze_user(_signals(email_verified=False, posts=0))
    assert analysis.score == 35
    assert analysis.indicators == ["Email not verified", "Zero activity"]
    assert analysis.is_suspicious


def test_old_idle_disposable_account_is_likely_bot() -> None:
    now = utcnow()
    analysis = analyze_user(
        _signals(
            username="abcdefgh123",
            email="abc@guerrillamail.com",
            email_verified=False,
            created_at=now - timedelta(days=30),
            posts=0,
        ),
        now=now,
    )
    # 25 + 20 + 30 + 15 + 10 - 15 (non-free domain) = 85
    assert analysis.score == 85
    assert "Old account with no activity" in analysis.indicators
    assert analysis.is_likely_bot


def test_score_never_negative() -> None:
    analysis = analyze_user(_signals(email="maria@acme.io"))
    assert analysis.score == 0
