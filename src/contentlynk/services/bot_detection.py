"""Heuristic bot scoring for the admin user list.

Scores run from 0 to 100. Accounts scoring 50 or more are treated as likely
bots and 30 to 49 as suspicious.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime

from contentlynk.db.time import as_utc, utcnow

LIKELY_BOT_THRESHOLD = 50
SUSPICIOUS_THRESHOLD = 30

FREE_EMAIL_DOMAINS = frozenset({
    "gmail.com", "yahoo.com", "hotmail.com", "outlook.com",
    "aol.com", "icloud.com", "protonmail.com", "mail.com",
    "yandex.com", "zoho.com",
})

DISPOSABLE_EMAIL_DOMAINS = frozenset({
    "tempmail.com", "throwaway.email", "guerrillamail.com",
    "mailinator.com", "10minutemail.com", "temp-mail.org",
    "fakeinbox.com", "sharklasers.com", "guerrillamail.info",
    "maildrop.cc", "getairmail.com", "dispostable.com",
})

_RANDOM_USERNAME_PATTERNS = (
    re.compile(r"^[a-zA-Z]{8,}[0-9]{2,}$"),
    re.compile(r"^[A-Z][a-z]+[A-Z][a-z]+[A-Z][a-z]+"),
    re.compile(r"^[A-Z]{5,}[0-9]+$"),
    re.compile(r"^[a-z]{3,}[A-Z][a-z]{3,}[0-9]+$"),
)
_CONSONANT_CLUSTER = re.compile(r"[bcdfghjklmnpqrstvwxyz]{5,}", re.IGNORECASE)


@dataclass(frozen=True)
class UserSignals:
    """The account facts the heuristics look at."""

    username: str
    email: str | None
    email_verified: bool
    created_at: datetime
    posts: int = 0
    comments: int = 0


@dataclass(frozen=True)
class BotAnalysis:
    score: int
    indicators: list[str] = field(default_factory=list)

    @property
    def is_likely_bot(self) -> bool:
        return self.score >= LIKELY_BOT_THRESHOLD

    @property
    def is_suspicious(self) -> bool:
        return SUSPICIOUS_THRESHOLD <= self.score < LIKELY_BOT_THRESHOLD

    def as_dict(self) -> dict[str, object]:
        return {
            "score": self.score,
            "indicators": list(self.indicators),
            "is_likely_bot": self.is_likely_bot,
            "is_suspicious": self.is_suspicious,
        }


def _email_domain(email: str | None) -> str | None:
    if not email or "@" not in email:
        return None
    return email.rsplit("@", 1)[1].lower() or None


def has_random_username(username: str) -> bool:
    if not username:
        return False
    if any(pattern.search(username) for pattern in _RANDOM_USERNAME_PATTERNS):
        return True

    entropy_ratio = len(set(username.lower())) / len(username)
    if len(username) > 12 and entropy_ratio > 0.6:
        return True
    if _CONSONANT_CLUSTER.search(username):
        return True

    upper = sum(1 for ch in username if ch.isupper())
    lower = sum(1 for ch in username if ch.islower())
    return upper > 3 and lower > 3 and len(username) > 15


def has_disposable_email(email: str | None) -> bool:
    return _email_domain(email) in DISPOSABLE_EMAIL_DOMAINS


def has_corporate_email(email: str | None) -> bool:
    """Any domain that is not a free mail provider counts as corporate."""
    domain = _email_domain(email)
    return domain is not None and domain not in FREE_EMAIL_DOMAINS


def analyze_user(signals: UserSignals, now: datetime | None = None) -> BotAnalysis:
    indicators: list[str] = []
    score = 0

    if has_random_username(signals.username):
        indicators.append("Random-looking username")
        score += 25
    if not signals.email_verified:
        indicators.append("Email not verified")
        score += 20
    if has_disposable_email(signals.email):
        indicators.append("Disposable email address")
        score += 30

    inactive = signals.posts == 0 and signals.comments == 0
    if inactive:
        indicators.append("Zero activity")
        score += 15

    age_days = ((now or utcnow()) - as_utc(signals.created_at)).total_seconds() / 86400
    if age_days > 7 and inactive:
        indicators.append("Old account with no activity")
        score += 10

    # Positive signals
    if has_corporate_email(signals.email):
        score -= 15
    if signals.email_verified:
        score -= 20

    return BotAnalysis(score=max(0, min(100, score)), indicators=indicators)
