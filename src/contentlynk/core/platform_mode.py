# src/contentlynk/core/platform_mode.py
"""Platform mode configuration.

BETA runs with hard earning caps that block transactions; NATURAL runs
without caps and only flags suspicious activity for review. The mode is
resolved once from settings and handed to request handlers through
``get_mode_config``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from contentlynk.core.settings import settings

logger = logging.getLogger(__name__)

CapType = Literal["per_post", "daily"]


@dataclass(frozen=True)
class EarningCaps:
    """Earning limits in whole dollars; ``None`` means unlimited."""

    per_post: int | None
    daily: int | None
    enforced: bool


@dataclass(frozen=True)
class ModeConfig:
    """Behaviour of the platform for one mode."""

    mode: str
    caps: EarningCaps
    action: Literal["BLOCK", "WARN"]
    grace_period_days: int

    @property
    def is_beta(self) -> bool:
        return self.mode == "BETA"


MODE_CONFIGS: dict[str, ModeConfig] = {
    "BETA": ModeConfig(
        mode="BETA",
        caps=EarningCaps(per_post=100, daily=500, enforced=True),
        action="BLOCK",
        grace_period_days=3,
    ),
    "NATURAL": ModeConfig(
        mode="NATURAL",
        caps=EarningCaps(per_post=None, daily=None, enforced=False),
        action="WARN",
        grace_period_days=0,
    ),
}


def resolve_mode_config(mode: str | None) -> ModeConfig:
    """Return the configuration for ``mode``, falling back to BETA."""
    return MODE_CONFIGS.get((mode or "").strip().upper(), MODE_CONFIGS["BETA"])


_ACTIVE_MODE = resolve_mode_config(settings.platform_mode)


def get_mode_config() -> ModeConfig:
    """Return the mode configuration resolved at startup."""
    return _ACTIVE_MODE


def mode_message(config: ModeConfig, exceeded: bool, cap_type: CapType) -> str:
    """Describe the outcome of a cap check under ``config``."""
    if not exceeded:
        return "Earnings processed successfully"

    if config.action == "BLOCK":
        label = "per-post" if cap_type == "per_post" else "daily"
        amount = config.caps.per_post if cap_type == "per_post" else config.caps.daily
        return (
            f"Earnings exceed {label} cap of ${amount}. "
            f"Transaction blocked during {config.mode} phase."
        )
    return "Earnings flagged for review. Trust score may be affected."


def log_mode_config(config: ModeConfig) -> None:
    """Log the active mode and its caps."""

    def _fmt(amount: int | None) -> str:
        return f"${amount}" if amount is not None else "UNLIMITED"

    logger.info("Platform running in %s mode", config.mode)
    logger.info(
        "Per-post cap: %s, daily cap: %s, action: %s",
        _fmt(config.caps.per_post),
        _fmt(config.caps.daily),
        config.action,
    )
