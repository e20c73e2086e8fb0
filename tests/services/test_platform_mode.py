# mypy: ignore-errors
# tests/services/test_platform_mode.py
"""Tests for platform mode resolution and cap messages."""

import pytest

from contentlynk.core.platform_mode import MODE_CONFIGS, mode_message, resolve_mode_config


@pytest.mark.parametrize(("raw", "expected"), [("BETA", "BETA"), ("natural", "NATURAL"), (" Natural ", "NATURAL")])
def test_resolve_known_modes(raw, expected) -> None:
    assert resolve_mode_config(raw).mode == expected


@pytest.mark.parametrize("raw", [None, "", "PRODUCTION"])
def test_unknown_mode_falls_back_to_beta(raw) -> None:
    assert resolve_mode_config(raw) is MODE_CONFIGS["BETA"]


def test_beta_blocks_with_cap_amount() -> None:
    beta = MODE_CONFIGS["BETA"]
    assert mode_message(beta, False, "per_post") == "Earnings processed successfully"
    assert mode_message(beta, True, "per_post") == (
        "Earnings exceed per-post cap of $100. Transaction blocked during BETA phase."
    )
    assert "daily cap of $500" in mode_message(beta, True, "daily")


def test_natural_only_flags() -> None:
    natural = MODE_CONFIGS["NATURAL"]
    assert natural.caps.per_post is None
    assert mode_message(natural, True, "daily") == "Earnings flagged for review. Trust score may be affected."
