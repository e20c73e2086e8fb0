# mypy: ignore-errors
# tests/client/test_tracker.py
"""Tests for the reader-side depth trackers and the reporting client."""

import asyncio
import json

import httpx
import pytest

from contentlynk.client import ConsumptionClient, DepthReport, ScrollDepthTracker, VideoWatchTracker

DEBOUNCE = 0.02


class Collector:
    def __init__(self) -> None:
        self.reports: list[DepthReport] = []

    async def __call__(self, report: DepthReport) -> None:
        self.reports.append(report)

    @property
    def depths(self) -> list[float]:
        return [r.depth for r in self.reports]


async def _settle() -> None:
    await asyncio.sleep(DEBOUNCE * 3)


def test_compute_scroll_depth() -> None:
    assert ScrollDepthTracker.compute_depth(0, 800, 2800) == 0.0
    assert ScrollDepthTracker.compute_depth(1000, 800, 2800) == 0.5
    assert ScrollDepthTracker.compute_depth(5000, 800, 2800) == 1.0
    assert ScrollDepthTracker.compute_depth(0, 800, 600) == 0.0
    assert ScrollDepthTracker.compute_depth(0, 800, 800) == 0.0


@pytest.mark.asyncio
async def test_small_steps_are_not_reported() -> None:
    collector = Collector()
    tracker = ScrollDepthTracker(collector, debounce_seconds=DEBOUNCE)

    tracker.update(0.05)
    await _settle()

    assert collector.reports == []


@pytest.mark.asyncio
async def test_debounce_reports_latest_maximum() -> None:
    """Rapid progress collapses into one report of the deepest point."""
    collector = Collector()
    tracker = ScrollDepthTracker(collector, debounce_seconds=DEBOUNCE)

    for depth in (0.1, 0.2, 0.35):
        tracker.update(depth)
    await _settle()

    assert collector.depths == [0.35]
    assert tracker.last_reported == 0.35


@pytest.mark.asyncio
async def test_depth_never_decreases() -> None:
    collector = Collector()
    tracker = ScrollDepthTracker(collector, debounce_seconds=DEBOUNCE)

    tracker.update(0.5)
    tracker.update(0.2)
    await _settle()

    assert tracker.max_depth == 0.5
    assert collector.depths == [0.5]


@pytest.mark.asyncio
async def test_ten_percent_step_after_report() -> None:
    collector = Collector()
    tracker = ScrollDepthTracker(collector, debounce_seconds=DEBOUNCE)

    tracker.update(0.2)
    await _settle()
    tracker.update(0.25)
    await _settle()
    tracker.update(0.3)
    await _settle()

    assert collector.depths == [0.2, 0.3]


@pytest.mark.asyncio
async def test_close_flushes_once_with_completion() -> None:
    collector = Collector()
    tracker = ScrollDepthTracker(collector, debounce_seconds=10)

    tracker.update(0.85)
    await tracker.close()
    await tracker.close()
    tracker.update(0.95)

    assert collector.depths == [0.85]
    assert collector.reports[0].completed is True


@pytest.mark.asyncio
async def test_failing_callback_does_not_raise() -> None:
    async def broken(report: DepthReport) -> None:
        raise RuntimeError("offline")

    tracker = ScrollDepthTracker(broken, debounce_seconds=DEBOUNCE)
    tracker.update(0.4)
    await _settle()
    await tracker.close()

    assert tracker.reports_sent == 2


@pytest.mark.asyncio
async def test_video_tracker_counts_segments() -> None:
    collector = Collector()
    tracker = VideoWatchTracker(collector, debounce_seconds=DEBOUNCE)

    tracker.on_progress(0.05, 3)
    tracker.on_progress(0.1, 8)
    tracker.on_progress(0.3, 25)
    await _settle()

    assert tracker.watched_segments == {0, 2}
    assert tracker.watched_seconds == 20
    assert collector.depths == [0.3]


@pytest.mark.asyncio
async def test_client_reuses_server_session() -> None:
    """The session id issued on the first report is sent with later ones."""
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        bodies.append(body)
        return httpx.Response(200, json={"success": True, "session_id": body.get("session_id", "anon-1")})

    client = ConsumptionClient("http://test", token="abc", transport=httpx.MockTransport(handler))
    assert await client.report(7, scroll_depth=0.2) is True
    assert await client.report(7, scroll_depth=0.4, completed=False) is True
    await client.close()

    assert "session_id" not in bodies[0]
    assert bodies[1]["session_id"] == "anon-1"
    assert client.session_id == "anon-1"


@pytest.mark.asyncio
async def test_client_reports_rejection() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(404, json={"error": "Post not found"}))
    client = ConsumptionClient("http://test", transport=transport)

    assert await client.report(1, scroll_depth=0.5) is False
    assert client.session_id is None
    await client.close()


@pytest.mark.asyncio
async def test_video_tracker_posts_watch_percentage() -> None:
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"session_id": "s"})

    client = ConsumptionClient("http://test", transport=httpx.MockTransport(handler))
    tracker = client.video_tracker(3, debounce_seconds=DEBOUNCE)
    tracker.on_progress(0.9, 90)
    await tracker.close()
    await client.close()

    assert bodies == [{"post_id": 3, "completed": True, "watch_percentage": 0.9, "time_spent": 0}]
