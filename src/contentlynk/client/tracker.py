"""Reader-side consumption trackers.

A tracker follows how far a reader has scrolled through an article or
watched a video and reports the deepest point reached. Reports are sent
only when the maximum has grown by at least ``threshold`` since the last
report and no further progress arrived during the debounce window.
``close()`` always sends one final report with the maximum.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger(__name__)

REPORT_THRESHOLD = 0.1
COMPLETION_THRESHOLD = 0.8
SCROLL_DEBOUNCE_SECONDS = 2.0
VIDEO_DEBOUNCE_SECONDS = 1.0
VIDEO_SEGMENT_SECONDS = 10

# Absorbs float error so 0.2 -> 0.3 still counts as a 10% step.
_EPSILON = 1e-9


@dataclass(frozen=True)
class DepthReport:
    depth: float
    completed: bool
    time_spent: int


ReportCallback = Callable[[DepthReport], Awaitable[Any]]


class DepthTracker:
    """Track a monotonic depth in ``[0, 1]`` and report it with debouncing."""

    def __init__(
        self,
        on_report: ReportCallback,
        *,
        debounce_seconds: float = SCROLL_DEBOUNCE_SECONDS,
        threshold: float = REPORT_THRESHOLD,
        completion_threshold: float = COMPLETION_THRESHOLD,
    ) -> None:
        self._on_report = on_report
        self.debounce_seconds = debounce_seconds
        self.threshold = threshold
        self.completion_threshold = completion_threshold
        self.max_depth = 0.0
        self.last_reported = 0.0
        self.reports_sent = 0
        self._started = time.monotonic()
        self._pending: asyncio.Task[None] | None = None
        self._closed = False

    @property
    def completed(self) -> bool:
        return self.max_depth >= self.completion_threshold

    @property
    def time_spent(self) -> int:
        return int(time.monotonic() - self._started)

    def _due(self) -> bool:
        return self.max_depth - self.last_reported >= self.threshold - _EPSILON

    def update(self, depth: float) -> None:
        """Record a new position; must be called from a running event loop."""
        if self._closed:
            return
        depth = min(1.0, max(0.0, depth))
        if depth <= self.max_depth:
            return
        self.max_depth = depth
        if self._due():
            self._restart_debounce()

    def _restart_debounce(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
        self._pending = asyncio.get_running_loop().create_task(self._report_when_quiet())

    async def _report_when_quiet(self) -> None:
        await asyncio.sleep(self.debounce_seconds)
        self._pending = None
        if self._due():
            await self._send()

    async def _send(self) -> None:
        self.last_reported = self.max_depth
        self.reports_sent += 1
        report = DepthReport(
            depth=self.max_depth,
            completed=self.completed,
            time_spent=self.time_spent,
        )
        try:
            await self._on_report(report)
        except Exception:
            # A lost report must not break the page the tracker runs in.
            logger.exception("Consumption report failed")

    async def close(self) -> None:
        """Cancel any pending report and flush the maximum once."""
        if self._closed:
            return
        self._closed = True
        if self._pending is not None:
            self._pending.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._pending
            self._pending = None
        await self._send()


class ScrollDepthTracker(DepthTracker):
    """Depth from the scroll position of an article."""

    def __init__(self, on_report: ReportCallback, **kwargs: Any) -> None:
        kwargs.setdefault("debounce_seconds", SCROLL_DEBOUNCE_SECONDS)
        super().__init__(on_report, **kwargs)

    @staticmethod
    def compute_depth(scroll_top: float, viewport_height: float, document_height: float) -> float:
        """Fraction of the scrollable distance covered; a page with nothing to scroll reports 0."""
        scrollable = document_height - viewport_height
        if scrollable <= 0:
            return 0.0
        return min(1.0, max(0.0, scroll_top / scrollable))

    def on_scroll(self, scroll_top: float, viewport_height: float, document_height: float) -> None:
        self.update(self.compute_depth(scroll_top, viewport_height, document_height))


class VideoWatchTracker(DepthTracker):
    """Depth from the played fraction of a video, plus the segments actually watched."""

    def __init__(self, on_report: ReportCallback, **kwargs: Any) -> None:
        kwargs.setdefault("debounce_seconds", VIDEO_DEBOUNCE_SECONDS)
        super().__init__(on_report, **kwargs)
        self.watched_segments: set[int] = set()

    @property
    def watched_seconds(self) -> int:
        return len(self.watched_segments) * VIDEO_SEGMENT_SECONDS

    def on_progress(self, played: float, played_seconds: float) -> None:
        self.watched_segments.add(int(played_seconds // VIDEO_SEGMENT_SECONDS))
        self.update(played)


class ConsumptionClient:
    """Posts tracker reports to ``/api/track-consumption``.

    The server issues a session id on the first report; it is kept and sent
    with every later report so they merge into one record.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        session_id: str | None = None,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Authorization": f"Bearer {token}"} if token else None
        self.session_id = session_id
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def report(
        self,
        post_id: int,
        *,
        scroll_depth: float | None = None,
        watch_percentage: float | None = None,
        listen_percentage: float | None = None,
        time_spent: int | None = None,
        completed: bool = False,
    ) -> bool:
        """Send one report; returns whether the server accepted it."""
        payload: dict[str, object] = {"post_id": post_id, "completed": completed}
        for key, value in (
            ("session_id", self.session_id),
            ("scroll_depth", scroll_depth),
            ("watch_percentage", watch_percentage),
            ("listen_percentage", listen_percentage),
            ("time_spent", time_spent),
        ):
            if value is not None:
                payload[key] = value

        try:
            response = await self._client.post("/api/track-consumption", json=payload)
        except httpx.HTTPError as exc:
            logger.warning("Consumption report for post %s failed: %s", post_id, exc)
            return False
        if response.status_code >= 400:
            logger.warning("Consumption report for post %s rejected: HTTP %s", post_id, response.status_code)
            return False

        self.session_id = response.json().get("session_id") or self.session_id
        return True

    def scroll_tracker(self, post_id: int, **kwargs: Any) -> ScrollDepthTracker:
        async def _send(report: DepthReport) -> None:
            await self.report(
                post_id,
                scroll_depth=report.depth,
                time_spent=report.time_spent,
                completed=report.completed,
            )

        return ScrollDepthTracker(_send, **kwargs)

    def video_tracker(self, post_id: int, **kwargs: Any) -> VideoWatchTracker:
        async def _send(report: DepthReport) -> None:
            await self.report(
                post_id,
                watch_percentage=report.depth,
                time_spent=report.time_spent,
                completed=report.completed,
            )

        return VideoWatchTracker(_send, **kwargs)

    async def close(self) -> None:
        await self._client.aclose()
