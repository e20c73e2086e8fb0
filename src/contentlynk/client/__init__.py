"""Client-side helpers for reporting reader consumption."""

from .tracker import ConsumptionClient, DepthReport, DepthTracker, ScrollDepthTracker, VideoWatchTracker

__all__ = [
    "ConsumptionClient",
    "DepthReport",
    "DepthTracker",
    "ScrollDepthTracker",
    "VideoWatchTracker",
]
