"""Download progress reporting.

The fetcher forwards loader events to a ProgressSink. ConsoleProgressSink
draws a single-line bar on stdout:

    [█████████░░░░░░░░░░░░░░░░░░░░░]  30% model.safetensors
"""

import sys
from typing import Protocol, TextIO

from src.provisioning.models import ProgressEvent

BAR_WIDTH = 30
FILLED_CHAR = "█"
EMPTY_CHAR = "░"


def filled_width(percentage: int, width: int = BAR_WIDTH) -> int:
    """Number of filled cells for a percentage in [0, 100]."""
    percentage = max(0, min(100, round(percentage)))
    return percentage * width // 100


def render_bar(percentage: int, width: int = BAR_WIDTH) -> str:
    filled = filled_width(percentage, width)
    return FILLED_CHAR * filled + EMPTY_CHAR * (width - filled)


class ProgressSink(Protocol):
    """Observer for download progress events."""

    def on_progress(self, event: ProgressEvent) -> None: ...

    def on_complete(self, event: ProgressEvent) -> None: ...


class ConsoleProgressSink:
    """Renders progress events as an in-place console bar."""

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream or sys.stdout
        self._last: tuple[int, str] | None = None

    def on_progress(self, event: ProgressEvent) -> None:
        # Skip redraws that would print an identical line
        key = (event.percentage, event.file)
        if key == self._last:
            return
        self._last = key

        self.stream.write(
            f"\r  [{render_bar(event.percentage)}] {event.percentage:3d}% {event.file}"
        )
        self.stream.flush()

    def on_complete(self, event: ProgressEvent) -> None:
        self.stream.write(f"\n  ✓ Loaded: {event.file}\n")
        self.stream.flush()
        self._last = None
