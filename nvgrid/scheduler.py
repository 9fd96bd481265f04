"""Decides whether the renderer needs to draw the next frame."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

_BUFFER_FLAG = "--extraBufferFrames"


def default_extra_buffer_frames(arguments: Iterable[str]) -> int:
    """Extra frames to draw after each queued frame: 60 with the flag, else 1."""
    return 60 if _BUFFER_FLAG in arguments else 1


@dataclass
class RedrawSettings:
    """Settings of the redraw scheduler."""

    extra_buffer_frames: int = 1


class RedrawScheduler:
    """Tracks queued frames and one pending scheduled frame time.

    Times are values of ``clock``, by default ``time.monotonic``.
    """

    def __init__(
        self,
        settings: Optional[RedrawSettings] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = settings if settings is not None else RedrawSettings()
        self._clock = clock
        self._lock = threading.Lock()
        self._frames_queued = 1
        self._scheduled_frame: Optional[float] = None

    def schedule(self, new_scheduled: float) -> None:
        """Ask for a frame at the given time; the earliest request wins."""
        logger.debug("Redraw scheduled for %r", new_scheduled)
        with self._lock:
            if self._scheduled_frame is None or new_scheduled < self._scheduled_frame:
                self._scheduled_frame = new_scheduled

    def queue_next_frame(self) -> None:
        """Make the next frames draw, as many as the settings ask for."""
        logger.debug("Next frame queued")
        with self._lock:
            self._frames_queued = self.settings.extra_buffer_frames & 0xFFFF

    def should_draw(self) -> bool:
        """Return whether to draw now, consuming a queued or due frame."""
        with self._lock:
            if self._frames_queued > 0:
                self._frames_queued -= 1
                return True
            if self._scheduled_frame is not None and self._scheduled_frame < self._clock():
                self._scheduled_frame = None
                return True
            return False