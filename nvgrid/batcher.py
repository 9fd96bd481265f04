"""Collects draw commands and hands them on in batches."""

from __future__ import annotations

import queue
from typing import Any, Protocol


class _Sink(Protocol):
    def put(self, item: Any) -> None: ...


class DrawCommandBatcher:
    """Queues draw commands from any thread and sends them on as one list."""

    def __init__(self, batched_draw_command_sender: _Sink) -> None:
        self._pending: queue.SimpleQueue[Any] = queue.SimpleQueue()
        self._batched_sender = batched_draw_command_sender

    def queue(self, draw_command: Any) -> None:
        """Add a draw command to the current batch."""
        self._pending.put(draw_command)

    def send_batch(self) -> None:
        """Send every command queued so far as one list, in queue order."""
        batch = []
        while True:
            try:
                batch.append(self._pending.get_nowait())
            except queue.Empty:
                break
        self._batched_sender.put(batch)