# sheet_nester/progress.py
# Progress reporting for nesting runs.
#
# The nester itself only calls a plain sink: sink(message, percent).
# ProgressChannel is such a sink backed by a queue, so a caller on another
# thread can consume progress as a stream of ProgressEvent objects.
# Progress is advisory: granularity and exact percentages are not guaranteed.

from __future__ import annotations

import queue
import time
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional

ProgressCallback = Callable[[str, float], None]


class NestingCancelled(Exception):
    """Raised by the nester when its cancel event is set."""


@dataclass(frozen=True)
class ProgressEvent:
    message: str
    percent: float
    timestamp: float = field(default_factory=time.time)


class ProgressChannel:
    """
    Queue-backed progress sink.

    Usage:
      channel = ProgressChannel()
      nester.run(groups, settings, progress_callback=channel)
      ... (on the consumer side)
      for ev in channel:
          print(ev.percent, ev.message)
    """

    _CLOSED = object()

    def __init__(self, maxsize: int = 0):
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=maxsize)
        self._closed = False
        self.last: Optional[ProgressEvent] = None

    def __call__(self, message: str, percent: float) -> None:
        self.publish(message, percent)

    def publish(self, message: str, percent: float) -> None:
        if self._closed:
            return
        pct = max(0.0, min(100.0, float(percent)))
        ev = ProgressEvent(message=str(message), percent=pct)
        self.last = ev
        self._queue.put(ev)

    def close(self) -> None:
        """Mark end of stream; iterators stop after draining pending events."""
        if not self._closed:
            self._closed = True
            self._queue.put(self._CLOSED)

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> Iterator[ProgressEvent]:
        while True:
            item = self._queue.get()
            if item is self._CLOSED:
                # leave the marker for any other consumer
                self._queue.put(item)
                return
            yield item  # type: ignore[misc]

    def drain(self) -> List[ProgressEvent]:
        """Non-blocking: return every event queued so far."""
        out: List[ProgressEvent] = []
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                break
            if item is self._CLOSED:
                self._queue.put(item)
                break
            out.append(item)  # type: ignore[arg-type]
        return out


def collecting_sink(events: List[ProgressEvent]) -> ProgressCallback:
    """Sink that appends events to a list (handy for scripts and tests)."""

    def _sink(message: str, percent: float) -> None:
        events.append(ProgressEvent(message=message, percent=float(percent)))

    return _sink
