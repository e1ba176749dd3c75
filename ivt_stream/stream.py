"""Delivery of classified events to the surrounding application.

The processor returns events; this module adds the two delivery styles an
application usually wants on top of that:

  - an output queue, drained by the consumer at its own pace
  - registered listeners, notified synchronously per event

Example:
    >>> stream = GazeEventStream(GazeSampleProcessor(config))  # doctest: +SKIP
    >>> stream.register_listener(lambda event: print(event.left.movement))
    >>> tracker.subscribe_to(tr.EYETRACKER_GAZE_DATA, stream.submit_tobii)
    >>> event = stream.events.get(timeout=1.0)
"""
from __future__ import annotations

import logging
import queue
import threading
from typing import Any, Callable, List, Mapping, Optional

from .domain import ClassifiedGazeEvent, RawBinocularSample
from .processor import GazeSampleProcessor

logger = logging.getLogger(__name__)

GazeEventListener = Callable[[ClassifiedGazeEvent], None]


class GazeEventStream:
    """Thread-safe entry point feeding a processor and fanning out its events.

    Listeners run on the submitting thread while the stream lock is held;
    they may submit again but should return quickly.
    """

    def __init__(self, processor: GazeSampleProcessor, maxsize: int = 0) -> None:
        self.processor = processor
        self.events: "queue.Queue[ClassifiedGazeEvent]" = queue.Queue(maxsize=maxsize)
        self._listeners: List[GazeEventListener] = []
        self.dropped = 0
        self._lock = threading.RLock()

    def register_listener(self, listener: GazeEventListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unregister_listener(self, listener: GazeEventListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def submit(self, sample: RawBinocularSample) -> Optional[ClassifiedGazeEvent]:
        """Process one sample and deliver the resulting event, if any.

        Processing, queueing and listener notification happen under one lock,
        so consumers see events in the order the processor produced them.
        """
        with self._lock:
            event = self.processor.process_sample(sample)
            if event is None:
                return None

            try:
                self.events.put_nowait(event)
            except queue.Full:
                self.dropped += 1
                logger.warning("Output queue full; dropped event at system time %s", event.system_timestamp)

            for listener in list(self._listeners):
                try:
                    listener(event)
                except Exception:
                    logger.exception("Gaze event listener %r failed", listener)
            return event

    def submit_tobii(self, gaze_data: Mapping[str, Any]) -> Optional[ClassifiedGazeEvent]:
        """Callback-compatible entry point for ``tobii_research`` gaze data."""
        return self.submit(RawBinocularSample.from_tobii(gaze_data))

    def drain(self) -> List[ClassifiedGazeEvent]:
        """Remove and return all queued events without blocking."""
        drained: List[ClassifiedGazeEvent] = []
        while True:
            try:
                drained.append(self.events.get_nowait())
            except queue.Empty:
                return drained
