"""Per-tick orchestration: velocity estimation, classification and event assembly."""
from __future__ import annotations

import logging
import math
import threading
from typing import Iterable, Iterator, Optional

from .classifier import MovementClassifier
from .config import SessionConfig, VelocityMode
from .display import DisplayMapper
from .domain import (
    ClassifiedGazeEvent,
    EyeGazeResult,
    PerEyeState,
    RawBinocularSample,
    RawGazeSample,
    SessionState,
)
from .velocity import build_estimator

logger = logging.getLogger(__name__)


class GazeSampleProcessor:
    """Classify a live binocular gaze stream one sample at a time.

    The first sample of a session only seeds the lookback and produces no
    event. Every later sample yields exactly one :class:`ClassifiedGazeEvent`.
    Degraded input never raises; it shows up as ``nan`` velocity, an invalid
    eye and ``MovementType.UNKNOWN``.

    ``process_sample`` is serialized by a lock so it can be called from an
    SDK callback thread.
    """

    def __init__(self, config: SessionConfig) -> None:
        self.config = config
        self.mapper = DisplayMapper(config.display)
        self.classifier = MovementClassifier(config.classifier)
        self.estimator = build_estimator(config.velocity_mode, self.mapper)
        self.state = SessionState()
        self._lock = threading.Lock()

        logger.info("Velocity calculation method: %s", config.velocity_mode.value)
        if config.classifier.enabled:
            logger.info(
                "I-VT threshold: %.1f deg/s, not-a-saccade duration threshold: %.1f ms",
                config.classifier.velocity_threshold_deg_per_sec,
                config.classifier.not_a_saccade_duration_threshold_ms,
            )
        else:
            logger.info("Velocity threshold <= 0: movement classification disabled")

    @property
    def pixel_pitch_h(self) -> float:
        return self.mapper.pixel_pitch_h

    @property
    def pixel_pitch_v(self) -> float:
        return self.mapper.pixel_pitch_v

    @property
    def velocity_mode(self) -> VelocityMode:
        return self.config.velocity_mode

    def process_sample(self, sample: RawBinocularSample) -> Optional[ClassifiedGazeEvent]:
        """Process one raw sample; returns None on the first sample of a session."""
        with self._lock:
            return self.process_tick(self.state, sample)

    def process_many(self, samples: Iterable[RawBinocularSample]) -> Iterator[ClassifiedGazeEvent]:
        for sample in samples:
            event = self.process_sample(sample)
            if event is not None:
                yield event

    def reset(self) -> None:
        """Forget the lookback; the next sample bootstraps a new session."""
        with self._lock:
            self.state = SessionState()

    def process_tick(self, state: SessionState, sample: RawBinocularSample) -> Optional[ClassifiedGazeEvent]:
        """Advance ``state`` by one sample.

        The previous samples and timestamp are overwritten unconditionally,
        so an invalid sample still becomes the baseline for the next delta.
        """
        if not state.bootstrapped:
            logger.debug("Bootstrap sample at system time %s", sample.system_timestamp)
            self._remember(state, sample)
            return None

        interval_usec = sample.system_timestamp - state.previous_system_timestamp
        if interval_usec < 0:
            logger.debug(
                "System timestamp went backwards by %s us; interval clamped to 0", -interval_usec
            )
            interval_usec = 0

        left = self._evaluate_eye(state.left, sample.left, interval_usec)
        right = self._evaluate_eye(state.right, sample.right, interval_usec)

        event = ClassifiedGazeEvent(
            device_timestamp=sample.device_timestamp,
            system_timestamp=sample.system_timestamp,
            interval_usec=int(interval_usec),
            left=left,
            right=right,
        )
        self._remember(state, sample)
        return event

    def _evaluate_eye(self, eye_state: PerEyeState, current: RawGazeSample, interval_usec: int) -> EyeGazeResult:
        previous = eye_state.previous_sample
        if self.estimator is None or previous is None or interval_usec <= 0:
            velocity = math.nan
        else:
            velocity = self.estimator.estimate(interval_usec, current, previous)

        movement = self.classifier.classify(velocity, interval_usec, eye_state)
        x_px, y_px = self.mapper.normalized_to_pixels(*current.gaze_point_normalized)
        return EyeGazeResult(
            x_px=x_px,
            y_px=y_px,
            valid=bool(current.validity) and not math.isnan(velocity),
            angular_velocity=velocity,
            movement=movement,
        )

    @staticmethod
    def _remember(state: SessionState, sample: RawBinocularSample) -> None:
        state.left.previous_sample = sample.left
        state.right.previous_sample = sample.right
        state.previous_system_timestamp = sample.system_timestamp
