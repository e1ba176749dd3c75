"""Per-eye I-VT classifier with a minimum not-a-saccade duration."""
from __future__ import annotations

import math
from typing import Optional

from .config import ClassifierConfig, ComputationalConstants
from .domain import MovementType, PerEyeState


class MovementClassifier:
    """Turn a per-eye velocity stream into movement types.

    Velocities above the threshold are saccades and reset the eye's
    accumulated sub-threshold time. Sub-threshold samples accumulate their
    interval; once the accumulated time reaches the duration threshold they
    are fixations, before that they are only "not a saccade". An
    indeterminate (``nan``) velocity is unknown and leaves the accumulator
    untouched.
    """

    def __init__(self, config: Optional[ClassifierConfig] = None) -> None:
        self.config = config or ClassifierConfig()
        self._duration_threshold_usec = round(
            self.config.not_a_saccade_duration_threshold_ms * ComputationalConstants.MICROSECONDS_PER_MILLISECOND
        )

    def classify(self, velocity: float, interval_usec: float, state: PerEyeState) -> MovementType:
        cfg = self.config
        if not cfg.enabled:
            return MovementType.UNKNOWN
        if velocity is None or math.isnan(velocity):
            return MovementType.UNKNOWN
        if velocity > cfg.velocity_threshold_deg_per_sec:
            state.accumulated_not_a_saccade_usec = 0
            return MovementType.SACCADE

        state.accumulated_not_a_saccade_usec += int(interval_usec)
        if state.accumulated_not_a_saccade_usec >= self._duration_threshold_usec:
            return MovementType.FIXATION
        return MovementType.NOT_A_SACCADE
