"""Data structures for raw gaze samples, session state and classified events.

Raw samples mirror the fields delivered by the Tobii Pro SDK gaze callback.
The classes carry data and minimal helpers only; the processor, estimator
and classifier implement the behaviour.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from .geometry import Vector3

_NAN_POINT2 = (math.nan, math.nan)
_NAN_POINT3 = (math.nan, math.nan, math.nan)


class MovementType(Enum):
    """Per-eye ocular motion state reported for one sample."""

    UNKNOWN = "Unknown"
    SACCADE = "Saccade"
    NOT_A_SACCADE = "NotASaccade"
    FIXATION = "Fixation"


def _point(value: Any, size: int) -> Tuple[float, ...]:
    if value is None:
        return _NAN_POINT2 if size == 2 else _NAN_POINT3
    return tuple(float(v) for v in value)


@dataclass(frozen=True)
class RawGazeSample:
    """Per-eye gaze measurement for a single tick."""

    gaze_point_normalized: Tuple[float, float]
    gaze_point_ucs: Vector3
    gaze_origin_ucs: Vector3
    validity: bool


@dataclass(frozen=True)
class RawBinocularSample:
    """Binocular gaze sample as received from the acquisition layer.

    Timestamps are in microseconds. They are expected to be non-decreasing
    but this is not guaranteed.
    """

    device_timestamp: int
    system_timestamp: int
    left: RawGazeSample
    right: RawGazeSample

    @classmethod
    def from_tobii(cls, gaze_data: Mapping[str, Any]) -> "RawBinocularSample":
        """Convert a ``tobii_research`` gaze-data dictionary.

        Validity follows the gaze origin validity of each eye. Missing
        coordinates become ``nan`` so the sample is classified as unknown
        rather than rejected.
        """

        def eye(side: str) -> RawGazeSample:
            return RawGazeSample(
                gaze_point_normalized=_point(gaze_data.get(f"{side}_gaze_point_on_display_area"), 2),
                gaze_point_ucs=_point(gaze_data.get(f"{side}_gaze_point_in_user_coordinate_system"), 3),
                gaze_origin_ucs=_point(gaze_data.get(f"{side}_gaze_origin_in_user_coordinate_system"), 3),
                validity=bool(gaze_data.get(f"{side}_gaze_origin_validity", False)),
            )

        return cls(
            device_timestamp=int(gaze_data["device_time_stamp"]),
            system_timestamp=int(gaze_data["system_time_stamp"]),
            left=eye("left"),
            right=eye("right"),
        )


@dataclass
class PerEyeState:
    """Mutable per-eye lookback owned by one processor.

    Sub-threshold time is summed in integer microseconds so that intervals
    adding up to the duration threshold reach it exactly.
    """

    previous_sample: Optional[RawGazeSample] = None
    accumulated_not_a_saccade_usec: int = 0

    @property
    def accumulated_not_a_saccade_ms(self) -> float:
        return self.accumulated_not_a_saccade_usec / 1000


@dataclass
class SessionState:
    """All mutable state of one processing session."""

    left: PerEyeState = field(default_factory=PerEyeState)
    right: PerEyeState = field(default_factory=PerEyeState)
    previous_system_timestamp: Optional[int] = None

    @property
    def bootstrapped(self) -> bool:
        return self.previous_system_timestamp is not None


@dataclass(frozen=True)
class EyeGazeResult:
    """Derived values for one eye of one tick."""

    x_px: float
    y_px: float
    valid: bool
    angular_velocity: float
    movement: MovementType


@dataclass(frozen=True)
class ClassifiedGazeEvent:
    """Classified, pixel-mapped output for one binocular sample."""

    device_timestamp: int
    system_timestamp: int
    interval_usec: int
    left: EyeGazeResult
    right: EyeGazeResult

    def to_record(self) -> Dict[str, Any]:
        """Flatten into a column dictionary (one TSV row)."""
        record: Dict[str, Any] = {
            "device_time_stamp": self.device_timestamp,
            "system_time_stamp": self.system_timestamp,
            "interval_usec": self.interval_usec,
        }
        for side, eye in (("left", self.left), ("right", self.right)):
            record[f"{side}_x_px"] = eye.x_px
            record[f"{side}_y_px"] = eye.y_px
            record[f"{side}_valid"] = eye.valid
            record[f"{side}_velocity_deg_per_sec"] = eye.angular_velocity
            record[f"{side}_movement"] = eye.movement.value
        return record
