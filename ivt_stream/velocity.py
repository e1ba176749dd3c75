"""
Angular velocity estimation between two consecutive per-eye samples.

Two methods are available, selected by :class:`VelocityMode`:

    Gaze vector angle:
        - Gaze vector = gaze point (UCS) - gaze origin (UCS)
        - θ = acos(v_prev · v_cur / (|v_prev| × |v_cur|))
        - Uses only the device's 3D coordinates

    Pixel pitch distance:
        - Displacement on screen: normalized -> px -> mm (pixel pitch)
        - Eye distance: |gaze point - gaze origin| (UCS, current sample)
        - θ = atan2(displacement_mm, distance_mm)

Both return degrees per second:

    velocity = degrees(θ) * 1_000_000 / interval_usec

Example:
    >>> estimator = GazeVectorAngleEstimator()
    >>> velocity = estimator.estimate(10_000, current, previous)  # doctest: +SKIP
    >>> # 1° between the gaze vectors over 10 ms -> ~100 deg/s

Indeterminate results (non-positive interval, zero-length vectors, missing
coordinates) are returned as ``nan``; nothing here raises on sample data.
"""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Optional

from .config import ComputationalConstants, VelocityMode
from .display import DisplayMapper
from .domain import RawGazeSample
from .geometry import angle_between, euclidean_distance, planar_distance, rad_to_deg, vector_between


def degrees_per_second(theta_rad: float, interval_usec: float) -> float:
    """Convert an angular displacement over ``interval_usec`` to deg/s."""
    if math.isnan(theta_rad) or interval_usec <= 0:
        return math.nan
    return rad_to_deg(theta_rad) * ComputationalConstants.MICROSECONDS_PER_SECOND / interval_usec


class VelocityEstimationStrategy(ABC):
    """Abstract base for angular displacement between two samples of one eye."""

    @abstractmethod
    def angular_displacement(self, current: RawGazeSample, previous: RawGazeSample) -> float:
        """Angle in radians between previous and current gaze, or ``nan``."""

    @abstractmethod
    def get_description(self) -> str:
        """Short description of the method."""

    def estimate(self, interval_usec: float, current: RawGazeSample, previous: RawGazeSample) -> float:
        if interval_usec <= 0:
            return math.nan
        return degrees_per_second(self.angular_displacement(current, previous), interval_usec)


class GazeVectorAngleEstimator(VelocityEstimationStrategy):
    """Angle between the UCS gaze vectors of both samples."""

    def angular_displacement(self, current: RawGazeSample, previous: RawGazeSample) -> float:
        gaze_vector = vector_between(current.gaze_origin_ucs, current.gaze_point_ucs)
        previous_gaze_vector = vector_between(previous.gaze_origin_ucs, previous.gaze_point_ucs)
        return angle_between(previous_gaze_vector, gaze_vector)

    def get_description(self) -> str:
        return "Gaze vector angle: θ = acos(v0 · v1 / (|v0| × |v1|))"


class PixelPitchDistanceEstimator(VelocityEstimationStrategy):
    """On-screen displacement in mm seen from the current eye distance."""

    def __init__(self, mapper: DisplayMapper) -> None:
        self.mapper = mapper

    def angular_displacement(self, current: RawGazeSample, previous: RawGazeSample) -> float:
        distance_mm = euclidean_distance(current.gaze_origin_ucs, current.gaze_point_ucs)

        x1, y1 = self.mapper.normalized_to_millimeters(*previous.gaze_point_normalized)
        x2, y2 = self.mapper.normalized_to_millimeters(*current.gaze_point_normalized)
        displacement_mm = planar_distance(x1, y1, x2, y2)

        if math.isnan(distance_mm) or math.isnan(displacement_mm):
            return math.nan
        return math.atan2(displacement_mm, distance_mm)

    def get_description(self) -> str:
        return "Pixel pitch distance: θ = atan2(screen_displacement_mm, eye_distance_mm)"


def build_estimator(
    mode: VelocityMode, mapper: Optional[DisplayMapper] = None
) -> Optional[VelocityEstimationStrategy]:
    """Return the estimator for ``mode``, or None if it cannot be built."""
    if mode is VelocityMode.GAZE_VECTOR_ANGLE:
        return GazeVectorAngleEstimator()
    if mode is VelocityMode.PIXEL_PITCH_DISTANCE and mapper is not None:
        return PixelPitchDistanceEstimator(mapper)
    return None


def estimate_angular_velocity(
    interval_usec: float,
    current: RawGazeSample,
    previous: RawGazeSample,
    mode: VelocityMode,
    mapper: Optional[DisplayMapper] = None,
) -> float:
    """Angular velocity in deg/s between ``previous`` and ``current``.

    Returns ``nan`` for a non-positive interval, an unknown mode, a missing
    ``mapper`` under ``PIXEL_PITCH_DISTANCE`` or indeterminate geometry.
    """
    if interval_usec <= 0:
        return math.nan
    estimator = build_estimator(mode, mapper) if isinstance(mode, VelocityMode) else None
    if estimator is None:
        return math.nan
    return estimator.estimate(interval_usec, current, previous)
