"""Configuration dataclasses for streaming I-VT classification."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class ConfigurationError(ValueError):
    """Raised when a session is configured with unusable values."""


class VelocityMode(Enum):
    """Geometric method used to derive the angular displacement between samples."""

    # Angle between the UCS gaze vectors (gaze origin -> gaze point)
    GAZE_VECTOR_ANGLE = "gaze_vector_angle"
    # Planar displacement on screen (via pixel pitch) against the eye distance
    PIXEL_PITCH_DISTANCE = "pixel_pitch_distance"


class ComputationalConstants:
    """Defaults shared by configs and the CLI."""

    DEFAULT_VELOCITY_THRESHOLD: float = 30.0
    DEFAULT_NOT_A_SACCADE_DURATION_MS: float = 60.0
    MICROSECONDS_PER_SECOND: float = 1_000_000.0
    MICROSECONDS_PER_MILLISECOND: float = 1_000.0


@dataclass(frozen=True)
class DisplayConfig:
    """Configured screen resolution and physical display size."""

    screen_width_px: float
    screen_height_px: float
    display_width_mm: float
    display_height_mm: float

    def __post_init__(self) -> None:
        for name in ("screen_width_px", "screen_height_px"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive number, got {value!r}")
        for name in ("display_width_mm", "display_height_mm"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive number, got {value!r}")


@dataclass(frozen=True)
class ClassifierConfig:
    """Configuration for the per-eye hysteresis classifier.

    A threshold <= 0 disables classification: every sample is reported as
    ``MovementType.UNKNOWN``.
    """

    velocity_threshold_deg_per_sec: float = ComputationalConstants.DEFAULT_VELOCITY_THRESHOLD
    not_a_saccade_duration_threshold_ms: float = ComputationalConstants.DEFAULT_NOT_A_SACCADE_DURATION_MS

    def __post_init__(self) -> None:
        if not self.not_a_saccade_duration_threshold_ms >= 0:
            raise ConfigurationError(
                "not_a_saccade_duration_threshold_ms must be >= 0, "
                f"got {self.not_a_saccade_duration_threshold_ms!r}"
            )

    @property
    def enabled(self) -> bool:
        return self.velocity_threshold_deg_per_sec > 0


@dataclass(frozen=True)
class SessionConfig:
    """Immutable configuration of one gaze processing session."""

    display: DisplayConfig
    velocity_mode: VelocityMode = VelocityMode.GAZE_VECTOR_ANGLE
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)

    def __post_init__(self) -> None:
        if not isinstance(self.velocity_mode, VelocityMode):
            raise ConfigurationError(f"Unknown velocity mode: {self.velocity_mode!r}")

    @classmethod
    def create(
        cls,
        screen_width_px: float,
        screen_height_px: float,
        display_width_mm: float,
        display_height_mm: float,
        velocity_mode: VelocityMode | str = VelocityMode.GAZE_VECTOR_ANGLE,
        velocity_threshold_deg_per_sec: float = ComputationalConstants.DEFAULT_VELOCITY_THRESHOLD,
        not_a_saccade_duration_threshold_ms: float = ComputationalConstants.DEFAULT_NOT_A_SACCADE_DURATION_MS,
    ) -> "SessionConfig":
        """Build a session config from flat keyword arguments."""
        return cls(
            display=DisplayConfig(
                screen_width_px=float(screen_width_px),
                screen_height_px=float(screen_height_px),
                display_width_mm=float(display_width_mm),
                display_height_mm=float(display_height_mm),
            ),
            velocity_mode=parse_velocity_mode(velocity_mode),
            classifier=ClassifierConfig(
                velocity_threshold_deg_per_sec=float(velocity_threshold_deg_per_sec),
                not_a_saccade_duration_threshold_ms=float(not_a_saccade_duration_threshold_ms),
            ),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SessionConfig":
        """Build a session config from a flat mapping (e.g. parsed JSON)."""
        required = ("screen_width_px", "screen_height_px", "display_width_mm", "display_height_mm")
        missing = [key for key in required if key not in data]
        if missing:
            raise ConfigurationError(f"Missing configuration keys: {', '.join(missing)}")
        optional = {
            key: data[key]
            for key in (
                "velocity_mode",
                "velocity_threshold_deg_per_sec",
                "not_a_saccade_duration_threshold_ms",
            )
            if key in data
        }
        return cls.create(*(data[key] for key in required), **optional)


def parse_velocity_mode(value: VelocityMode | str) -> VelocityMode:
    """Accept an enum member, its value (``"gaze_vector_angle"``) or its name."""
    if isinstance(value, VelocityMode):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower().replace("-", "_")
        for mode in VelocityMode:
            if normalized in (mode.value, mode.name.lower()):
                return mode
    raise ConfigurationError(f"Unknown velocity mode: {value!r}")
