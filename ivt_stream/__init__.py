"""Streaming I-VT classification of binocular gaze samples."""

from .config import (
    ClassifierConfig,
    ConfigurationError,
    DisplayConfig,
    SessionConfig,
    VelocityMode,
)
from .device import DeviceNotFoundError, DeviceSelector, EyeTrackerIdentification, select_eye_tracker
from .display import DisplayMapper, millimeters_from_pixels, pixel_pitch, pixels_from_millimeters
from .domain import (
    ClassifiedGazeEvent,
    EyeGazeResult,
    MovementType,
    RawBinocularSample,
    RawGazeSample,
)
from .classifier import MovementClassifier
from .processor import GazeSampleProcessor
from .stream import GazeEventStream
from .velocity import estimate_angular_velocity

__all__ = [
    "ClassifierConfig",
    "ConfigurationError",
    "DisplayConfig",
    "SessionConfig",
    "VelocityMode",
    "DeviceNotFoundError",
    "DeviceSelector",
    "EyeTrackerIdentification",
    "select_eye_tracker",
    "DisplayMapper",
    "millimeters_from_pixels",
    "pixel_pitch",
    "pixels_from_millimeters",
    "ClassifiedGazeEvent",
    "EyeGazeResult",
    "MovementType",
    "RawBinocularSample",
    "RawGazeSample",
    "MovementClassifier",
    "GazeSampleProcessor",
    "GazeEventStream",
    "estimate_angular_velocity",
]
