import math
from typing import Callable, List, Sequence

import pytest

from ivt_stream.config import ClassifierConfig, DisplayConfig, SessionConfig, VelocityMode
from ivt_stream.domain import RawBinocularSample, RawGazeSample

EYE_DISTANCE_MM = 600.0


def eye_at_angle(
    angle_deg: float,
    valid: bool = True,
    normalized: Sequence[float] = (0.5, 0.5),
    origin: Sequence[float] = (0.0, 0.0, EYE_DISTANCE_MM),
) -> RawGazeSample:
    """Eye looking at the screen plane, rotated ``angle_deg`` about the y axis."""
    theta = math.radians(angle_deg)
    ox, oy, oz = origin
    point = (
        ox + EYE_DISTANCE_MM * math.sin(theta),
        oy,
        oz - EYE_DISTANCE_MM * math.cos(theta),
    )
    return RawGazeSample(
        gaze_point_normalized=tuple(normalized),
        gaze_point_ucs=point,
        gaze_origin_ucs=tuple(origin),
        validity=valid,
    )


def binocular(
    t_usec: int,
    left: RawGazeSample,
    right: RawGazeSample | None = None,
) -> RawBinocularSample:
    return RawBinocularSample(
        device_timestamp=t_usec + 17,
        system_timestamp=t_usec,
        left=left,
        right=right if right is not None else left,
    )


def angle_sequence(angles: Sequence[float], step_usec: int = 10_000) -> List[RawBinocularSample]:
    return [binocular(i * step_usec, eye_at_angle(a)) for i, a in enumerate(angles)]


@pytest.fixture
def display_config() -> DisplayConfig:
    return DisplayConfig(
        screen_width_px=1920,
        screen_height_px=1080,
        display_width_mm=530.0,
        display_height_mm=300.0,
    )


@pytest.fixture
def make_session(display_config) -> Callable[..., SessionConfig]:
    def factory(
        mode: VelocityMode = VelocityMode.GAZE_VECTOR_ANGLE,
        threshold: float = 30.0,
        duration_ms: float = 150.0,
    ) -> SessionConfig:
        return SessionConfig(
            display=display_config,
            velocity_mode=mode,
            classifier=ClassifierConfig(
                velocity_threshold_deg_per_sec=threshold,
                not_a_saccade_duration_threshold_ms=duration_ms,
            ),
        )

    return factory


@pytest.fixture
def session_config(make_session) -> SessionConfig:
    return make_session()
