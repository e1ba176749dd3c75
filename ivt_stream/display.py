"""Conversions between normalized display coordinates, pixels and millimetres."""
from __future__ import annotations

import logging
from typing import Tuple

from .config import DisplayConfig

logger = logging.getLogger(__name__)


def pixel_pitch(display_mm: float, screen_px: float) -> float:
    """Physical size of one pixel in mm along one axis.

    ``screen_px`` is validated once by :class:`DisplayConfig`; this function
    does not guard against zero.
    """
    return float(display_mm) / float(screen_px)


def millimeters_from_pixels(px: float, pitch: float) -> float:
    return float(px) * pitch


def pixels_from_millimeters(mm: float, pitch: float) -> float:
    return float(mm) / pitch


class DisplayMapper:
    """Map gaze positions between the display area, pixels and millimetres.

    The pixel pitch is derived once on construction; the display geometry is
    fixed for the lifetime of a session.
    """

    def __init__(self, config: DisplayConfig) -> None:
        self.config = config
        self._pitch_h = pixel_pitch(config.display_width_mm, config.screen_width_px)
        self._pitch_v = pixel_pitch(config.display_height_mm, config.screen_height_px)
        logger.info(
            "Pixel pitch: %.4f mm/px horizontal, %.4f mm/px vertical (%gx%g px on %gx%g mm)",
            self._pitch_h,
            self._pitch_v,
            config.screen_width_px,
            config.screen_height_px,
            config.display_width_mm,
            config.display_height_mm,
        )

    @property
    def pixel_pitch_h(self) -> float:
        return self._pitch_h

    @property
    def pixel_pitch_v(self) -> float:
        return self._pitch_v

    def normalized_to_pixels(self, x_norm: float, y_norm: float) -> Tuple[float, float]:
        """Scale a display-area position in [0, 1] to screen pixels."""
        return (
            float(x_norm) * self.config.screen_width_px,
            float(y_norm) * self.config.screen_height_px,
        )

    def to_millimeters(self, x_px: float, y_px: float) -> Tuple[float, float]:
        return (
            millimeters_from_pixels(x_px, self._pitch_h),
            millimeters_from_pixels(y_px, self._pitch_v),
        )

    def to_pixels(self, x_mm: float, y_mm: float) -> Tuple[float, float]:
        return (
            pixels_from_millimeters(x_mm, self._pitch_h),
            pixels_from_millimeters(y_mm, self._pitch_v),
        )

    def normalized_to_millimeters(self, x_norm: float, y_norm: float) -> Tuple[float, float]:
        return self.to_millimeters(*self.normalized_to_pixels(x_norm, y_norm))
