"""Vector helpers for gaze geometry.

All functions are total over finite and non-finite input: indeterminate
results are reported as ``nan`` instead of raising, so callers on the
per-sample path only need an ``isnan`` check.
"""
from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np

Vector3 = Tuple[float, float, float]


def _as_vector(value: Sequence[float]) -> np.ndarray:
    return np.asarray(value, dtype=float).reshape(3)


def vector_between(frm: Sequence[float], to: Sequence[float]) -> np.ndarray:
    """Vector pointing from ``frm`` to ``to``."""
    return _as_vector(to) - _as_vector(frm)


def dot(u: Sequence[float], v: Sequence[float]) -> float:
    return float(np.dot(_as_vector(u), _as_vector(v)))


def length(v: Sequence[float]) -> float:
    return float(np.linalg.norm(_as_vector(v)))


def euclidean_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """3D distance between two points."""
    return length(vector_between(a, b))


def angle_between(u: Sequence[float], v: Sequence[float]) -> float:
    """Angle between two vectors in radians.

    Method:
      θ = arccos(u · v / (|u| × |v|))

    The cosine is clamped to [-1, 1] so that rounding noise on (anti)parallel
    vectors yields 0 or π. A zero-length or non-finite vector yields ``nan``.
    """
    u_vec = _as_vector(u)
    v_vec = _as_vector(v)

    norm_product = np.linalg.norm(u_vec) * np.linalg.norm(v_vec)
    if not np.isfinite(norm_product) or norm_product == 0.0:
        return math.nan

    with np.errstate(invalid="ignore", divide="ignore"):
        cos_theta = np.dot(u_vec, v_vec) / norm_product
    if np.isnan(cos_theta):
        return math.nan

    cos_theta = np.clip(cos_theta, -1.0, 1.0)
    return float(np.arccos(cos_theta))


def rad_to_deg(radians: float) -> float:
    return math.degrees(radians)


def deg_to_rad(degrees: float) -> float:
    return math.radians(degrees)


def planar_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """2D distance between two points on the display plane."""
    return math.hypot(float(x2) - float(x1), float(y2) - float(y1))
