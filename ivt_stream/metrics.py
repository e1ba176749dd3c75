"""Summary statistics over a table of classified gaze events."""
from __future__ import annotations

import logging
import math
from typing import Dict

import numpy as np
import pandas as pd

from .domain import MovementType

logger = logging.getLogger(__name__)


def summarize_eye(df: pd.DataFrame, side: str) -> Dict[str, float]:
    movement_col = f"{side}_movement"
    velocity_col = f"{side}_velocity_deg_per_sec"
    valid_col = f"{side}_valid"
    missing = {movement_col, velocity_col, valid_col} - set(df.columns)
    if missing:
        raise ValueError(f"Missing required columns: {', '.join(sorted(missing))}")

    total = len(df)
    counts = df[movement_col].astype(str).value_counts()
    velocity = pd.to_numeric(df[velocity_col], errors="coerce").to_numpy(dtype=float)
    finite = velocity[np.isfinite(velocity)]
    valid = df[valid_col].astype(str).str.lower().isin(["true", "1"])

    stats: Dict[str, float] = {"n_samples": total}
    for movement in MovementType:
        stats[f"n_{movement.name.lower()}"] = int(counts.get(movement.value, 0))
    stats["valid_ratio"] = float(valid.sum()) / total if total > 0 else math.nan
    stats["mean_velocity_deg_per_sec"] = float(finite.mean()) if finite.size else math.nan
    stats["max_velocity_deg_per_sec"] = float(finite.max()) if finite.size else math.nan
    return stats


def summarize_movements(df: pd.DataFrame) -> Dict[str, Dict[str, float]]:
    """Per-eye movement counts, valid ratio and velocity statistics."""
    summary = {side: summarize_eye(df, side) for side in ("left", "right")}
    for side, stats in summary.items():
        logger.info(
            "%s eye: %d samples, %d fixation, %d not-a-saccade, %d saccade, %d unknown",
            side,
            stats["n_samples"],
            stats["n_fixation"],
            stats["n_not_a_saccade"],
            stats["n_saccade"],
            stats["n_unknown"],
        )
    return summary
