"""TSV replay of recorded raw gaze samples and export of classified events."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Iterator, List

import pandas as pd

from .domain import ClassifiedGazeEvent, RawBinocularSample, RawGazeSample

TIMESTAMP_COLUMNS = ("device_time_stamp", "system_time_stamp")


def _eye_columns(side: str) -> Dict[str, str]:
    return {
        "x_norm": f"{side}_gaze_x_norm",
        "y_norm": f"{side}_gaze_y_norm",
        "point_x": f"{side}_gaze_point_x_mm",
        "point_y": f"{side}_gaze_point_y_mm",
        "point_z": f"{side}_gaze_point_z_mm",
        "origin_x": f"{side}_gaze_origin_x_mm",
        "origin_y": f"{side}_gaze_origin_y_mm",
        "origin_z": f"{side}_gaze_origin_z_mm",
        "validity": f"{side}_validity",
    }


RAW_COLUMNS: List[str] = [
    *TIMESTAMP_COLUMNS,
    *_eye_columns("left").values(),
    *_eye_columns("right").values(),
]


def parse_validity(value: object) -> bool:
    """Parse a validity cell into a flag.

    Rules (SDK convention, 1 = valid):
    - bools are taken as-is
    - "valid" / "true" / "1" -> True
    - numbers -> True only for 1
    - anything else (empty, "invalid", NaN) -> False
    """

    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("valid", "true", "1")
    try:
        return int(value) == 1
    except (TypeError, ValueError):
        return False


def _to_numeric(series: pd.Series) -> pd.Series:
    if series.dtype == object:
        series = series.astype(str).str.strip().str.replace(",", ".", regex=False)
    return pd.to_numeric(series, errors="coerce")


def read_tsv(path: str | Path) -> pd.DataFrame:
    return pd.read_csv(path, sep="\t", low_memory=False)


def write_tsv(df: pd.DataFrame, path: str | Path) -> None:
    df.to_csv(path, sep="\t", index=False)


def samples_from_dataframe(df: pd.DataFrame) -> Iterator[RawBinocularSample]:
    """Yield raw binocular samples from a DataFrame in row order.

    Numeric columns may use comma decimal separators. Rows with an
    unparsable timestamp are skipped; unparsable coordinates become ``nan``.
    """
    missing = [col for col in RAW_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {', '.join(missing)}")

    numeric = pd.DataFrame(
        {col: _to_numeric(df[col]) for col in RAW_COLUMNS if not col.endswith("_validity")}
    )
    sides = {side: _eye_columns(side) for side in ("left", "right")}

    def eye(row: pd.Series, validity: object, cols: Dict[str, str]) -> RawGazeSample:
        return RawGazeSample(
            gaze_point_normalized=(float(row[cols["x_norm"]]), float(row[cols["y_norm"]])),
            gaze_point_ucs=(
                float(row[cols["point_x"]]),
                float(row[cols["point_y"]]),
                float(row[cols["point_z"]]),
            ),
            gaze_origin_ucs=(
                float(row[cols["origin_x"]]),
                float(row[cols["origin_y"]]),
                float(row[cols["origin_z"]]),
            ),
            validity=parse_validity(validity),
        )

    for idx, row in numeric.iterrows():
        if pd.isna(row["device_time_stamp"]) or pd.isna(row["system_time_stamp"]):
            continue
        yield RawBinocularSample(
            device_timestamp=int(row["device_time_stamp"]),
            system_timestamp=int(row["system_time_stamp"]),
            left=eye(row, df.at[idx, sides["left"]["validity"]], sides["left"]),
            right=eye(row, df.at[idx, sides["right"]["validity"]], sides["right"]),
        )


def read_raw_samples(path: str | Path) -> List[RawBinocularSample]:
    """Load a recorded raw gaze stream from a TSV file."""
    return list(samples_from_dataframe(read_tsv(path)))


def events_to_dataframe(events: Iterable[ClassifiedGazeEvent]) -> pd.DataFrame:
    records = [event.to_record() for event in events]
    if not records:
        return pd.DataFrame(columns=EVENT_COLUMNS)
    return pd.DataFrame.from_records(records, columns=EVENT_COLUMNS)


def write_events(events: Iterable[ClassifiedGazeEvent], path: str | Path) -> pd.DataFrame:
    df = events_to_dataframe(events)
    write_tsv(df, path)
    return df


EVENT_COLUMNS: List[str] = [
    "device_time_stamp",
    "system_time_stamp",
    "interval_usec",
    *(
        f"{side}_{name}"
        for side in ("left", "right")
        for name in ("x_px", "y_px", "valid", "velocity_deg_per_sec", "movement")
    ),
]
