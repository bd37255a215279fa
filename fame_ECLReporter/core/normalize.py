# fame_ECLReporter/core/normalize.py
from __future__ import annotations
import math
from numbers import Integral, Real
from typing import Iterable

import numpy as np
import pandas as pd

from .errors import MissingColumn, TypeMismatch
from .model import FattyAcid, MeasurementRow, Mode, Table

ONSET = "Mode.OnsetTemperature"
STEP = "Mode.TemperatureStep"
CARBONS = "FattyAcid.Carbons"
INDICES = "FattyAcid.Indices"
LABEL = "FattyAcid.Label"
TIME = "Time"

REQUIRED_COLUMNS = (ONSET, STEP, CARBONS, INDICES, TIME)
LIST_SEPARATOR = ";"


def _is_null(v) -> bool:
    if v is None:
        return True
    try:
        return bool(pd.isna(v))
    except (TypeError, ValueError):
        return False


def split_list(text: str) -> list[str]:
    """``"62.1;62.3;"`` -> ``["62.1", "62.3", ""]``; commas are accepted too."""
    text = text.strip().strip("[]")
    if not text:
        return []
    sep = LIST_SEPARATOR if LIST_SEPARATOR in text else ","
    return [t.strip() for t in text.split(sep)]


def join_list(values: Iterable) -> str:
    return LIST_SEPARATOR.join("" if _is_null(v) else str(v) for v in values)


def to_float(value, column: str, row: int | None = None) -> float:
    if isinstance(value, bool) or _is_null(value):
        raise TypeMismatch(column, value, "a number", row)
    if isinstance(value, Real):
        return float(value)
    try:
        return float(str(value).replace(",", "."))
    except ValueError:
        raise TypeMismatch(column, value, "a number", row) from None


def to_carbons(value, row: int | None = None) -> int:
    c = to_float(value, CARBONS, row)
    if not c.is_integer() or not 0 <= c <= 255:
        raise TypeMismatch(CARBONS, value, "an integer in 0..255", row)
    return int(c)


def to_indices(value, row: int | None = None) -> tuple[int, ...]:
    if isinstance(value, str):
        items = split_list(value)
    elif isinstance(value, (list, tuple, np.ndarray, pd.Series)):
        items = list(value)
    elif _is_null(value):
        return ()
    else:
        raise TypeMismatch(INDICES, value, "a sequence of integers", row)
    out: list[int] = []
    for item in items:
        if isinstance(item, Integral) and not isinstance(item, bool):
            out.append(int(item))
            continue
        try:
            f = float(item)
        except (TypeError, ValueError):
            raise TypeMismatch(INDICES, value, "a sequence of integers", row) from None
        if not f.is_integer() or not -128 <= f <= 127:
            raise TypeMismatch(INDICES, value, "a sequence of int8", row)
        out.append(int(f))
    return tuple(out)


def to_times(value, row: int | None = None) -> tuple[float | None, ...]:
    if isinstance(value, str):
        items = split_list(value)
    elif isinstance(value, (list, tuple, np.ndarray, pd.Series)):
        items = list(value)
    elif isinstance(value, Real) and not isinstance(value, bool):
        items = [value]
    elif _is_null(value):
        return ()
    else:
        raise TypeMismatch(TIME, value, "a sequence of numbers", row)
    out: list[float | None] = []
    for item in items:
        if _is_null(item) or (isinstance(item, str) and item.strip().lower() in ("", "nan", "null", "none")):
            out.append(None)
            continue
        f = to_float(item, TIME, row)
        out.append(None if math.isnan(f) else f)
    return tuple(out)


def to_label(value) -> str:
    return "" if _is_null(value) else str(value)


def measurements_from_frame(df: pd.DataFrame) -> Table:
    """
    Validate a flat measurement frame (dotted column names) and convert it to
    MeasurementRow records. Raises MissingColumn / TypeMismatch.
    """
    if not isinstance(df, pd.DataFrame):
        raise TypeMismatch("<table>", type(df).__name__, "a pandas DataFrame")
    for col in REQUIRED_COLUMNS:
        if col not in df.columns:
            raise MissingColumn(col)
    has_label = LABEL in df.columns

    rows: list[MeasurementRow] = []
    for i, rec in enumerate(df.to_dict("records")):
        mode = Mode(to_float(rec[ONSET], ONSET, i), to_float(rec[STEP], STEP, i))
        fa = FattyAcid(
            carbons=to_carbons(rec[CARBONS], i),
            indices=to_indices(rec[INDICES], i),
            label=to_label(rec[LABEL]) if has_label else "",
        )
        rows.append(MeasurementRow(mode=mode, fatty_acid=fa, times=to_times(rec[TIME], i)))
    return Table("measurements", tuple(rows))


def as_measurements(data) -> Table:
    """Accept a DataFrame, a measurement Table or an iterable of MeasurementRow."""
    if isinstance(data, pd.DataFrame):
        return measurements_from_frame(data)
    if isinstance(data, Table):
        if data.name != "measurements":
            raise TypeMismatch("<table>", data.name, "a measurement table")
        return data
    rows = tuple(data)
    for i, r in enumerate(rows):
        if not isinstance(r, MeasurementRow):
            raise TypeMismatch("<row>", type(r).__name__, "MeasurementRow", i)
    return Table("measurements", rows)


def stack(*tables: Table) -> Table:
    """Concatenate measurement tables; duplicate (Mode, FattyAcid) keys are pooled by aggregation."""
    rows: list[MeasurementRow] = []
    for t in tables:
        rows.extend(as_measurements(t).rows)
    return Table("measurements", tuple(rows))
