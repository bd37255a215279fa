# fame_ECLReporter/core/aggregate.py
from __future__ import annotations
from dataclasses import dataclass
import logging

import numpy as np

from .model import AbsoluteTime, FattyAcid, MeasurementRow, Mode

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class Aggregate:
    mode: Mode
    fatty_acid: FattyAcid
    time: AbsoluteTime


def mean_std(values, ddof: int = 1) -> tuple[float | None, float | None]:
    """
    Mean and standard deviation of the non-null values. The standard deviation
    is None when fewer than ``ddof + 1`` samples remain.
    """
    arr = np.asarray([v for v in values if v is not None], dtype=float)
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        return None, None
    mean = float(np.mean(arr))
    if arr.size <= ddof:
        return mean, None
    return mean, float(np.std(arr, ddof=ddof))


def aggregate(rows: list[MeasurementRow], ddof: int = 1) -> list[Aggregate]:
    """
    One Aggregate per (Mode, FattyAcid) in first-appearance order. Rows sharing
    a key are pooled; the raw replicate values are kept for display.
    """
    groups: dict[tuple[Mode, FattyAcid], list[float | None]] = {}
    first: dict[tuple[Mode, FattyAcid], FattyAcid] = {}
    for r in rows:
        key = (r.mode, r.fatty_acid)
        if key in groups:
            _LOG.debug("pooling duplicate measurement for %s in %s", r.fatty_acid, r.mode)
            groups[key].extend(r.times)
        else:
            groups[key] = list(r.times)
            first[key] = r.fatty_acid   # keeps the first label seen

    out: list[Aggregate] = []
    for key, values in groups.items():
        mean, std = mean_std(values, ddof)
        out.append(Aggregate(key[0], first[key], AbsoluteTime(mean, std, tuple(values))))
    return out
