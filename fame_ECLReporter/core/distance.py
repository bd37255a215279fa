# fame_ECLReporter/core/distance.py
from __future__ import annotations
from collections import defaultdict
from itertools import combinations

import numpy as np

from .model import Delta, DerivedRow, DistanceRow, Mode
from .ordering import sort_rows
from .settings import DistanceSort


def _delta(source: float | None, target: float | None) -> Delta:
    d = None if source is None or target is None else target - source
    return Delta(source, target, d)


def pairs(rows: list[DerivedRow]) -> list[DistanceRow]:
    """
    Every unordered pair of distinct compounds sharing a Mode. Within a mode the
    rows are ranked by their input order and each pair (i, j) with i < j is
    emitted once, ``From`` being the lower rank. Modes appear in first-seen order.
    """
    by_mode: dict[Mode, list[DerivedRow]] = defaultdict(list)
    for r in rows:
        by_mode[r.mode].append(r)

    out: list[DistanceRow] = []
    for mode, group in by_mode.items():
        for a, b in combinations(group, 2):
            out.append(DistanceRow(
                mode=mode,
                source=a.fatty_acid,
                target=b.fatty_acid,
                time=_delta(a.retention_time.absolute.mean, b.retention_time.absolute.mean),
                ecl=_delta(a.equivalent.ecl, b.equivalent.ecl),
            ))
    return out


def median_abs_delta(rows: list[DistanceRow], sort: DistanceSort) -> dict[Mode, float | None]:
    """Median of |delta| per mode, ignoring null deltas."""
    values: dict[Mode, list[float]] = {}
    for r in rows:
        d = (r.ecl if sort is DistanceSort.ECL else r.time).delta
        values.setdefault(r.mode, [])
        if d is not None:
            values[r.mode].append(abs(d))
    return {mode: (float(np.median(v)) if v else None) for mode, v in values.items()}


def sort_distance(rows: list[DistanceRow], sort: DistanceSort, descending: bool = False) -> list[DistanceRow]:
    medians = median_abs_delta(rows, DistanceSort(sort))
    return sort_rows(rows, lambda r: (medians[r.mode],), descending)
