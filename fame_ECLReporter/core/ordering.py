# fame_ECLReporter/core/ordering.py
from __future__ import annotations
from dataclasses import replace
from functools import cmp_to_key
from typing import Callable, Sequence, TypeVar

from .model import DerivedRow
from .settings import Filter, SourceSort

T = TypeVar("T")
KeyFn = Callable[[T], Sequence]


def apply_filter(rows: list[DerivedRow], flt: Filter) -> list[DerivedRow]:
    return [r for r in rows if flt.accepts(r.mode, r.fatty_acid)]


def _compare(a: Sequence, b: Sequence, descending: bool) -> int:
    for x, y in zip(a, b):
        if x is None and y is None:
            continue
        if x is None:           # nulls last, whatever the direction
            return 1
        if y is None:
            return -1
        if x == y:
            continue
        if x < y:
            result = -1
        elif y < x:
            result = 1
        else:           # unordered, e.g. -0.0 against 0.0
            continue
        return -result if descending else result
    return 0


def sort_rows(rows: list[T], key: KeyFn, descending: bool = False) -> list[T]:
    """
    Stable sort by a tuple-valued key. ``None`` components always sort last;
    ties keep their input order in both directions.
    """
    keys = [tuple(key(r)) for r in rows]
    order = sorted(range(len(rows)), key=cmp_to_key(lambda i, j: _compare(keys[i], keys[j], descending)))
    return [rows[i] for i in order]


def fatty_acid_key(row: DerivedRow) -> tuple:
    return (row.mode, row.fatty_acid)


def time_key(row: DerivedRow) -> tuple:
    return (row.mode, row.equivalent.ecl, row.retention_time.absolute.mean)


SOURCE_KEYS: dict[SourceSort, KeyFn] = {
    SourceSort.FATTY_ACID: fatty_acid_key,
    SourceSort.TIME: time_key,
}


def sort_source(rows: list[DerivedRow], sort: SourceSort, descending: bool = False) -> list[DerivedRow]:
    return sort_rows(rows, SOURCE_KEYS[SourceSort(sort)], descending)


def with_index(rows: list[T]) -> tuple[T, ...]:
    """Number rows by their final position."""
    return tuple(replace(r, index=i) for i, r in enumerate(rows))
