# fame_ECLReporter/core/grouping.py
from __future__ import annotations

from .model import DerivedRow, PlotRow
from .settings import Group


def group_key(row: DerivedRow, group: Group):
    if group is Group.FATTY_ACID:
        return row.fatty_acid
    if group is Group.ONSET_TEMPERATURE:
        return row.mode.onset_temperature
    return row.mode.temperature_step


def group_for_plot(rows: list[DerivedRow], group: Group) -> list[PlotRow]:
    """
    Collect mean retention time and ECL per group key, groups in first-appearance
    order and values in row order.
    """
    group = Group(group)
    times: dict = {}
    ecls: dict = {}
    for r in rows:
        key = group_key(r, group)
        times.setdefault(key, []).append(r.retention_time.absolute.mean)
        ecls.setdefault(key, []).append(r.equivalent.ecl)
    return [PlotRow(key=k, retention_times=tuple(times[k]), ecls=tuple(ecls[k])) for k in times]
