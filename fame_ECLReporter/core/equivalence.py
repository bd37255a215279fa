# fame_ECLReporter/core/equivalence.py
from __future__ import annotations
from collections import defaultdict
import logging
import math

import numpy as np

from .aggregate import Aggregate
from .errors import NoBracketingReference, NonPositiveTime, NoReferenceCompound, RowCondition
from .fatty_acid import Form, ecn, masses
from .model import DerivedRow, Equivalent, FattyAcid, Mass, Meta, Mode, RetentionTime

MAX_TEMPERATURE = 250.0   # °C, column limit

_LOG = logging.getLogger(__name__)


def temperature(mode: Mode, t: float | None) -> float | None:
    if t is None:
        return None
    return min(mode.onset_temperature + t * mode.temperature_step, MAX_TEMPERATURE)


def relative_time(t: float | None, reference_time: float | None) -> float | None:
    if t is None or reference_time is None or reference_time == 0:
        return None
    return t / reference_time


class SaturatedReferences:
    """Saturated compounds of one mode with a known mean time, ordered by carbon count."""

    def __init__(self, aggregates: list[Aggregate]):
        pairs = sorted(
            (a.fatty_acid.carbons, a.time.mean)
            for a in aggregates
            if a.fatty_acid.saturated and a.time.mean is not None
        )
        self.carbons = np.asarray([c for c, _ in pairs], dtype=float)
        self.times = np.asarray([t for _, t in pairs], dtype=float)

    def bracket(self, t: float) -> tuple[int | None, int | None]:
        """
        Positions of the floor (largest carbon count eluting at or before ``t``)
        and the ceiling (smallest carbon count eluting at or after ``t``).
        """
        below = np.nonzero(self.times <= t)[0]
        above = np.nonzero(self.times >= t)[0]
        floor = int(below[-1]) if below.size else None
        ceiling = int(above[0]) if above.size else None
        return floor, ceiling


def interpolate(t: float, floor: tuple[float, float], ceiling: tuple[float, float],
                logarithmic: bool = False) -> float | None:
    """ECL of a compound at time ``t`` between two (carbons, time) references."""
    (cf, tf), (cc, tc) = floor, ceiling
    if tc == tf:
        return float(cf)
    if logarithmic:
        if min(t, tf, tc) <= 0:
            return None
        t, tf, tc = math.log(t), math.log(tf), math.log(tc)
    return float(cf + (cc - cf) * (t - tf) / (tc - tf))


def _equivalents(agg: Aggregate, refs: SaturatedReferences, logarithmic: bool,
                 conditions: list[RowCondition]) -> tuple[float | None, float | None, float | None, float | None]:
    """ECL, FCL, bracket time delta and slope for one compound."""
    fa, t = agg.fatty_acid, agg.time.mean
    if fa.saturated:
        return float(fa.carbons), 0.0, (0.0 if t is not None else None), None
    if t is None:
        return None, None, None, None

    floor, ceiling = refs.bracket(t)
    if floor is None or ceiling is None:
        side = "below" if floor is None else "above"
        conditions.append(NoBracketingReference(agg.mode, fa, side))
        _LOG.debug("no saturated reference %s %s in %s", side, fa, agg.mode)
        return None, None, None, None

    cf, tf = refs.carbons[floor], refs.times[floor]
    cc, tc = refs.carbons[ceiling], refs.times[ceiling]
    if logarithmic and min(t, tf, tc) <= 0:
        conditions.append(NonPositiveTime(agg.mode, fa, (t, float(tf), float(tc))))
        _LOG.debug("non-positive time around %s in %s, no logarithmic ECL", fa, agg.mode)
        return None, None, None, None
    ecl = interpolate(t, (cf, tf), (cc, tc), logarithmic)
    fcl = None if ecl is None else ecl - fa.carbons
    delta = float(tc - tf)
    slope = float((cc - cf) / delta) if delta != 0 else None
    return ecl, fcl, delta, slope


def annotate(aggregates: list[Aggregate], relative: FattyAcid | None = None,
             logarithmic: bool = False) -> tuple[list[DerivedRow], list[RowCondition]]:
    """
    Derive relative time, temperature, ECL/FCL/ECN, masses and bracket slope for
    each aggregate. Every quantity is computed within its own Mode. Returns the
    rows in input order plus the per-row conditions met on the way.
    """
    by_mode: dict[Mode, list[Aggregate]] = defaultdict(list)
    for a in aggregates:
        by_mode[a.mode].append(a)

    refs = {mode: SaturatedReferences(group) for mode, group in by_mode.items()}
    conditions: list[RowCondition] = []
    reference_times: dict[Mode, float | None] = {}
    for mode, group in by_mode.items():
        if relative is None:
            reference_times[mode] = None
            continue
        match = next((a for a in group if a.fatty_acid == relative), None)
        if match is None:
            conditions.append(NoReferenceCompound(mode, relative))
            _LOG.info("relative reference %s missing in %s", relative, mode)
        reference_times[mode] = None if match is None else match.time.mean

    rows: list[DerivedRow] = []
    for a in aggregates:
        fa, t = a.fatty_acid, a.time.mean
        ecl, fcl, delta, slope = _equivalents(a, refs[a.mode], logarithmic, conditions)
        weights = masses(fa)
        rows.append(DerivedRow(
            mode=a.mode,
            fatty_acid=fa,
            retention_time=RetentionTime(
                absolute=a.time,
                relative=relative_time(t, reference_times[a.mode]),
                delta=delta,
            ),
            temperature=temperature(a.mode, t),
            equivalent=Equivalent(ecl=ecl, fcl=fcl, ecn=ecn(fa)),
            mass=Mass(
                rco=weights[Form.RCO],
                rcoo=weights[Form.RCOO],
                rcooh=weights[Form.RCOOH],
                rcooch3=weights[Form.RCOOCH3],
            ),
            meta=Meta(slope=slope, angle=None if slope is None else math.degrees(math.atan(slope))),
        ))
    return rows, conditions
