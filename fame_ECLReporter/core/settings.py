# fame_ECLReporter/core/settings.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from .fatty_acid import parse_fatty_acid
from .model import FattyAcid, Mode


class Order(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


class SourceSort(str, Enum):
    FATTY_ACID = "fatty_acid"   # Mode, then fatty acid
    TIME = "time"               # Mode, then ECL, then mean retention time


class DistanceSort(str, Enum):
    ECL = "ecl"     # median |ECL delta| of the mode
    TIME = "time"   # median |time delta| of the mode


class Kind(str, Enum):
    TABLE = "table"
    PLOT = "plot"


class Group(str, Enum):
    FATTY_ACID = "fatty_acid"
    ONSET_TEMPERATURE = "onset_temperature"
    TEMPERATURE_STEP = "temperature_step"


@dataclass(frozen=True)
class Filter:
    fatty_acids: tuple[FattyAcid, ...] = ()     # empty = no restriction
    onset_temperature: float | None = None
    temperature_step: float | None = None

    def __post_init__(self):
        # order-insensitive allow-list
        unique = sorted(set(self.fatty_acids))
        object.__setattr__(self, "fatty_acids", tuple(unique))

    def accepts(self, mode: Mode, fatty_acid: FattyAcid) -> bool:
        if self.onset_temperature is not None and mode.onset_temperature != self.onset_temperature:
            return False
        if self.temperature_step is not None and mode.temperature_step != self.temperature_step:
            return False
        return not self.fatty_acids or fatty_acid in self.fatty_acids

    def payload(self) -> dict:
        return {
            "fatty_acids": [[fa.carbons, list(fa.indices)] for fa in self.fatty_acids],
            "onset_temperature": self.onset_temperature,
            "temperature_step": self.temperature_step,
        }


@dataclass(frozen=True)
class SourceSettings:
    filter: Filter = field(default_factory=Filter)
    ddof: int = 1
    relative: FattyAcid | None = None
    logarithmic: bool = False
    sort: SourceSort = SourceSort.TIME
    order: Order = Order.ASCENDING
    kind: Kind = Kind.TABLE
    group: Group = Group.FATTY_ACID

    def __post_init__(self):
        if self.ddof not in (0, 1, 2):
            raise ValueError(f"ddof must be 0, 1 or 2, got {self.ddof!r}")
        object.__setattr__(self, "sort", SourceSort(self.sort))
        object.__setattr__(self, "order", Order(self.order))
        object.__setattr__(self, "kind", Kind(self.kind))
        object.__setattr__(self, "group", Group(self.group))

    @property
    def descending(self) -> bool:
        return self.order is Order.DESCENDING

    def payload(self) -> dict:
        """Plain, label-free view of the settings used for fingerprinting."""
        return {
            "filter": self.filter.payload(),
            "ddof": self.ddof,
            "relative": None if self.relative is None else [self.relative.carbons, list(self.relative.indices)],
            "logarithmic": self.logarithmic,
            "sort": self.sort.value,
            "order": self.order.value,
            "kind": self.kind.value,
            "group": self.group.value,
        }


@dataclass(frozen=True)
class DistanceSettings:
    filter: Filter = field(default_factory=Filter)
    logarithmic: bool = False
    sort: DistanceSort = DistanceSort.ECL
    order: Order = Order.ASCENDING

    def __post_init__(self):
        object.__setattr__(self, "sort", DistanceSort(self.sort))
        object.__setattr__(self, "order", Order(self.order))

    @property
    def descending(self) -> bool:
        return self.order is Order.DESCENDING

    def payload(self) -> dict:
        return {
            "filter": self.filter.payload(),
            "logarithmic": self.logarithmic,
            "sort": self.sort.value,
            "order": self.order.value,
        }


# --- config-driven helpers ---

def _to_float(val) -> float | None:
    if val is None:
        return None
    try:
        return float(val)
    except (TypeError, ValueError):
        return None


def _fatty_acids(value) -> tuple[FattyAcid, ...]:
    if value is None:
        return ()
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        value = [value]
    return tuple(v if isinstance(v, FattyAcid) else parse_fatty_acid(str(v)) for v in value)


def filter_from_config(section: dict | None) -> Filter:
    section = section or {}
    return Filter(
        fatty_acids=_fatty_acids(section.get("fatty_acids")),
        onset_temperature=_to_float(section.get("onset_temperature")),
        temperature_step=_to_float(section.get("temperature_step")),
    )


def settings_from_config(cfg: dict | None) -> SourceSettings:
    """Read the ``source`` section of config.yaml; absent keys keep their defaults."""
    src = (cfg or {}).get("source", {}) or {}
    relative = src.get("relative")
    return SourceSettings(
        filter=filter_from_config(src.get("filter")),
        ddof=int(src["ddof"]) if src.get("ddof") is not None else 1,
        relative=parse_fatty_acid(str(relative)) if relative not in (None, "") else None,
        logarithmic=bool(src.get("logarithmic", False)),
        sort=SourceSort(str(src.get("sort", SourceSort.TIME.value)).lower().strip()),
        order=Order(str(src.get("order", Order.ASCENDING.value)).lower().strip()),
        kind=Kind(str(src.get("kind", Kind.TABLE.value)).lower().strip()),
        group=Group(str(src.get("group", Group.FATTY_ACID.value)).lower().strip()),
    )


def distance_settings_from_config(cfg: dict | None) -> DistanceSettings:
    dst = (cfg or {}).get("distance", {}) or {}
    return DistanceSettings(
        filter=filter_from_config(dst.get("filter")),
        logarithmic=bool(dst.get("logarithmic", False)),
        sort=DistanceSort(str(dst.get("sort", DistanceSort.ECL.value)).lower().strip()),
        order=Order(str(dst.get("order", Order.ASCENDING.value)).lower().strip()),
    )
