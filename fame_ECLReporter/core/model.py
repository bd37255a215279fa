# fame_ECLReporter/core/model.py
from __future__ import annotations
from dataclasses import dataclass, field
import struct
from typing import Any, Iterator, Union

import pandas as pd

Value = Union[float, None]


@dataclass(frozen=True, order=True)
class Mode:
    onset_temperature: float   # °C at injection
    temperature_step: float    # ramp, °C per time unit

    def _bits(self) -> bytes:
        return struct.pack("<dd", self.onset_temperature, self.temperature_step)

    # identity is bitwise: -0.0 differs from 0.0 and a NaN mode equals itself
    def __eq__(self, other) -> bool:
        if not isinstance(other, Mode):
            return NotImplemented
        return self._bits() == other._bits()

    def __hash__(self) -> int:
        return hash(self._bits())

    def to_dict(self) -> dict:
        return {"OnsetTemperature": self.onset_temperature, "TemperatureStep": self.temperature_step}


@dataclass(frozen=True)
class FattyAcid:
    """
    Fatty acid identity. ``indices`` are the double-bond positions, a negative
    position marks a trans bond. Equality and hashing ignore ``label``.
    """
    carbons: int
    indices: tuple[int, ...] = ()
    label: str = field(default="", compare=False)

    @property
    def unsaturation(self) -> int:
        return len(self.indices)

    @property
    def saturated(self) -> bool:
        return not self.indices

    @property
    def sort_key(self) -> tuple:
        return (self.carbons, len(self.indices), self.indices)

    def __lt__(self, other: "FattyAcid") -> bool:
        if not isinstance(other, FattyAcid):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __str__(self) -> str:
        text = f"{self.carbons}:{len(self.indices)}"
        if any(self.indices):   # all-zero positions mean "positions unknown"
            text += "-" + ",".join(f"{abs(i)}{'t' if i < 0 else 'c'}" for i in self.indices)
        return text

    def to_dict(self) -> dict:
        return {"Carbons": self.carbons, "Indices": list(self.indices), "Label": self.label}


@dataclass(frozen=True)
class MeasurementRow:
    mode: Mode
    fatty_acid: FattyAcid
    times: tuple[Value, ...]   # replicate retention times, None for a missing replicate

    def to_dict(self) -> dict:
        return {"Mode": self.mode.to_dict(), "FattyAcid": self.fatty_acid.to_dict(), "Time": list(self.times)}


@dataclass(frozen=True)
class AbsoluteTime:
    mean: Value
    standard_deviation: Value
    values: tuple[Value, ...]


@dataclass(frozen=True)
class RetentionTime:
    absolute: AbsoluteTime
    relative: Value
    delta: Value


@dataclass(frozen=True)
class Equivalent:
    ecl: Value
    fcl: Value
    ecn: int


@dataclass(frozen=True)
class Mass:
    rco: float
    rcoo: float
    rcooh: float
    rcooch3: float


@dataclass(frozen=True)
class Meta:
    slope: Value
    angle: Value


@dataclass(frozen=True)
class DerivedRow:
    mode: Mode
    fatty_acid: FattyAcid
    retention_time: RetentionTime
    temperature: Value
    equivalent: Equivalent
    mass: Mass
    meta: Meta
    index: int | None = None

    def to_dict(self) -> dict:
        rt = self.retention_time
        return {
            "Mode": self.mode.to_dict(),
            "FattyAcid": self.fatty_acid.to_dict(),
            "Time": {
                "Absolute": {
                    "Mean": rt.absolute.mean,
                    "StandardDeviation": rt.absolute.standard_deviation,
                    "Values": list(rt.absolute.values),
                },
                "Relative": rt.relative,
                "Delta": rt.delta,
            },
            "Temperature": self.temperature,
            "Equivalent": {"ECL": self.equivalent.ecl, "FCL": self.equivalent.fcl, "ECN": self.equivalent.ecn},
            "Mass": {
                "RCO": self.mass.rco,
                "RCOO": self.mass.rcoo,
                "RCOOH": self.mass.rcooh,
                "RCOOCH3": self.mass.rcooch3,
            },
            "Meta": {"Slope": self.meta.slope, "Angle": self.meta.angle},
            "Index": self.index,
        }


@dataclass(frozen=True)
class Delta:
    source: Value   # "From"
    target: Value   # "To"
    delta: Value


@dataclass(frozen=True)
class DistanceRow:
    mode: Mode
    source: FattyAcid   # "From"
    target: FattyAcid   # "To"
    time: Delta
    ecl: Delta
    index: int | None = None

    def to_dict(self) -> dict:
        return {
            "Index": self.index,
            "Mode": self.mode.to_dict(),
            "From": self.source.to_dict(),
            "To": self.target.to_dict(),
            "Time": {"From": self.time.source, "To": self.time.target, "Delta": self.time.delta},
            "ECL": {"From": self.ecl.source, "To": self.ecl.target, "Delta": self.ecl.delta},
        }


@dataclass(frozen=True)
class PlotRow:
    key: Any    # FattyAcid or a temperature, depending on the grouping
    retention_times: tuple[Value, ...]
    ecls: tuple[Value, ...]
    index: int | None = None

    def to_dict(self) -> dict:
        key = self.key.to_dict() if isinstance(self.key, FattyAcid) else self.key
        return {
            "Index": self.index,
            "Key": key,
            "RetentionTime": list(self.retention_times),
            "ECL": list(self.ecls),
        }


def flatten(d: dict, prefix: str = "") -> dict:
    """Nested mapping -> single level with dotted keys (lists are kept as values)."""
    out: dict = {}
    for k, v in d.items():
        name = f"{prefix}.{k}" if prefix else str(k)
        if isinstance(v, dict):
            out.update(flatten(v, name))
        else:
            out[name] = v
    return out


@dataclass(frozen=True)
class Table:
    """Output of one pipeline run. ``conditions`` holds per-row conditions met while computing."""
    name: str                      # "source" | "plot" | "distance"
    rows: tuple = ()
    conditions: tuple = field(default=(), compare=False)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator:
        return iter(self.rows)

    def __getitem__(self, item):
        return self.rows[item]

    @property
    def empty(self) -> bool:
        return not self.rows

    def to_dicts(self) -> list[dict]:
        return [r.to_dict() for r in self.rows]

    def to_frame(self) -> pd.DataFrame:
        records = [flatten(d) for d in self.to_dicts()]
        return pd.DataFrame(records, columns=list(COLUMNS[self.name]) if not records else None)


COLUMNS: dict[str, tuple[str, ...]] = {
    "source": (
        "Mode.OnsetTemperature", "Mode.TemperatureStep",
        "FattyAcid.Carbons", "FattyAcid.Indices", "FattyAcid.Label",
        "Time.Absolute.Mean", "Time.Absolute.StandardDeviation", "Time.Absolute.Values",
        "Time.Relative", "Time.Delta", "Temperature",
        "Equivalent.ECL", "Equivalent.FCL", "Equivalent.ECN",
        "Mass.RCO", "Mass.RCOO", "Mass.RCOOH", "Mass.RCOOCH3",
        "Meta.Slope", "Meta.Angle", "Index",
    ),
    "distance": (
        "Index", "Mode.OnsetTemperature", "Mode.TemperatureStep",
        "From.Carbons", "From.Indices", "From.Label",
        "To.Carbons", "To.Indices", "To.Label",
        "Time.From", "Time.To", "Time.Delta",
        "ECL.From", "ECL.To", "ECL.Delta",
    ),
    "plot": ("Index", "Key", "RetentionTime", "ECL"),
    "measurements": (
        "Mode.OnsetTemperature", "Mode.TemperatureStep",
        "FattyAcid.Carbons", "FattyAcid.Indices", "FattyAcid.Label", "Time",
    ),
}
