# fame_ECLReporter/utils/detect.py
from __future__ import annotations
from pathlib import Path
from dataclasses import dataclass
from typing import Literal

DetectedKind = Literal["csv", "yaml", "bin", "unknown"]

@dataclass(frozen=True)
class DetectedItem:
    path: Path        # actual path on disk
    kind: DetectedKind

def detect_kind(p: Path) -> DetectedKind:
    """
    Classify a single path.
    - .csv           -> 'csv'
    - .yaml / .yml   -> 'yaml'
    - .pkl / .bin    -> 'bin'
    else             -> 'unknown'
    """
    suffix = p.suffix.lower()
    if suffix == ".csv":
        return "csv"
    if suffix in (".yaml", ".yml"):
        return "yaml"
    if suffix in (".pkl", ".bin"):
        return "bin"
    return "unknown"

def discover_inputs(root: Path, recurse: bool = True, exclude: Path | None = None) -> list[DetectedItem]:
    """
    If 'root' is a file -> return that one item (if known).
    If 'root' is a folder -> walk (optionally recursively) and collect measurement tables,
    skipping anything under 'exclude' (typically the output root).
    """
    items: list[DetectedItem] = []
    if root.is_file():
        kind = detect_kind(root)
        if kind != "unknown":
            items.append(DetectedItem(root.resolve(), kind))
        return items

    # folder
    it = root.rglob("*") if recurse else root.glob("*")
    excluded = exclude.resolve() if exclude is not None else None

    for p in it:
        if not p.is_file():
            continue
        rp = p.resolve()
        if excluded is not None and (rp == excluded or excluded in rp.parents):
            continue
        kind = detect_kind(p)
        if kind != "unknown":
            items.append(DetectedItem(rp, kind))

    # deterministic ordering
    items.sort(key=lambda x: (x.kind, str(x.path)))
    return items
