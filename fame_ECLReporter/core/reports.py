# fame_ECLReporter/core/reports.py
from __future__ import annotations
from pathlib import Path
from typing import Iterable, Literal
import numpy as np
import pandas as pd
import yaml
from scipy.io import savemat

from .model import Table
from .normalize import join_list

ReportFormat = Literal["csv", "yaml", "bin", "mat"]
SUFFIXES: dict[str, str] = {"csv": ".csv", "yaml": ".yaml", "bin": ".pkl", "mat": ".mat"}


def flat_frame(table: Table) -> pd.DataFrame:
    """Flat frame with list cells joined by ';' (CSV/MAT friendly)."""
    df = table.to_frame()
    for col in df.columns:
        if df[col].map(lambda v: isinstance(v, (list, tuple))).any():
            df[col] = df[col].map(lambda v: join_list(v) if isinstance(v, (list, tuple)) else v)
    return df


def _write_csv(table: Table, out_csv: Path, title: str) -> None:
    out_csv.parent.mkdir(parents=True, exist_ok=True)
    flat_frame(table).to_csv(out_csv, index=False, encoding="utf-8")
    print(f"[OK] wrote report: {title} → {out_csv}")


def _write_yaml(table: Table, out_yaml: Path, title: str) -> None:
    out_yaml.parent.mkdir(parents=True, exist_ok=True)
    with out_yaml.open("w", encoding="utf-8") as f:
        yaml.safe_dump(table.to_dicts(), f, sort_keys=False, allow_unicode=True)
    print(f"[OK] wrote report: {title} → {out_yaml}")


def _write_bin(table: Table, out_pkl: Path, title: str) -> None:
    out_pkl.parent.mkdir(parents=True, exist_ok=True)
    table.to_frame().to_pickle(out_pkl)
    print(f"[OK] wrote report: {title} → {out_pkl}")


def _to_mat_cellstr(seq: list) -> np.ndarray:
    """Make a MATLAB column cell array from a list of strings."""
    seq2 = [("" if s is None else str(s)) for s in seq]
    arr = np.empty((len(seq2), 1), dtype=object)
    arr[:, 0] = seq2
    return arr


def _write_mat(table: Table, out_mat: Path, varname: str, title: str) -> None:
    """
    Save a MATLAB struct with one field per column (dots become underscores).
    Numeric columns become double (Nx1, NaN for null), everything else a cell array.
    """
    out_mat.parent.mkdir(parents=True, exist_ok=True)
    df = flat_frame(table)
    mat_struct = {}
    for col in df.columns:
        name = col.replace(".", "_")
        numeric = pd.to_numeric(df[col], errors="coerce")
        if numeric.notna().sum() == df[col].notna().sum():
            mat_struct[name] = numeric.to_numpy(dtype=float).reshape(-1, 1)
        else:
            mat_struct[name] = _to_mat_cellstr([None if pd.isna(v) else v for v in df[col].tolist()])
    savemat(out_mat, {varname: mat_struct})
    print(f"[OK] wrote report: {title} → {out_mat}")


def write_table(table: Table,
                out_base: Path,
                title: str,
                formats: Iterable[ReportFormat] = ("csv",),
                mat_variable: str = "report") -> list[Path]:
    """
    Write ``table`` once per requested format.
    - out_base is a *base path without extension* (e.g., .../report)
    - formats: any of "csv" | "yaml" | "bin" | "mat"
    """
    written: list[Path] = []
    for fmt in formats:
        if fmt not in SUFFIXES:
            raise ValueError(f"unknown report format {fmt!r}")
        path = out_base.with_suffix(SUFFIXES[fmt])
        if fmt == "csv":
            _write_csv(table, path, title)
        elif fmt == "yaml":
            _write_yaml(table, path, title)
        elif fmt == "bin":
            _write_bin(table, path, title)
        else:
            _write_mat(table, path, mat_variable, title)
        written.append(path)
    return written
