# fame_ECLReporter/loaders/table_loader.py
from __future__ import annotations
from pathlib import Path
import io, logging, pickle
import pandas as pd
import yaml

from ..core.errors import TypeMismatch
from ..core.model import COLUMNS, Table
from ..core.normalize import join_list, measurements_from_frame

_LOG = logging.getLogger(__name__)


# ---------- flat delimited text ----------
def _df_from_csv_bytes(buff: bytes) -> pd.DataFrame:
    # everything stays text; normalize coerces and validates
    return pd.read_csv(io.BytesIO(buff), sep=",", decimal=".", dtype=str)


# ---------- structured text ----------
def _df_from_yaml(text: str, fname: str) -> pd.DataFrame:
    data = yaml.safe_load(text)
    if isinstance(data, dict):
        data = data.get("rows", data.get("data"))
    if data is None:
        data = []
    if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
        raise TypeMismatch("<table>", type(data).__name__, f"a list of row mappings in {fname}")
    if not data:
        return pd.DataFrame(columns=list(COLUMNS["measurements"]))
    return pd.json_normalize(data)


# ---------- binary ----------
def _load_pickle_any(path: Path):
    """Try pandas-aware unpickling, fallback to raw pickle."""
    try:
        return pd.read_pickle(path)
    except (pickle.UnpicklingError, AttributeError, EOFError, ImportError):
        with open(path, "rb") as f:
            return pickle.load(f)


def _extract_df(obj, fname: str) -> pd.DataFrame:
    """Extract DataFrame from a pickle object that might be DF or dict of DFs."""
    if isinstance(obj, pd.DataFrame):
        return obj
    if isinstance(obj, dict):
        for v in obj.values():
            if isinstance(v, pd.DataFrame):
                return v
    raise TypeMismatch("<table>", type(obj).__name__, f"a pickled DataFrame in {fname}")


# ---------- public loader ----------
def read_frame(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return _df_from_csv_bytes(path.read_bytes())
    if suffix in (".yaml", ".yml"):
        return _df_from_yaml(path.read_text(encoding="utf-8"), path.name)
    if suffix in (".pkl", ".bin"):
        return _extract_df(_load_pickle_any(path), path.name)
    raise ValueError(f"unsupported measurement file: {path.name}")


def load(path: Path, cfg: dict | None = None) -> Table:
    """
    Accepts: .csv, .yaml/.yml or .pkl/.bin measurement tables.
    Returns: validated measurement Table (raises MissingColumn / TypeMismatch).
    """
    table = measurements_from_frame(read_frame(path))
    _LOG.info("loaded %d measurement row(s) from %s", len(table), path.name)
    return table


def save(table: Table, path: Path) -> Path:
    """Write a measurement table in the format implied by the suffix."""
    path.parent.mkdir(parents=True, exist_ok=True)
    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(table.to_dicts(), f, sort_keys=False, allow_unicode=True)
        return path
    df = table.to_frame()
    if df.empty:
        df = pd.DataFrame(columns=list(COLUMNS["measurements"]))
    if suffix == ".csv":
        for col in ("FattyAcid.Indices", "Time"):
            df[col] = df[col].map(join_list)
        df.to_csv(path, index=False, encoding="utf-8")
    elif suffix in (".pkl", ".bin"):
        df.to_pickle(path)
    else:
        raise ValueError(f"unsupported measurement file: {path.name}")
    return path
