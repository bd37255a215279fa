# fame_ECLReporter/main.py
from __future__ import annotations
from pathlib import Path
import logging
import sys
import yaml

from fame_ECLReporter.core.errors import FameError
from fame_ECLReporter.core.normalize import stack
from fame_ECLReporter.core.pipeline import run_pipeline
from fame_ECLReporter.loaders import table_loader
from fame_ECLReporter.utils.detect import discover_inputs

def load_config(cfg_path: Path) -> dict:
    with cfg_path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}

def main(argv: list[str] | None = None):
    argv = sys.argv[1:] if argv is None else argv
    # ---------- config ----------
    here = Path(__file__).resolve().parent
    cfg = load_config(Path(argv[0]) if argv else here / "config.yaml")

    log_cfg = cfg.get("logging", {}) or {}
    logging.basicConfig(level=str(log_cfg.get("level", "WARNING")).upper(),
                        format="%(levelname)s %(name)s: %(message)s")
    verbose = bool(log_cfg.get("verbose", True))

    in_path = Path(cfg["input"]["path"]).resolve()
    recurse = bool(cfg["input"].get("recurse", True))
    out_root = Path(cfg["output"]["root"]).resolve()
    out_root.mkdir(parents=True, exist_ok=True)

    if verbose:
        print(f"[cfg] input={in_path} (recurse={recurse})")
        print(f"[cfg] output={out_root}")

    # ---------- discover ----------
    detected = discover_inputs(in_path, recurse=recurse, exclude=out_root)
    if not detected:
        print(f"[INFO] No CSV/YAML/PKL measurement tables found under: {in_path}")
        return 0
    if verbose:
        kinds: dict[str, int] = {}
        for d in detected:
            kinds[d.kind] = kinds.get(d.kind, 0) + 1
        print(f"[detector] found {sum(kinds.values())} inputs → {kinds}")

    # ---------- load ----------
    tables = []
    for item in detected:
        if verbose:
            print(f"  [load] {item.kind:5} {item.path.name}")
        try:
            tables.append(table_loader.load(item.path, cfg))
        except (FameError, ValueError, OSError) as e:
            print(f"[WARN] loader failed for {item.path.name}: {e}")

    if not tables:
        if verbose:
            print("[INFO] No measurements loaded; exiting without processing pipeline.")
        return 0

    measurements = stack(*tables)
    if verbose:
        print(f"[pipeline] processing {len(measurements)} measurement row(s) from {len(tables)} table(s)")
    results = run_pipeline(measurements, cfg, out_root)

    if verbose:
        for name, table in results.items():
            print(f"[summary] {name}: {len(table)} row(s), {len(table.conditions)} condition(s)")
    return 0

if __name__ == "__main__":
    sys.exit(main())
