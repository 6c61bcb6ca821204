# zenon_log_stats/main.py
from __future__ import annotations
import argparse
import logging
from pathlib import Path
import yaml

from zenon_log_stats.core.pipeline import prepare_config, process_file

DEFAULT_CONFIG = Path(__file__).resolve().parent / "config.yaml"

USAGE = """\
Please provide the path to the input file.
Usage: zenon-log-stats <input_file_path> [--config CONFIG] [-v]
Example: zenon-log-stats A1.TXT
Note: the statistics are written next to the input as <name>_stats.txt."""

def load_config(cfg_path: Path) -> dict:
    with cfg_path.open("r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"top level must be a mapping, got {type(cfg).__name__}")
    return cfg

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Min/max statistics per variable from a zenon log export")
    ap.add_argument("input", nargs="?", default=None, help="Path to the exported log file")
    ap.add_argument("--config", default=None, help=f"YAML config (default: {DEFAULT_CONFIG.name} beside the package)")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args(argv)

    if args.input is None:
        print(USAGE)
        return 0

    # ---------- config ----------
    cfg_path = Path(args.config) if args.config else DEFAULT_CONFIG
    cfg: dict = {}
    if not cfg_path.is_file() and args.config:
        print(f"[ERROR] config not found: {cfg_path}")
        return 1
    try:
        if cfg_path.is_file():
            cfg = load_config(cfg_path)
        run = prepare_config(cfg)
    except (OSError, yaml.YAMLError, ValueError) as e:
        print(f"[ERROR] could not load config {cfg_path}: {e}")
        return 1

    log_cfg = cfg.get("logging") or {}
    verbose = args.verbose or (isinstance(log_cfg, dict) and bool(log_cfg.get("verbose", False)))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )
    if verbose:
        logging.getLogger(__name__).debug("[cfg] %s", cfg_path)

    # ---------- process ----------
    written = process_file(Path(args.input), run)
    return 0 if written is not None else 1

if __name__ == "__main__":
    raise SystemExit(main())
