# zenon_log_stats/utils/paths.py
from __future__ import annotations
from pathlib import Path

DEFAULT_SUFFIX = "_stats.txt"

def input_exists(p: Path) -> bool:
    """Directories and dangling links do not count as input files."""
    return p.is_file()

def stats_output_path(p: Path, suffix: str = DEFAULT_SUFFIX) -> Path:
    """
    Replace the extension of ``p`` with ``suffix``, same directory.
    - A1.TXT          -> A1_stats.txt
    - logs/run.2.log  -> logs/run.2_stats.txt
    - export          -> export_stats.txt
    """
    return p.parent / (p.stem + suffix)
