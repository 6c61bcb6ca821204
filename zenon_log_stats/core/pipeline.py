# zenon_log_stats/core/pipeline.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path

from .model import DiagnosticSink
from .parser import DEFAULT_ENCODING, analyze_file
from .reports import write_stats
from .sections import SectionCfg, section_cfg_from_config
from ..utils.paths import DEFAULT_SUFFIX, input_exists, stats_output_path

_LOG = logging.getLogger(__name__)

def _block(cfg: dict, name: str) -> dict:
    blk = cfg.get(name)
    if blk is None:
        return {}
    if not isinstance(blk, dict):
        raise ValueError(f"{name} must be a mapping (got {type(blk).__name__})")
    return blk

@dataclass(frozen=True)
class RunCfg:
    encoding: str = DEFAULT_ENCODING
    suffix: str = DEFAULT_SUFFIX
    mat: bool = False
    mat_variable: str = "stats"
    sections: SectionCfg = SectionCfg()

def prepare_config(cfg: dict | None) -> RunCfg:
    """
    Validate the config dict once, before any input is read.
    Raises ValueError on a malformed config.
    """
    cfg = cfg or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"config must be a mapping (got {type(cfg).__name__})")
    inp, out, rep = _block(cfg, "input"), _block(cfg, "output"), _block(cfg, "reports")
    mat = rep.get("mat", False)
    if not isinstance(mat, bool):
        raise ValueError(f"reports.mat must be true or false (got {mat!r})")
    return RunCfg(
        encoding=str(inp.get("encoding", DEFAULT_ENCODING)),
        suffix=str(out.get("suffix", DEFAULT_SUFFIX)),
        mat=mat,
        mat_variable=str(rep.get("mat_variable", "stats")),
        sections=section_cfg_from_config(cfg),
    )

def process_file(in_path: Path, cfg: dict | RunCfg | None = None,
                 sink: DiagnosticSink | None = None) -> list[Path] | None:
    """
    Read one export, then write its statistics next to it.

    Returns the written paths, or None when the file could not be processed.
    Nothing is written unless the whole input was read without error.
    A raw config dict is validated first (ValueError on a bad config).
    """
    run = cfg if isinstance(cfg, RunCfg) else prepare_config(cfg)

    if not input_exists(in_path):
        _LOG.error("Input file not found: %s", in_path)
        return None

    # ---------- read ----------
    try:
        agg = analyze_file(in_path, sink=sink, section_cfg=run.sections, encoding=run.encoding)
    except (OSError, UnicodeDecodeError) as e:
        _LOG.error("Failed to read %s: %s", in_path, e)
        _LOG.debug("read failure", exc_info=True)
        return None

    # ---------- write ----------
    out_path = stats_output_path(in_path, run.suffix)
    try:
        written = write_stats(agg, out_path, mat=run.mat, mat_variable=run.mat_variable)
    except OSError as e:
        _LOG.error("Error writing output file %s: %s", out_path, e)
        _LOG.debug("write failure", exc_info=True)
        return None

    _LOG.info("Successfully processed %s: %d variable(s). Output written to: %s",
              in_path.name, len(agg), ", ".join(str(p) for p in written))
    return written
