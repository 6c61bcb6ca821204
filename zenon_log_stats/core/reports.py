# zenon_log_stats/core/reports.py
from __future__ import annotations
import logging
from pathlib import Path
from typing import Iterable
import numpy as np
import pandas as pd
from scipy.io import savemat

from .model import VariableStats
from .normalize import format_float, format_timestamp

COLUMNS = ["variable_id", "min_value", "min_timestamp", "max_value", "max_timestamp"]

_LOG = logging.getLogger(__name__)

def _sorted(records: Iterable[VariableStats]) -> list[VariableStats]:
    return sorted((r for r in records if r.has_values), key=lambda r: r.variable_id)

def format_record(rec: VariableStats) -> str:
    """``variableId;minValue;minTimestamp;maxValue;maxTimestamp``"""
    return ";".join(_row(rec))

def _row(rec: VariableStats) -> list[str]:
    return [
        str(rec.variable_id),
        format_float(rec.min_value),
        format_timestamp(rec.min_timestamp),
        format_float(rec.max_value),
        format_timestamp(rec.max_timestamp),
    ]

def _build_dataframe(records: list[VariableStats]) -> pd.DataFrame:
    """All cells pre-formatted as text so pandas does not re-render the floats."""
    return pd.DataFrame([_row(r) for r in records], columns=COLUMNS, dtype=str)

def _write_txt(df_out: pd.DataFrame, out_txt: Path) -> None:
    out_txt.parent.mkdir(parents=True, exist_ok=True)
    df_out.to_csv(out_txt, sep=";", header=False, index=False,
                  encoding="utf-8", lineterminator="\n")
    _LOG.info("[OK] wrote stats: %d variable(s) → %s", len(df_out), out_txt)

def _to_mat_cellstr(seq: list[str]) -> np.ndarray:
    """Make a MATLAB column cell array from a list of strings."""
    arr = np.empty((len(seq), 1), dtype=object)
    arr[:, 0] = [str(s) for s in seq]
    return arr

def _write_mat(records: list[VariableStats], out_mat: Path, varname: str) -> None:
    """
    Save a MATLAB struct with one Nx1 field per output column.
    Ids and values become double, timestamps cell arrays of text.
    """
    out_mat.parent.mkdir(parents=True, exist_ok=True)

    def numcol(vals) -> np.ndarray:
        return np.asarray(list(vals), dtype=float).reshape(-1, 1)

    mat_struct = {
        "variable_id":   numcol(r.variable_id for r in records),
        "min_value":     numcol(r.min_value for r in records),
        "min_timestamp": _to_mat_cellstr([format_timestamp(r.min_timestamp) for r in records]),
        "max_value":     numcol(r.max_value for r in records),
        "max_timestamp": _to_mat_cellstr([format_timestamp(r.max_timestamp) for r in records]),
    }
    savemat(out_mat, {varname: mat_struct})
    _LOG.info("[OK] wrote stats: %d variable(s) → %s", len(records), out_mat)

def write_stats(records: Iterable[VariableStats],
                out_path: Path,
                mat: bool = False,
                mat_variable: str = "stats") -> list[Path]:
    """
    Write the statistics sorted by ascending variable id.
    - out_path: the `;`-delimited text output, always written
    - mat: also save a MATLAB struct beside it with ``.mat``
    Returns the written paths. Errors propagate.
    """
    recs = _sorted(records)
    _write_txt(_build_dataframe(recs), out_path)
    written = [out_path]
    if mat:
        out_mat = out_path.with_suffix(".mat")
        _write_mat(recs, out_mat, mat_variable)
        written.append(out_mat)
    return written
