# zenon_log_stats/core/normalize.py
from __future__ import annotations
import re
from datetime import datetime
import numpy as np

TIMESTAMP_FORMAT = "%d.%m.%Y %H:%M:%S.%f"      # dd.MM.yyyy HH:mm:ss.fff on the wire
_TIMESTAMP_RE = re.compile(r"\d{2}\.\d{2}\.\d{4} \d{2}:\d{2}:\d{2}\.\d{3}", re.ASCII)
_INT_RE = re.compile(r"[+-]?\d+", re.ASCII)
_FLOAT_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)

# variable ids are signed 32-bit in the exporting system
INT32_MIN, INT32_MAX = -2**31, 2**31 - 1

def to_int(text: str) -> int | None:
    s = text.strip()
    if not _INT_RE.fullmatch(s):
        return None
    # int() refuses very long digit strings; anything past 10 digits is out of range anyway
    if len(s.lstrip("+-").lstrip("0")) > 10:
        return None
    v = int(s)
    if v < INT32_MIN or v > INT32_MAX:
        return None
    return v

def to_float(text: str) -> float | None:
    """Dot decimal separator only; no grouping, no nan/inf literals."""
    s = text.strip()
    if not _FLOAT_RE.fullmatch(s):
        return None
    v = float(s)
    if v in (float("inf"), float("-inf")):
        return None          # exponent overflow
    return v

def to_timestamp(text: str) -> datetime | None:
    s = text.strip()
    if not _TIMESTAMP_RE.fullmatch(s):
        return None
    try:
        return datetime.strptime(s, TIMESTAMP_FORMAT)
    except ValueError:
        return None          # e.g. 31.02. or hour 24

def format_timestamp(ts: datetime) -> str:
    # strftime does not zero-pad years below 1000 on every platform
    return (f"{ts.day:02d}.{ts.month:02d}.{ts.year:04d} "
            f"{ts.hour:02d}:{ts.minute:02d}:{ts.second:02d}.{ts.microsecond // 1000:03d}")

def format_float(v: float) -> str:
    """
    Shortest round-trippable text, written the way the exporter does:
    positional for exponents -5 < e < 15 (integral values without '.0'),
    otherwise '1E+15' / '1.5E-07'.
    """
    v = float(v)
    if v != 0.0:
        mant, exp = np.format_float_scientific(v, unique=True, trim="-", exp_digits=2).split("e")
        e = int(exp)
        if e < -4 or e >= 15:
            return f"{mant}E{'+' if e >= 0 else '-'}{abs(e):02d}"
    return np.format_float_positional(v, unique=True, trim="-")
