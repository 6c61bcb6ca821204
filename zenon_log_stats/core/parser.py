# zenon_log_stats/core/parser.py
from __future__ import annotations
import logging
from pathlib import Path
from typing import Iterable

from .aggregator import StatisticsAggregator
from .model import Diagnostic, DiagnosticKind, DiagnosticSink
from .normalize import to_float, to_int, to_timestamp
from .sections import SectionCfg, SectionRouter

_LOG = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8-sig"

def log_diagnostic(d: Diagnostic) -> None:
    """Default sink: one WARNING per rejected line."""
    _LOG.warning("line %d: %s: %s", d.line_number, d.message, d.line)


class LineParser:
    """
    Feeds content lines of one file into a StatisticsAggregator.
    Every rejection is reported to ``sink`` and only drops that line.
    """

    def __init__(self, agg: StatisticsAggregator, sink: DiagnosticSink | None = None):
        self.agg = agg
        self.sink = sink or log_diagnostic
        self.n_rejected = 0

    def _warn(self, kind: DiagnosticKind, line_number: int, line: str, message: str) -> None:
        self.n_rejected += 1
        self.sink(Diagnostic(kind=kind, line_number=line_number, line=line, message=message))

    def parse_mapping(self, line: str, line_number: int = 0) -> bool:
        """``<channel>=<variableId>``"""
        parts = line.split("=")
        if len(parts) != 2:
            self._warn("malformed_mapping", line_number, line, "Malformed variable mapping line")
            return False
        channel = parts[0].strip()
        variable_id = to_int(parts[1])
        if variable_id is None:
            self._warn("invalid_variable_id", line_number, line, "Could not parse variable ID")
            return False
        self.agg.map_channel(channel, variable_id)
        return True

    def parse_value(self, line: str, line_number: int = 0) -> bool:
        """``@<channel>:<value>;<status>;<timestamp>``"""
        head, sep, rest = line.partition(":")
        if not sep:
            self._warn("malformed_value", line_number, line, "Malformed value entry (no ':' found)")
            return False
        fields = rest.split(";")
        if len(fields) != 3:
            self._warn("malformed_value_fields", line_number, line,
                       f"Malformed value entry (expected 3 ';'-separated fields, got {len(fields)})")
            return False
        raw_value, _status, raw_ts = fields      # status is carried but not evaluated

        channel = head.strip()
        variable_id = self.agg.resolve(channel)
        if variable_id is None:
            self._warn("unknown_channel", line_number, line,
                       f"Channel index '{channel}' not found in variable mappings")
            return False

        value = to_float(raw_value)
        if value is None:
            self._warn("invalid_value", line_number, line, "Could not parse value")
            return False

        timestamp = to_timestamp(raw_ts)
        if timestamp is None:
            self._warn("invalid_timestamp", line_number, line, "Could not parse timestamp")
            return False

        self.agg.add_value(variable_id, value, timestamp)
        return True


def analyze_lines(lines: Iterable[str],
                  sink: DiagnosticSink | None = None,
                  section_cfg: SectionCfg | None = None) -> StatisticsAggregator:
    """
    Single pass over ``lines``; returns a fresh aggregator holding the
    channel map and statistics of this input only.
    """
    agg = StatisticsAggregator()
    router = SectionRouter(section_cfg)
    parser = LineParser(agg, sink)
    n_lines = 0

    for n_lines, raw in enumerate(lines, start=1):
        routed = router.route(raw)
        if routed is None:
            continue
        state, line = routed
        if state == "variables":
            parser.parse_mapping(line, n_lines)
        elif state == "values":
            parser.parse_value(line, n_lines)

    _LOG.debug("scanned %d lines: %d channels mapped, %d variables, %d rejected",
               n_lines, len(agg.channel_map), len(agg), parser.n_rejected)
    return agg


def analyze_file(path: Path,
                 sink: DiagnosticSink | None = None,
                 section_cfg: SectionCfg | None = None,
                 encoding: str = DEFAULT_ENCODING) -> StatisticsAggregator:
    """
    Stream ``path`` line by line. I/O and decoding errors propagate to the
    caller; nothing is written here.
    """
    with path.open("r", encoding=encoding) as f:
        return analyze_lines(f, sink=sink, section_cfg=section_cfg)
