# zenon_log_stats/core/sections.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Literal

_LOG = logging.getLogger(__name__)

LineKind = Literal["blank", "header", "content"]
SectionState = Literal["none", "variables", "values"]

@dataclass(frozen=True)
class SectionCfg:
    marker: str = "-"
    variables: str = "-VARIABLES-"
    values: str = "-VALUES-"

def section_cfg_from_config(cfg: dict | None) -> SectionCfg:
    """Build the section names from the optional ``sections`` block of config.yaml."""
    sec = (cfg or {}).get("sections", {}) if cfg else {}
    sec = sec or {}
    if not isinstance(sec, dict):
        raise ValueError(f"sections must be a mapping (got {type(sec).__name__})")
    defaults = SectionCfg()
    marker = str(sec.get("marker", defaults.marker))
    if not marker:
        raise ValueError("sections.marker must not be empty")
    return SectionCfg(
        marker=marker,
        variables=str(sec.get("variables", defaults.variables)).strip(),
        values=str(sec.get("values", defaults.values)).strip(),
    )

def classify_line(line: str, cfg: SectionCfg) -> LineKind:
    """``line`` must already be stripped."""
    if not line:
        return "blank"
    if line.startswith(cfg.marker) and line.endswith(cfg.marker):
        return "header"
    return "content"

class SectionRouter:
    """
    Tracks the most recent header line.

    Only the two configured section names have parsing effect; every other
    header (and the time before the first header) maps to state ``none``.
    """

    def __init__(self, cfg: SectionCfg | None = None):
        self.cfg = cfg or SectionCfg()
        self.current_section = ""

    def enter(self, header: str) -> None:
        if header != self.current_section:
            _LOG.debug("section %r -> %r", self.current_section, header)
        self.current_section = header

    @property
    def state(self) -> SectionState:
        if self.current_section == self.cfg.variables:
            return "variables"
        if self.current_section == self.cfg.values:
            return "values"
        return "none"

    def route(self, raw_line: str) -> tuple[SectionState, str] | None:
        """
        Feed one physical line. Returns ``(state, content)`` for a content
        line, ``None`` for blank and header lines.
        """
        line = raw_line.strip()
        kind = classify_line(line, self.cfg)
        if kind == "blank":
            return None
        if kind == "header":
            self.enter(line)
            return None
        return self.state, line
