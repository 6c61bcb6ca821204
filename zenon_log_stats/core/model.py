# zenon_log_stats/core/model.py
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Literal

DiagnosticKind = Literal[
    "malformed_mapping",
    "invalid_variable_id",
    "malformed_value",
    "malformed_value_fields",
    "unknown_channel",
    "invalid_value",
    "invalid_timestamp",
]

@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    line_number: int          # 1-based physical line in the input
    line: str                 # trimmed content line
    message: str

DiagnosticSink = Callable[[Diagnostic], None]

@dataclass
class VariableStats:
    variable_id: int
    min_value: float | None = None
    min_timestamp: datetime | None = None
    max_value: float | None = None
    max_timestamp: datetime | None = None
    _initialized: bool = field(default=False, repr=False, compare=False)

    def update(self, value: float, timestamp: datetime) -> None:
        """
        Fold one observation into the running min/max.
        Ties keep the earlier timestamp (strict comparisons only).
        """
        if not self._initialized:
            self.min_value, self.min_timestamp = value, timestamp
            self.max_value, self.max_timestamp = value, timestamp
            self._initialized = True
            return
        if value < self.min_value:
            self.min_value, self.min_timestamp = value, timestamp
        if value > self.max_value:
            self.max_value, self.max_timestamp = value, timestamp

    @property
    def has_values(self) -> bool:
        return self._initialized
