# zenon_log_stats/core/aggregator.py
from __future__ import annotations
import logging
from datetime import datetime
from typing import Iterator

from .model import VariableStats

_LOG = logging.getLogger(__name__)

VALUE_PREFIX = "@"

class StatisticsAggregator:
    """Channel -> variable id table plus the per-variable min/max records of one file."""

    def __init__(self):
        self._channel_map: dict[str, int] = {}
        self._stats: dict[int, VariableStats] = {}

    # ----- mapping table -----
    def map_channel(self, channel: str, variable_id: int) -> None:
        prev = self._channel_map.get(channel)
        if prev is not None and prev != variable_id:
            _LOG.debug("channel %r remapped %d -> %d", channel, prev, variable_id)
        self._channel_map[channel] = variable_id

    def resolve(self, channel: str) -> int | None:
        """
        Exact token first; value entries carry an '@' prefix that mapping
        lines usually omit, so fall back to the token without it.
        """
        vid = self._channel_map.get(channel)
        if vid is None and channel.startswith(VALUE_PREFIX):
            vid = self._channel_map.get(channel[len(VALUE_PREFIX):])
        return vid

    @property
    def channel_map(self) -> dict[str, int]:
        return dict(self._channel_map)

    # ----- statistics table -----
    def add_value(self, variable_id: int, value: float, timestamp: datetime) -> VariableStats:
        rec = self._stats.get(variable_id)
        if rec is None:
            rec = self._stats[variable_id] = VariableStats(variable_id)
        rec.update(value, timestamp)
        return rec

    def get(self, variable_id: int) -> VariableStats | None:
        return self._stats.get(variable_id)

    def records(self) -> list[VariableStats]:
        """Records in ascending variable id order."""
        return [self._stats[k] for k in sorted(self._stats)]

    def __iter__(self) -> Iterator[VariableStats]:
        return iter(self.records())

    def __len__(self) -> int:
        return len(self._stats)
