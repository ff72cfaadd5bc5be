"""Residency data for TPU frequencies from a per-uid time table."""

from __future__ import annotations

import logging

from gsstats.adaptive_dvfs import _atoll
from gsstats.devfreq import _trunc_div
from gsstats.model import (
    PowerStatsError,
    State,
    StateResidency,
    StateResidencyDataProvider,
)

_log = logging.getLogger(__name__)

ENTITY_NAME = "TPU-DVFS"


def _columns(line: str) -> list[str]:
    """Split on single spaces, dropping the empty field after a trailing space."""
    tokens = line.split(" ")
    if tokens and tokens[-1] == "":
        tokens.pop()
    return tokens


class TpuDvfsStateResidencyDataProvider(StateResidencyDataProvider):
    """Sums time per TPU frequency over all rows of the table.

    The first row names the frequency of each column; later rows hold raw
    times which ``clock_rate`` divides into milliseconds. Fields holding a
    colon are row labels and are skipped.
    """

    def __init__(self, path, frequencies, clock_rate):
        self._path = str(path)
        self._frequencies: list[str] = list(frequencies)
        self._clock_rate = clock_rate

    def _state_index(self, name: str) -> int:
        try:
            return self._frequencies.index(name)
        except ValueError:
            _log.error("TPU frequency %s is not found in %s", name, self._path)
            return 0

    def get_state_residencies(self) -> dict[str, list[StateResidency]]:
        try:
            handle = open(self._path, encoding="utf-8", errors="replace")
        except OSError as exc:
            raise PowerStatsError(f"failed to open file {self._path}") from exc

        residencies = [StateResidency(id=i) for i in range(len(self._frequencies))]
        state_map: list[int] | None = None
        with handle:
            for line in handle:
                fields = [f for f in _columns(line) if ":" not in f]
                if state_map is None:
                    state_map = [self._state_index(f.rstrip(" \n\r\t")) for f in fields]
                    continue
                if len(fields) > len(state_map):
                    raise PowerStatsError(
                        f"row has more columns than the header in {self._path}"
                    )
                for column, value in zip(state_map, fields):
                    residencies[column].total_time_in_state_ms += (
                        _atoll(value) // self._clock_rate
                    )
        return {ENTITY_NAME: residencies}

    def get_info(self) -> dict[str, list[State]]:
        return {
            ENTITY_NAME: [
                State(id=i, name=f"{_trunc_div(_atoll(freq), 1000)}MHz")
                for i, freq in enumerate(self._frequencies)
            ]
        }