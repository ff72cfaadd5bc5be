"""Residency data from a devfreq ``time_in_state`` node."""

from __future__ import annotations

import logging
import re

from gsstats.model import (
    PowerStatsError,
    State,
    StateResidency,
    StateResidencyDataProvider,
)

_log = logging.getLogger(__name__)

NAME_SUFFIX = "-DVFS"
_NUMBER_RE = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def _extract_num(text: str, pos: int) -> tuple[int, int]:
    """Read a signed decimal at ``pos``; return (value, end position).

    Yields 0 without advancing when no number is present and raises
    PowerStatsError when the value does not fit in 64 bits.
    """
    match = _NUMBER_RE.match(text, pos)
    if match is None:
        return 0, pos
    value = int(match.group(1))
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise PowerStatsError(f"number out of range: {match.group(1)}")
    return value, match.end()


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b >= 0) else -quotient


class DevfreqStateResidencyDataProvider(StateResidencyDataProvider):
    """Reads frequency/time pairs for one devfreq device."""

    def __init__(self, name, path):
        self.name = name + NAME_SUFFIX
        self.path = f"{path}/time_in_state"

    def parse_time_in_state(self) -> list[tuple[int, int]]:
        """Return (frequency in Hz, total time in ms) for every line."""
        try:
            handle = open(self.path, encoding="utf-8", errors="replace")
        except OSError as exc:
            raise PowerStatsError(f"failed to open file {self.path}") from exc

        time_in_state = []
        with handle:
            for line in handle:
                try:
                    frequency_hz, pos = _extract_num(line, 0)
                    total_time_ms, _ = _extract_num(line, pos)
                except PowerStatsError as exc:
                    raise PowerStatsError(f"failed to parse {self.path}") from exc
                time_in_state.append((frequency_hz, total_time_ms))
        return time_in_state

    def get_state_residencies(self) -> dict[str, list[StateResidency]]:
        time_in_state = self.parse_time_in_state()
        if not time_in_state:
            raise PowerStatsError(f"no residency data in {self.path}")
        return {
            self.name: [
                StateResidency(id=i, total_time_in_state_ms=total_time_ms)
                for i, (_, total_time_ms) in enumerate(time_in_state)
            ]
        }

    def get_info(self) -> dict[str, list[State]]:
        try:
            time_in_state = self.parse_time_in_state()
        except PowerStatsError as exc:
            _log.error("%s", exc)
            return {}
        if not time_in_state:
            return {}
        return {
            self.name: [
                State(id=i, name=f"{_trunc_div(frequency_hz, 1000)}MHz")
                for i, (frequency_hz, _) in enumerate(time_in_state)
            ]
        }