"""Residency data for the UFS hibernate (HIBERN8) state."""

from __future__ import annotations

import logging

from gsstats.dvfs import _parse_uint
from gsstats.model import State, StateResidency, StateResidencyDataProvider

_log = logging.getLogger(__name__)

HIBERNATE_STATE_ID = 0
UFS_NAME = "UFS"

_READ_LIMIT = 20
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_UINT64_MOD = 2**64


def _parse_int64(text: str) -> int | None:
    text = text.strip()
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
        if text[:1].isspace():
            return None
    magnitude = _parse_uint(text)
    if magnitude is None:
        return None
    value = sign * magnitude
    return value if _INT64_MIN <= value <= _INT64_MAX else None


def _usec_to_ms(value: int) -> int:
    # Values are treated as unsigned 64-bit quantities before the conversion.
    return (value % _UINT64_MOD) // 1000


def read_stat(path) -> int:
    """Read a signed integer from the first 20 bytes of ``path``.

    Returns 0 when the file cannot be opened or its content is not a number.
    """
    try:
        with open(path, "rb") as handle:
            raw = handle.read(_READ_LIMIT)
    except OSError as exc:
        _log.error("failed to open file %s: %s", path, exc)
        return 0
    text = raw.decode("utf-8", errors="replace")
    value = _parse_int64(text)
    if value is None:
        _log.error("failed to parse int64 from [%s]", text)
        return 0
    return value


class UfsStateResidencyDataProvider(StateResidencyDataProvider):
    """Reads hibernate statistics from sysfs nodes sharing a path prefix."""

    def __init__(self, prefix):
        self.prefix = str(prefix)

    def get_state_residencies(self) -> dict[str, list[StateResidency]]:
        residency = StateResidency(
            id=HIBERNATE_STATE_ID,
            total_time_in_state_ms=_usec_to_ms(read_stat(self.prefix + "hibern8_total_us")),
            total_state_entry_count=read_stat(self.prefix + "hibern8_exit_cnt"),
            last_entry_timestamp_ms=_usec_to_ms(
                read_stat(self.prefix + "last_hibern8_enter_time")
            ),
        )
        return {UFS_NAME: [residency]}

    def get_info(self) -> dict[str, list[State]]:
        return {UFS_NAME: [State(id=HIBERNATE_STATE_ID, name="HIBERN8")]}