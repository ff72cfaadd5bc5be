"""Residency data for DVFS frequency states read from a sysfs stats node."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from gsstats.model import (
    PowerStatsError,
    State,
    StateResidency,
    StateResidencyDataProvider,
)

NAME_SUFFIX = "-DVFS"
_LAST_STATE_MARKER = "last_freq_change_time_ns:"
_UINT_RE = re.compile(r"0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*")
_UINT64_MAX = 2**64 - 1


def _parse_uint(text: str) -> int | None:
    """Parse an unsigned integer in decimal, octal or hex notation."""
    text = text.strip()
    if not _UINT_RE.fullmatch(text):
        return None
    if text[:2] in ("0x", "0X"):
        value = int(text[2:], 16)
    elif len(text) > 1 and text.startswith("0"):
        value = int(text, 8)
    else:
        value = int(text, 10)
    return value if value <= _UINT64_MAX else None


def _parse_state(line: str) -> tuple[int, int] | None:
    """Return (duration, count) from a seven-column state line."""
    parts = line.split(" ")
    if len(parts) != 7:
        return None
    count = _parse_uint(parts[3])
    if count is None:
        return None
    duration = _parse_uint(parts[6])
    if duration is None:
        return None
    return duration, count


@dataclass
class DvfsConfig:
    """A power entity to parse and its states as (display name, name to parse)."""

    power_entity_name: str
    states: list[tuple[str, str]] = field(default_factory=list)


class DvfsStateResidencyDataProvider(StateResidencyDataProvider):
    """Reads per-frequency residency for several entities from one DVFS node.

    ``clock_rate`` divides the raw durations into milliseconds.
    """

    def __init__(self, path, clock_rate, configs):
        self._path = str(path)
        self._clock_rate = clock_rate
        self._power_entities: list[DvfsConfig] = list(configs)

    def _match_entity(self, line: str) -> DvfsConfig | None:
        trimmed = line.strip()
        return next(
            (e for e in self._power_entities if e.power_entity_name == trimmed),
            None,
        )

    @staticmethod
    def _match_state(line: str, entity: DvfsConfig) -> int | None:
        trimmed = line.strip()
        return next(
            (i for i, (_, parse_name) in enumerate(entity.states)
             if trimmed.startswith(parse_name)),
            None,
        )

    def get_state_residencies(self) -> dict[str, list[StateResidency]]:
        try:
            handle = open(self._path, encoding="utf-8", errors="replace")
        except OSError as exc:
            raise PowerStatsError(f"failed to open file {self._path}") from exc

        residencies: dict[str, list[StateResidency]] = {}
        for entity in self._power_entities:
            residencies.setdefault(
                entity.power_entity_name + NAME_SUFFIX,
                [StateResidency(id=i) for i in range(len(entity.states))],
            )

        entity: DvfsConfig | None = None
        current: list[StateResidency] | None = None
        with handle:
            for line in handle:
                matched = self._match_entity(line)
                if matched is not None:
                    entity = matched
                    current = residencies.get(entity.power_entity_name + NAME_SUFFIX)

                # The marker line closes the state list of the current entity.
                if line.strip().startswith(_LAST_STATE_MARKER):
                    current = None

                if current is None or entity is None:
                    continue

                state_id = self._match_state(line, entity)
                if state_id is None:
                    continue

                parsed = _parse_state(line)
                if parsed is None:
                    raise PowerStatsError(
                        f"failed to parse duration and count from [{line.rstrip()}]"
                    )
                duration, count = parsed
                current[state_id].total_time_in_state_ms = duration // self._clock_rate
                current[state_id].total_state_entry_count = count
        return residencies

    def get_info(self) -> dict[str, list[State]]:
        info: dict[str, list[State]] = {}
        for entity in self._power_entities:
            info.setdefault(
                entity.power_entity_name + NAME_SUFFIX,
                [State(id=i, name=display) for i, (display, _) in enumerate(entity.states)],
            )
        return info