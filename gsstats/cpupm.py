"""Residency data for CPU power-management states read from a cpupm node."""

from __future__ import annotations

from dataclasses import dataclass, field

from gsstats.dvfs import _parse_uint
from gsstats.model import (
    PowerStatsError,
    State,
    StateResidency,
    StateResidencyDataProvider,
)

US_TO_MS = 1000
NS_TO_MS = 1000000


@dataclass
class CpupmConfig:
    """Entities and states as (name to display, name to parse) pairs."""

    entities: list[tuple[str, str]] = field(default_factory=list)
    states: list[tuple[str, str]] = field(default_factory=list)


def _parse_state(line: str) -> tuple[int, int] | None:
    """Return (duration in us, count) from a five-column entity line."""
    parts = line.split(" ")
    if len(parts) != 5:
        return None
    count = _parse_uint(parts[1])
    if count is None:
        return None
    duration = _parse_uint(parts[3])
    if duration is None:
        return None
    return duration, count


class CpupmStateResidencyDataProvider(StateResidencyDataProvider):
    """Reads per-state residency for CPU entities, adding system sleep time.

    ``sleep_config`` is a sequence of line prefixes to walk through in the
    sleep file; the line matching the last prefix holds the sleep duration
    in nanoseconds as its second field.
    """

    def __init__(self, path, config, sleep_path, sleep_config):
        self._path = str(path)
        self._config: CpupmConfig = config
        self._sleep_path = str(sleep_path)
        self._sleep_config: list[str] = list(sleep_config)

    def _match_state(self, line: str) -> int | None:
        trimmed = line.strip()
        return next(
            (i for i, (_, parse_name) in enumerate(self._config.states)
             if parse_name == trimmed),
            None,
        )

    def _match_entity(self, line: str) -> tuple[str, str] | None:
        trimmed = line.strip()
        return next(
            (entity for entity in self._config.entities if trimmed.startswith(entity[1])),
            None,
        )

    def _sleep_duration_ms(self, lines) -> int:
        if not self._sleep_config:
            return 0
        index = 0
        for line in lines:
            trimmed = line.strip()
            if not trimmed.startswith(self._sleep_config[index]):
                continue
            if index < len(self._sleep_config) - 1:
                index += 1
                continue
            parts = trimmed.split(" ")
            if len(parts) == 2:
                value = _parse_uint(parts[1])
                return (value or 0) // NS_TO_MS
            return 0
        return 0

    def get_state_residencies(self) -> dict[str, list[StateResidency]]:
        try:
            handle = open(self._path, encoding="utf-8", errors="replace")
        except OSError as exc:
            raise PowerStatsError(f"failed to open file {self._path}") from exc
        with handle:
            try:
                sleep_handle = open(self._sleep_path, encoding="utf-8", errors="replace")
            except OSError as exc:
                raise PowerStatsError(f"failed to open file {self._sleep_path}") from exc

            residencies: dict[str, list[StateResidency]] = {}
            for display, _ in self._config.entities:
                residencies.setdefault(
                    display,
                    [StateResidency(id=i) for i in range(len(self._config.states))],
                )

            with sleep_handle:
                sleep_ms = self._sleep_duration_ms(sleep_handle)

            state_id: int | None = None
            for line in handle:
                matched = self._match_state(line)
                if matched is not None:
                    state_id = matched
                if state_id is None:
                    continue

                entity = self._match_entity(line)
                if entity is None:
                    continue

                parsed = _parse_state(line)
                if parsed is None:
                    raise PowerStatsError(
                        f"failed to parse duration and count from [{line.rstrip()}]"
                    )
                duration, count = parsed
                residency = residencies[entity[0]][state_id]
                residency.total_time_in_state_ms = duration // US_TO_MS + sleep_ms
                residency.total_state_entry_count = count
        return residencies

    def get_info(self) -> dict[str, list[State]]:
        info: dict[str, list[State]] = {}
        for display, _ in self._config.entities:
            info.setdefault(
                display,
                [State(id=i, name=name) for i, (name, _) in enumerate(self._config.states)],
            )
        return info