"""Residency data for display multi-refresh-rate configurations."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from gsstats.dvfs import _parse_uint
from gsstats.model import (
    PowerStatsError,
    State,
    StateResidency,
    StateResidencyDataProvider,
)

_log = logging.getLogger(__name__)

TIME_IN_STATE = "time_in_state"
AVAILABLE_STATE = "available_disp_stats"
DISP_STATE = ("On", "HBM", "LP", "Off")

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


@dataclass(frozen=True)
class DisplayConfig:
    """Display state index, resolution and refresh rate."""

    state: int
    res_x: int
    res_y: int
    rr: int


def _parse_int32(text: str) -> int | None:
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
    return value if _INT32_MIN <= value <= _INT32_MAX else None


def parse_config(line, with_duration) -> tuple[DisplayConfig, int | None]:
    """Parse ``state resX resY rr [duration]`` into a config and duration.

    Raises PowerStatsError when the line does not have that form.
    """
    parts = line.split(" ")
    if len(parts) != (5 if with_duration else 4):
        raise PowerStatsError(f"unexpected field count in [{line.rstrip()}]")

    duration = None
    if with_duration:
        duration = _parse_uint(parts[4])
        if duration is None:
            raise PowerStatsError(f"bad duration in [{line.rstrip()}]")

    values = [_parse_int32(part) for part in parts[:4]]
    if any(v is None for v in values):
        raise PowerStatsError(f"bad display config in [{line.rstrip()}]")
    return DisplayConfig(*values), duration


class DisplayMrrStateResidencyDataProvider(StateResidencyDataProvider):
    """Time spent in each available display configuration.

    ``path`` is a prefix to which the node names are appended directly.
    """

    def __init__(self, name, path):
        self.name = name
        self.path = str(path)
        self.configs: list[DisplayConfig] = []
        state_path = self.path + AVAILABLE_STATE
        try:
            handle = open(state_path, encoding="utf-8", errors="replace")
        except OSError:
            _log.error("failed to open file %s", state_path)
            return
        with handle:
            for line in handle:
                try:
                    config, _ = parse_config(line, with_duration=False)
                except PowerStatsError:
                    _log.error(
                        "failed to parse display config for [%s] from %s",
                        line.rstrip(), state_path,
                    )
                    self.configs.clear()
                    break
                self.configs.append(config)

    def get_state_residencies(self) -> dict[str, list[StateResidency]]:
        if not self.configs:
            raise PowerStatsError("display MRR state list is empty")

        path = self.path + TIME_IN_STATE
        try:
            handle = open(path, encoding="utf-8", errors="replace")
        except OSError as exc:
            raise PowerStatsError(f"failed to open file {path}") from exc

        residencies = [StateResidency(id=i) for i in range(len(self.configs))]
        with handle:
            for line in handle:
                try:
                    config, duration = parse_config(line, with_duration=True)
                except PowerStatsError as exc:
                    raise PowerStatsError(
                        f"failed to parse state and duration from [{line.rstrip()}]"
                    ) from exc
                try:
                    index = self.configs.index(config)
                except ValueError:
                    _log.error(
                        "failed to find config for [%s] in display MRR state list",
                        line.rstrip(),
                    )
                    continue
                residencies[index].total_time_in_state_ms = duration
        return {self.name: residencies}

    def get_info(self) -> dict[str, list[State]]:
        states = []
        for i, config in enumerate(self.configs):
            if not 0 <= config.state < len(DISP_STATE):
                _log.error("display state id %d is out of bound", config.state)
                return {}
            name = DISP_STATE[config.state]
            if config.state != len(DISP_STATE) - 1:
                name += f": {config.res_x}x{config.res_y}@{config.rr}"
            states.append(State(id=i, name=name))
        return {self.name: states}