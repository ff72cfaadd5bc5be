"""Core records and the provider interface for power state residency data."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


class PowerStatsError(Exception):
    """Raised when residency data cannot be read or parsed."""


@dataclass
class State:
    """A named power state of a power entity."""

    id: int
    name: str


@dataclass
class StateResidency:
    """Time and entry statistics accumulated in one power state."""

    id: int
    total_time_in_state_ms: int = 0
    total_state_entry_count: int = 0
    last_entry_timestamp_ms: int = 0


class StateResidencyDataProvider(ABC):
    """Source of state residency statistics for one or more power entities."""

    @abstractmethod
    def get_state_residencies(self) -> dict[str, list[StateResidency]]:
        """Return residencies keyed by power entity name.

        Raises PowerStatsError when the data cannot be collected.
        """

    @abstractmethod
    def get_info(self) -> dict[str, list[State]]:
        """Return the states each power entity can be in, keyed by entity name."""