"""DVFS provider whose states are discovered from cpufreq frequency tables."""

from __future__ import annotations

import logging
import re

from gsstats.dvfs import DvfsConfig, DvfsStateResidencyDataProvider
from gsstats.model import PowerStatsError

_log = logging.getLogger(__name__)

_STATE_SUFFIX = "MHz"
_LEADING_INT_RE = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")


def _atoll(text: str) -> int:
    """Leading integer of ``text``, or 0 when there is none."""
    match = _LEADING_INT_RE.match(text)
    return int(match.group(1)) if match else 0


def read_frequency_states(freq_dir) -> list[tuple[str, str]]:
    """Read ``<freq_dir>/time_in_state`` into (display name, frequency) pairs.

    Pairs are returned in descending frequency order.
    """
    path = f"{freq_dir}/time_in_state"
    try:
        with open(path, encoding="utf-8", errors="replace") as handle:
            lines = handle.readlines()
    except OSError as exc:
        raise PowerStatsError(f"failed to open file {path}") from exc

    states = []
    for line in lines:
        freq = line.strip().split(" ")[0].strip()
        prefix = freq[:-3] if len(freq) >= 3 else freq
        states.append((prefix + _STATE_SUFFIX, freq))

    # Frequency tables list ascending; power stats are reported descending.
    if len(states) > 1 and _atoll(states[0][1]) < _atoll(states[1][1]):
        states.reverse()
    return states


class AdaptiveDvfsStateResidencyDataProvider(DvfsStateResidencyDataProvider):
    """DVFS provider built from (entity name, frequency table directory) pairs.

    Entities whose frequency table cannot be read are left out.
    """

    def __init__(self, path, clock_rate, power_entities):
        configs = []
        for name, freq_dir in power_entities:
            try:
                states = read_frequency_states(freq_dir)
            except PowerStatsError as exc:
                _log.error("%s", exc)
                continue
            configs.append(DvfsConfig(name, states))
        super().__init__(path, clock_rate, configs)