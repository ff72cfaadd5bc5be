import pytest

from gsstats.dvfs import DvfsConfig, DvfsStateResidencyDataProvider
from gsstats.model import PowerStatsError, State, StateResidency


def _state_line(freq, count, duration):
    return f"{freq} entries: x {count} time: ns {duration}\n"


CONFIGS = [
    DvfsConfig("MIF", [("3172MHz", "3172000"), ("2730MHz", "2730000")]),
    DvfsConfig("INT", [("533MHz", "533000")]),
]


def _provider(tmp_path, content, clock_rate=1):
    node = tmp_path / "dvfs"
    node.write_text(content)
    return DvfsStateResidencyDataProvider(str(node), clock_rate, CONFIGS)


def test_get_info_lists_display_names(tmp_path):
    provider = DvfsStateResidencyDataProvider(str(tmp_path / "none"), 1, CONFIGS)
    assert provider.get_info() == {
        "MIF-DVFS": [State(0, "3172MHz"), State(1, "2730MHz")],
        "INT-DVFS": [State(0, "533MHz")],
    }


def test_parses_residencies_per_entity(tmp_path):
    content = (
        "MIF\n"
        + _state_line("3172000", 12, 900)
        + _state_line("2730000", 4, 300)
        + "INT\n"
        + _state_line("533000", 9, 77)
    )
    result = _provider(tmp_path, content).get_state_residencies()
    assert result["MIF-DVFS"] == [
        StateResidency(id=0, total_time_in_state_ms=900, total_state_entry_count=12),
        StateResidency(id=1, total_time_in_state_ms=300, total_state_entry_count=4),
    ]
    assert result["INT-DVFS"] == [
        StateResidency(id=0, total_time_in_state_ms=77, total_state_entry_count=9)
    ]


def test_unseen_states_keep_ids(tmp_path):
    result = _provider(tmp_path, "").get_state_residencies()
    assert [r.id for r in result["MIF-DVFS"]] == [0, 1]
    assert all(r.total_time_in_state_ms == 0 for r in result["MIF-DVFS"])


def test_marker_ends_entity_states(tmp_path):
    content = (
        "MIF\n"
        + _state_line("3172000", 12, 900)
        + "last_freq_change_time_ns: 123\n"
        + _state_line("2730000", 4, 300)
    )
    result = _provider(tmp_path, content).get_state_residencies()
    assert result["MIF-DVFS"][0].total_state_entry_count == 12
    assert result["MIF-DVFS"][1] == StateResidency(id=1)


def test_duration_divided_by_clock_rate(tmp_path):
    content = "MIF\n" + _state_line("3172000", 1, 5000)
    result = _provider(tmp_path, content, clock_rate=1000).get_state_residencies()
    assert result["MIF-DVFS"][0].total_time_in_state_ms == 5


def test_hex_count_is_accepted(tmp_path):
    content = "MIF\n" + _state_line("3172000", "0x10", 1)
    result = _provider(tmp_path, content).get_state_residencies()
    assert result["MIF-DVFS"][0].total_state_entry_count == 16


def test_short_state_line_raises(tmp_path):
    content = "MIF\n3172000 too short\n"
    with pytest.raises(PowerStatsError):
        _provider(tmp_path, content).get_state_residencies()


def test_negative_count_raises(tmp_path):
    content = "MIF\n" + _state_line("3172000", "-5", 1)
    with pytest.raises(PowerStatsError):
        _provider(tmp_path, content).get_state_residencies()


def test_missing_file_raises(tmp_path):
    provider = DvfsStateResidencyDataProvider(str(tmp_path / "absent"), 1, CONFIGS)
    with pytest.raises(PowerStatsError):
        provider.get_state_residencies()