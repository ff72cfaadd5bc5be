import pytest

from gsstats.cpupm import CpupmConfig, CpupmStateResidencyDataProvider
from gsstats.model import PowerStatsError, State

CONFIG = CpupmConfig(
    entities=[("CPU0", "cpu0"), ("CPU1", "cpu1")],
    states=[("DOWN", "[state: DOWN]"), ("IDLE", "[state: IDLE]")],
)

CPUPM = (
    "[state: DOWN]\n"
    "cpu0 12 x 5000 y\n"
    "cpu1 7 x 0 y\n"
    "[state: IDLE]\n"
    "cpu0 4 x 0 y\n"
)


def _provider(tmp_path, cpupm=CPUPM, sleep="", sleep_config=("SLEEP", "total")):
    path = tmp_path / "cpupm"
    path.write_text(cpupm)
    sleep_path = tmp_path / "sleep"
    sleep_path.write_text(sleep)
    return CpupmStateResidencyDataProvider(path, CONFIG, sleep_path, list(sleep_config))


def test_get_info_lists_states_per_entity(tmp_path):
    info = _provider(tmp_path).get_info()
    expected = [State(id=0, name="DOWN"), State(id=1, name="IDLE")]
    assert info == {"CPU0": expected, "CPU1": expected}


def test_counts_and_durations_parsed(tmp_path):
    res = _provider(tmp_path).get_state_residencies()
    assert [r.id for r in res["CPU0"]] == [0, 1]
    assert res["CPU0"][0].total_state_entry_count == 12
    assert res["CPU0"][0].total_time_in_state_ms == 5
    assert res["CPU1"][0].total_state_entry_count == 7
    assert res["CPU0"][1].total_state_entry_count == 4
    assert res["CPU1"][1].total_state_entry_count == 0


def test_sleep_duration_added(tmp_path):
    sleep = "SLEEP stats\nother 1\ntotal 3000000\n"
    with_sleep = _provider(tmp_path, sleep=sleep).get_state_residencies()
    without = _provider(tmp_path, sleep="").get_state_residencies()
    assert with_sleep["CPU0"][0].total_time_in_state_ms == 8
    assert (
        with_sleep["CPU1"][0].total_time_in_state_ms
        - without["CPU1"][0].total_time_in_state_ms
        == with_sleep["CPU0"][0].total_time_in_state_ms
        - without["CPU0"][0].total_time_in_state_ms
    )


def test_sleep_prefixes_must_appear_in_order(tmp_path):
    sleep = "total 3000000\nSLEEP stats\n"
    res = _provider(tmp_path, sleep=sleep).get_state_residencies()
    plain = _provider(tmp_path, sleep="").get_state_residencies()
    assert res == plain


def test_entity_lines_before_first_state_are_ignored(tmp_path):
    res = _provider(tmp_path, cpupm="cpu0 12 x 5000 y\n").get_state_residencies()
    assert all(r.total_state_entry_count == 0 for r in res["CPU0"])
    assert all(r.total_time_in_state_ms == 0 for r in res["CPU0"])


def test_malformed_entity_line_raises(tmp_path):
    with pytest.raises(PowerStatsError):
        _provider(tmp_path, cpupm="[state: DOWN]\ncpu0 12 5000\n").get_state_residencies()


def test_missing_main_file_raises(tmp_path):
    sleep_path = tmp_path / "sleep"
    sleep_path.write_text("")
    provider = CpupmStateResidencyDataProvider(
        tmp_path / "absent", CONFIG, sleep_path, ["SLEEP"]
    )
    with pytest.raises(PowerStatsError):
        provider.get_state_residencies()


def test_missing_sleep_file_raises(tmp_path):
    path = tmp_path / "cpupm"
    path.write_text(CPUPM)
    provider = CpupmStateResidencyDataProvider(path, CONFIG, tmp_path / "absent", ["SLEEP"])
    with pytest.raises(PowerStatsError):
        provider.get_state_residencies()