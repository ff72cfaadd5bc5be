import pytest

from gsstats.model import State, StateResidency, StateResidencyDataProvider


class _FixedProvider(StateResidencyDataProvider):
    def get_state_residencies(self):
        return {"E": [StateResidency(id=0, total_time_in_state_ms=7)]}

    def get_info(self):
        return {"E": [State(id=0, name="s")]}


def test_state_residency_defaults():
    residency = StateResidency(id=3)
    assert (
        residency.id,
        residency.total_time_in_state_ms,
        residency.total_state_entry_count,
        residency.last_entry_timestamp_ms,
    ) == (3, 0, 0, 0)


def test_state_equality_by_value():
    assert State(1, "a") == State(id=1, name="a")


def test_provider_cannot_be_instantiated():
    with pytest.raises(TypeError):
        StateResidencyDataProvider()


def test_partial_provider_is_abstract():
    class Partial(StateResidencyDataProvider):
        def get_state_residencies(self):
            return {"E": [StateResidency(id=0, total_state_entry_count=2)]}

    with pytest.raises(TypeError):
        Partial()
    assert set(StateResidencyDataProvider.__abstractmethods__) == {
        "get_state_residencies",
        "get_info",
    }
    assert set(Partial.__abstractmethods__) == {"get_info"}

    class Completed(Partial):
        def get_info(self):
            return {"E": [State(id=0, name="only")]}

    provider = Completed()
    assert provider.get_state_residencies() == {
        "E": [StateResidency(id=0, total_state_entry_count=2)]
    }
    assert provider.get_info() == {"E": [State(id=0, name="only")]}


def test_complete_provider_returns_data():
    provider = _FixedProvider()
    assert provider.get_info() == {"E": [State(id=0, name="s")]}
    assert provider.get_state_residencies()["E"][0].total_time_in_state_ms == 7