import dataclasses

import pytest

from unitdeck.service_state import ServiceState


def test_fields_hold_given_values():
    state = ServiceState("loaded", "active", "running", "enabled")
    assert state.load == "loaded"
    assert state.active == "active"
    assert state.sub == "running"
    assert state.file == "enabled"


def test_keyword_construction_matches_positional():
    positional = ServiceState("loaded", "inactive", "dead", "disabled")
    keyword = ServiceState(load="loaded", active="inactive", sub="dead", file="disabled")
    assert positional == keyword


def test_state_is_immutable():
    state = ServiceState("loaded", "active", "running", "enabled")
    with pytest.raises(dataclasses.FrozenInstanceError):
        state.active = "failed"
    assert state.active == "active"
    assert state == ServiceState("loaded", "active", "running", "enabled")


def test_replace_gives_new_state():
    state = ServiceState("loaded", "active", "running", "enabled")
    failed = dataclasses.replace(state, active="failed", sub="failed")
    assert failed.active == "failed"
    assert state.active == "active"