import queue

import pytest

from unitdeck.details import ServiceDetails, format_bytes, format_units, property_lines
from unitdeck.events import Action, EventKind, Key, KeyEvent
from unitdeck.service import Service
from unitdeck.service_property import ExecCommand, ServiceProperty, format_timestamp
from unitdeck.service_state import ServiceState

EXPECTED_KEYS = [
    "ExecStart", "ExecStartPre", "ExecStartPost", "ExecStop", "ExecStopPost",
    "ExecMainPID", "ExecMainStartTimestamp", "ExecMainExitTimestamp",
    "ExecMainCode", "ExecMainStatus", "MainPID", "ControlPID", "Restart",
    "RestartUSec", "StatusText", "Result", "User", "Group", "CPU Limit",
    "Open Files Limit", "Process Limit", "Memory Lock Limit", "Memory Limit",
    "CPU Shares",
]


def make_service(name="nginx.service"):
    return Service(name, "web server", ServiceState("loaded", "active", "running", "enabled"))


class FakeManager:
    def __init__(self, fail=False):
        self.fail = fail

    def update_properties(self, service):
        if self.fail:
            raise RuntimeError("bus unavailable")
        service.update_properties(ServiceProperty(user="root", main_pid=42))


def drain(events):
    items = []
    while not events.empty():
        items.append(events.get_nowait())
    return items


@pytest.fixture
def events():
    return queue.Queue()


def test_format_bytes_pinned():
    assert format_bytes(1_000) == "1.00 KB"


def test_format_units_pinned():
    assert format_units(1_000_000_000_000) == "1.00 TB"


@pytest.mark.parametrize("value", [0, 1, 999])
def test_small_values_are_plain(value):
    assert format_bytes(value) == f"{value} bytes"
    assert format_units(value) == str(value)


@pytest.mark.parametrize(
    "value, unit",
    [(1_500, " KB"), (2_500_000, " MB"), (3_000_000_000, " GB"), (2**64 - 1, " TB")],
)
def test_scaled_units(value, unit):
    assert format_bytes(value).endswith(unit)
    assert format_units(value) == format_bytes(value)


def test_property_lines_layout():
    lines = property_lines(ServiceProperty())
    assert [line[0] for line in lines if line is not None] == EXPECTED_KEYS
    assert lines.count(None) == 6
    assert lines[5] is None


def test_property_lines_values():
    command = ExecCommand("/usr/bin/nginx", ("/usr/bin/nginx", "-g", "daemon off;"))
    props = ServiceProperty(
        exec_start=(command, command),
        user="www",
        restart="always",
        restart_usec=100000,
        exec_main_start_timestamp=0,
        limit_nproc=12345,
        memory_limit=2048,
    )
    values = dict(line for line in property_lines(props) if line is not None)
    assert values["ExecStart"] == "/usr/bin/nginx -g daemon off;\n/usr/bin/nginx -g daemon off;"
    assert values["User"] == "www"
    assert values["Restart"] == "always"
    assert values["RestartUSec"] == "100s"
    assert values["ExecMainStartTimestamp"] == format_timestamp(0)
    assert values["Process Limit"] == "12345"
    assert values["Memory Limit"].endswith(" KB")


def test_update_shows_copy(events):
    details = ServiceDetails(events.put, FakeManager())
    original = make_service()
    details.update(original)
    assert details.title() == " nginx.service properties "
    assert details.lines() == []
    details.fetch_and_dispatch().join(timeout=2)
    assert original.properties is None
    values = dict(line for line in details.lines() if line is not None)
    assert values["User"] == "root"
    assert values["MainPID"] == "42"
    event = events.get(timeout=2)
    assert event.kind is EventKind.ACTION
    assert event.action is Action.UPDATE_DETAILS


def test_fetch_without_service(events):
    details = ServiceDetails(events.put, FakeManager())
    assert details.fetch_and_dispatch() is None
    assert drain(events) == []


def test_fetch_failure_sends_nothing(events):
    details = ServiceDetails(events.put, FakeManager(fail=True))
    details.update(make_service())
    details.fetch_and_dispatch().join(timeout=2)
    assert drain(events) == []
    assert details.lines() == []


@pytest.mark.parametrize("key", [Key.LEFT, Key.RIGHT])
def test_switch_tab_goes_to_log(events, key):
    details = ServiceDetails(events.put, FakeManager())
    details.update(make_service())
    details.on_key_event(KeyEvent(key))
    assert details.title() == ""
    assert [e.action for e in drain(events)] == [Action.GO_LOG]


def test_quit_goes_to_list(events):
    details = ServiceDetails(events.put, FakeManager())
    details.update(make_service())
    details.on_key_event(KeyEvent(Key.DOWN))
    details.on_key_event(KeyEvent("q"))
    assert details.scroll == 0
    assert details.title() == ""
    assert [e.action for e in drain(events)] == [Action.GO_LIST]


def test_scrolling(events):
    details = ServiceDetails(events.put, FakeManager())
    details.on_key_event(KeyEvent(Key.UP))
    assert details.scroll == 0
    details.on_key_event(KeyEvent(Key.PAGE_DOWN))
    details.on_key_event(KeyEvent(Key.DOWN))
    assert details.scroll == 11
    details.on_key_event(KeyEvent(Key.PAGE_UP))
    details.on_key_event(KeyEvent(Key.PAGE_UP))
    assert details.scroll == 0


def test_shortcuts(events):
    details = ServiceDetails(events.put, FakeManager())
    assert details.shortcuts() == ["Actions", "Switch tabs: ←/→ | Go back: q"]


def test_auto_refresh_until_reset(events):
    details = ServiceDetails(events.put, FakeManager())
    details.refresh_interval = 0.01
    thread = details.start_auto_refresh()
    assert events.get(timeout=2).action is Action.REFRESH_DETAILS
    details.reset()
    thread.join(timeout=2)
    assert not thread.is_alive()
    assert details.auto_refresh is False