import pytest

from unitdeck.events import Action, AppEvent, EventKind, Key, KeyEvent
from unitdeck.filter import Filter, InputMode


@pytest.fixture
def sent():
    return []


@pytest.fixture
def flt(sent):
    return Filter(sent.append)


def _press(f, *codes):
    for code in codes:
        f.on_key_event(KeyEvent(code))


def _actions(events):
    return [(e.action, e.payload) for e in events]


def test_i_starts_editing(flt, sent):
    _press(flt, "i")
    assert flt.input_mode is InputMode.EDITING
    assert _actions(sent) == [(Action.UPDATE_IGNORE_LIST_KEYS, True)]


def test_typing_builds_input_and_sends_filter(flt, sent):
    _press(flt, "i")
    sent.clear()
    _press(flt, "s", "s", "h")
    assert flt.input == "ssh"
    assert _actions(sent) == [
        (Action.FILTER, "s"),
        (Action.FILTER, "ss"),
        (Action.FILTER, "ssh"),
    ]


def test_insert_in_middle(flt):
    _press(flt, "i", "a", "c", Key.LEFT, "b")
    assert flt.input == "abc"
    assert flt.character_index == 2


def test_backspace(flt):
    _press(flt, "i", "a", "b", "c", Key.LEFT, Key.BACKSPACE)
    assert flt.input == "ac"
    assert flt.character_index == 1


def test_backspace_at_start_does_nothing(flt):
    _press(flt, "i", "a", Key.LEFT, Key.BACKSPACE)
    assert flt.input == "a"
    assert flt.character_index == 0


def test_cursor_clamped(flt):
    _press(flt, "i", "a", Key.RIGHT, Key.RIGHT)
    assert flt.character_index == 1
    _press(flt, Key.LEFT, Key.LEFT, Key.LEFT)
    assert flt.character_index == 0


def test_enter_submits(flt, sent):
    _press(flt, "i", "x")
    sent.clear()
    _press(flt, Key.ENTER)
    assert flt.input_mode is InputMode.NORMAL
    assert _actions(sent) == [
        (Action.FILTER, "x"),
        (Action.UPDATE_IGNORE_LIST_KEYS, False),
        (Action.FILTER, "x"),
    ]


def test_esc_while_editing_keeps_input(flt, sent):
    _press(flt, "i", "x")
    sent.clear()
    _press(flt, Key.ESC)
    assert flt.input == "x"
    assert flt.input_mode is InputMode.NORMAL
    assert _actions(sent) == [
        (Action.UPDATE_IGNORE_LIST_KEYS, False),
        (Action.FILTER, "x"),
    ]


def test_esc_in_normal_mode_clears(flt, sent):
    _press(flt, "i", "x", Key.ENTER)
    sent.clear()
    _press(flt, Key.ESC)
    assert flt.input == ""
    assert _actions(sent) == [
        (Action.FILTER, ""),
        (Action.UPDATE_IGNORE_LIST_KEYS, False),
    ]


def test_other_keys_ignored_in_normal_mode(flt, sent):
    _press(flt, "x", Key.DOWN)
    assert flt.input == ""
    assert sent == []


def test_released_keys_ignored_while_editing(flt, sent):
    _press(flt, "i")
    sent.clear()
    flt.on_key_event(KeyEvent("z", pressed=False))
    assert flt.input == ""
    assert sent == []


def test_events_are_actions(flt, sent):
    _press(flt, "i")
    assert flt.input_mode is InputMode.EDITING
    assert flt.cursor_column() == 1
    assert [type(e) for e in sent] == [AppEvent]
    assert [e.kind for e in sent] == [EventKind.ACTION]
    assert sent[0].action is Action.UPDATE_IGNORE_LIST_KEYS
    assert sent[0].payload is True


def test_help_line_and_cursor(flt):
    assert "".join(t for t, _ in flt.help_line()) == "Press i to start filtering."
    assert flt.cursor_column() is None
    _press(flt, "i", "a", "b")
    assert "".join(t for t, _ in flt.help_line()) == (
        "Press Esc to stop filtering, Enter to submit filter"
    )
    assert [t for t, bold in flt.help_line() if bold] == ["Esc", "Enter"]
    assert flt.cursor_column() == flt.character_index + 1