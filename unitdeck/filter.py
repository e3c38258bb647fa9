"""The filter input above the service list."""

from __future__ import annotations

from enum import Enum
from typing import Callable, Optional

from .events import Action, AppEvent, EventKind, Key, KeyEvent

Send = Callable[[AppEvent], None]


class InputMode(Enum):
    NORMAL = "normal"
    EDITING = "editing"


def _action_event(action: Action, payload: object = None) -> AppEvent:
    return AppEvent(EventKind.ACTION, action=action, payload=payload)


class Filter:
    """A one-line text input whose content filters the service list."""

    def __init__(self, send: Send) -> None:
        self._send = send
        self.input = ""
        self.input_mode = InputMode.NORMAL
        self.character_index = 0

    def _clamp(self, position: int) -> int:
        return min(max(position, 0), len(self.input))

    def _move_cursor(self, step: int) -> None:
        self.character_index = self._clamp(self.character_index + step)

    def _enter_char(self, char: str) -> None:
        index = self._clamp(self.character_index)
        self.input = self.input[:index] + char + self.input[index:]
        self._move_cursor(1)

    def _delete_char(self) -> None:
        index = self.character_index
        if index == 0:
            return
        self.input = self.input[: index - 1] + self.input[index:]
        self._move_cursor(-1)

    def _send_filter(self) -> None:
        self._send(_action_event(Action.FILTER, self.input))

    def _send_ignore(self, value: bool) -> None:
        self._send(_action_event(Action.UPDATE_IGNORE_LIST_KEYS, value))

    def _submit(self) -> None:
        self._send_filter()
        self._send_ignore(False)
        self.input_mode = InputMode.NORMAL

    def on_key_event(self, key: KeyEvent) -> None:
        code = key.code
        if self.input_mode is InputMode.NORMAL:
            if code == "i":
                self._send_ignore(True)
                self.input_mode = InputMode.EDITING
            elif code is Key.ESC:
                self.input = ""
                self._send_filter()
                self._send_ignore(False)
            return

        if not key.pressed:
            return
        if code is Key.ENTER:
            self._submit()
        elif isinstance(code, str):
            self._enter_char(code)
        elif code is Key.BACKSPACE:
            self._delete_char()
        elif code is Key.LEFT:
            self._move_cursor(-1)
        elif code is Key.RIGHT:
            self._move_cursor(1)
        elif code is Key.ESC:
            self._send_ignore(False)
            self.input_mode = InputMode.NORMAL
        self._send_filter()

    def help_line(self) -> list[tuple[str, bool]]:
        """The help text above the input as (text, bold) segments."""
        if self.input_mode is InputMode.NORMAL:
            return [("Press ", False), ("i", True), (" to start filtering.", False)]
        return [
            ("Press ", False),
            ("Esc", True),
            (" to stop filtering, ", False),
            ("Enter", True),
            (" to submit filter", False),
        ]

    def cursor_column(self) -> Optional[int]:
        """Cursor column relative to the input box while editing, else None."""
        if self.input_mode is InputMode.NORMAL:
            return None
        return self.character_index + 1