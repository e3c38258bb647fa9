"""Keys, actions and events passed between the screen components."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


class Key(Enum):
    """Non-character keys. Printable keys are represented by their character."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    HOME = "home"
    END = "end"
    ENTER = "enter"
    ESC = "esc"
    BACKSPACE = "backspace"
    DELETE = "delete"
    TAB = "tab"
    OTHER = "other"


@dataclass(frozen=True)
class KeyEvent:
    """A key press: a Key member or a one-character string, with modifiers."""

    code: Union[Key, str]
    ctrl: bool = False
    pressed: bool = True


class Action(Enum):
    """Requests the components send to the application."""

    REFRESH_LOG = "refresh_log"
    REFRESH_DETAILS = "refresh_details"
    GO_LIST = "go_list"
    GO_LOG = "go_log"
    GO_DETAILS = "go_details"
    UPDATE_LOG = "update_log"
    UPDATE_DETAILS = "update_details"
    FILTER = "filter"
    UPDATE_IGNORE_LIST_KEYS = "update_ignore_list_keys"


class EventKind(Enum):
    KEY = "key"
    ACTION = "action"
    ERROR = "error"


@dataclass(frozen=True)
class AppEvent:
    """An event on the application queue.

    A KEY event carries ``key``; an ACTION event carries ``action`` and, for
    UPDATE_LOG (name, log), FILTER (text) and UPDATE_IGNORE_LIST_KEYS (flag),
    a ``payload``; an ERROR event carries ``message``.
    """

    kind: EventKind
    key: Optional[KeyEvent] = None
    action: Optional[Action] = None
    payload: Any = None
    message: str = ""


_FRIENDLY_ERRORS = (
    (
        "org.freedesktop.DBus.Error.InteractiveAuthorizationRequired",
        "You do not have the permission to do that. Try running the program with sudo.",
    ),
    (
        "org.freedesktop.DBus.Error.ServiceUnknown",
        "The requested service is not available or not running.",
    ),
    (
        "org.freedesktop.DBus.Error.NoReply",
        "The service did not respond in time. It might be busy or not functioning properly.",
    ),
    (
        "org.freedesktop.DBus.Error.AccessDenied",
        "Access denied. You don't have sufficient permissions for this operation.",
    ),
    (
        "org.freedesktop.systemd1.NoSuchUnit",
        "The requested service unit doesn't exist.",
    ),
)


def friendly_error(error: str) -> str:
    """Replace a known D-Bus error with a readable message; return others unchanged."""
    for marker, message in _FRIENDLY_ERRORS:
        if marker in error:
            return message
    return error