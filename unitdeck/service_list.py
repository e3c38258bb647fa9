"""The table of services: selection, filtering and actions on the selection."""

from __future__ import annotations

from enum import Enum
from typing import Callable, Optional

from .events import Action, AppEvent, EventKind, Key, KeyEvent
from .service import Service
from .services_manager import ServicesManager

Row = tuple[str, str, str, str, str]
Send = Callable[[AppEvent], None]

HEADER: Row = ("Name", "Active", "State", "Load", "Description")
ERROR_ROW: Row = ("Error loading services", "", "", "", "")
PAGE_JUMP = 10


class ServiceAction(Enum):
    START = "start"
    STOP = "stop"
    RESTART = "restart"
    ENABLE = "enable"
    DISABLE = "disable"
    REFRESH_ALL = "refresh_all"


_ACTION_KEYS = {
    "r": ServiceAction.RESTART,
    "s": ServiceAction.START,
    "e": ServiceAction.ENABLE,
    "d": ServiceAction.DISABLE,
    "u": ServiceAction.REFRESH_ALL,
    "x": ServiceAction.STOP,
}

_NAVIGATION_KEYS = {Key.DOWN: 1, Key.UP: -1, Key.PAGE_DOWN: PAGE_JUMP, Key.PAGE_UP: -PAGE_JUMP}


def service_row(service: Service) -> Row:
    """The table cells shown for a service."""
    state = service.state
    return (
        service.formatted_name(),
        f"{state.active} ({state.sub})",
        state.file,
        state.load,
        service.description,
    )


def _action_event(action: Action) -> AppEvent:
    return AppEvent(EventKind.ACTION, action=action)


class TableServices:
    """Services shown in the list view, with the selected row."""

    def __init__(self, send: Send, manager: Optional[ServicesManager] = None) -> None:
        self._send = send
        self._manager = manager if manager is not None else ServicesManager()
        self.ignore_key_events = False
        self._filter_text = ""
        try:
            self.services: list[Service] = self._manager.list_services()
            self.rows: list[Row] = [service_row(s) for s in self.services]
        except Exception:
            self.services = []
            self.rows = [ERROR_ROW]
        self.filtered_services: list[Service] = list(self.services)
        self.selected: Optional[int] = 0

    def set_ignore_key_events(self, value: bool) -> None:
        self.ignore_key_events = value

    def selected_service(self) -> Optional[Service]:
        if self.selected is None or not 0 <= self.selected < len(self.filtered_services):
            return None
        return self.filtered_services[self.selected]

    def set_selected_index(self, index: int) -> None:
        self.selected = index

    def refresh(self, filter_text: str) -> None:
        """Show the services whose short name contains the text, ignoring case."""
        self._filter_text = filter_text
        needle = filter_text.lower()
        self.filtered_services = [
            s for s in self.services if needle in s.formatted_name().lower()
        ]
        self.rows = [service_row(s) for s in self.filtered_services]

    def _fetch_services(self) -> None:
        try:
            self.services = self._manager.list_services()
        except Exception:
            self.services = []

    def _move(self, step: int) -> None:
        if self.selected is None:
            self.selected = 0
        elif self.rows:
            self.selected = (self.selected + step) % len(self.rows)

    def _act_on_selected(self, action: ServiceAction) -> None:
        service = self.selected_service()
        if service is not None:
            if action is ServiceAction.REFRESH_ALL:
                self._fetch_services()
            else:
                operation = {
                    ServiceAction.START: self._manager.start_service,
                    ServiceAction.STOP: self._manager.stop_service,
                    ServiceAction.RESTART: self._manager.restart_service,
                    ServiceAction.ENABLE: self._manager.enable_service,
                    ServiceAction.DISABLE: self._manager.disable_service,
                }[action]
                try:
                    operation(service)
                except Exception as exc:
                    self._send(AppEvent(EventKind.ERROR, message=str(exc)))
        self._fetch_services()
        self.refresh(self._filter_text)

    def on_key_event(self, key: KeyEvent) -> None:
        if self.ignore_key_events:
            return
        code = key.code
        if isinstance(code, Key):
            step = _NAVIGATION_KEYS.get(code)
            if step is not None:
                self._move(step)
        elif code in _ACTION_KEYS:
            self._act_on_selected(_ACTION_KEYS[code])
        elif code == "v":
            self._send(_action_event(Action.GO_LOG))
        elif code == "p":
            self._send(_action_event(Action.GO_DETAILS))

    def shortcuts(self) -> list[str]:
        """Help lines for the list view; the first is a heading. Empty while filtering."""
        if self.ignore_key_events:
            return []
        return [
            "Actions on the selected service",
            "Navigate: ↑/↓ | Start: s | Stop: x | Restart: r | Enable: e | Disable: d "
            "| Refresh all: u | View logs: v | Properties: p",
        ]