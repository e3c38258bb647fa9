"""The properties view of the selected service."""

from __future__ import annotations

import copy
import threading
import time
from decimal import Decimal
from typing import Callable, Optional

from .events import Action, AppEvent, EventKind, Key, KeyEvent
from .service import Service
from .service_property import ServiceProperty, format_timestamp
from .services_manager import ServicesManager

Send = Callable[[AppEvent], None]
Line = Optional[tuple[str, str]]

REFRESH_INTERVAL = 1.0
SCROLL_PAGE = 10

_SCALES = (
    (1_000_000_000_000, "TB"),
    (1_000_000_000, "GB"),
    (1_000_000, "MB"),
    (1_000, "KB"),
)


def _scaled(value: int) -> Optional[str]:
    for factor, unit in _SCALES:
        if value >= factor:
            return f"{value / factor:.2f} {unit}"
    return None


def format_bytes(value: int) -> str:
    """A byte count with a decimal unit, or "N bytes" below a thousand."""
    return _scaled(value) or f"{value} bytes"


def format_units(value: int) -> str:
    """A count with a decimal unit, or the plain number below a thousand."""
    return _scaled(value) or str(value)


def _plain_float(value: float) -> str:
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def property_lines(properties: ServiceProperty) -> list[Line]:
    """(key, value) pairs shown in the properties view; None marks a blank line."""
    p = properties
    return [
        ("ExecStart", p.formatted_exec_start()),
        ("ExecStartPre", p.formatted_exec_start_pre()),
        ("ExecStartPost", p.formatted_exec_start_post()),
        ("ExecStop", p.formatted_exec_stop()),
        ("ExecStopPost", p.formatted_exec_stop_post()),
        None,
        ("ExecMainPID", str(p.exec_main_pid)),
        ("ExecMainStartTimestamp", format_timestamp(p.exec_main_start_timestamp)),
        ("ExecMainExitTimestamp", format_timestamp(p.exec_main_exit_timestamp)),
        ("ExecMainCode", str(p.exec_main_code)),
        ("ExecMainStatus", str(p.exec_main_status)),
        None,
        ("MainPID", str(p.main_pid)),
        ("ControlPID", str(p.control_pid)),
        None,
        ("Restart", p.restart),
        ("RestartUSec", f"{_plain_float(p.restart_usec / 1000.0)}s"),
        None,
        ("StatusText", p.status_text),
        ("Result", p.result),
        None,
        ("User", p.user),
        ("Group", p.group),
        None,
        ("CPU Limit", format_units(p.limit_cpu)),
        ("Open Files Limit", format_units(p.limit_nofile)),
        ("Process Limit", str(p.limit_nproc)),
        ("Memory Lock Limit", format_bytes(p.limit_memlock)),
        ("Memory Limit", format_bytes(p.memory_limit)),
        ("CPU Shares", format_units(p.cpu_shares)),
    ]


def _action_event(action: Action) -> AppEvent:
    return AppEvent(EventKind.ACTION, action=action)


class ServiceDetails:
    """Scrollable properties of one service, refreshed every second."""

    def __init__(self, send: Send, manager: Optional[ServicesManager] = None) -> None:
        self._send = send
        self._manager = manager if manager is not None else ServicesManager()
        self.scroll = 0
        self.refresh_interval = REFRESH_INTERVAL
        self._service: Optional[Service] = None
        self._service_lock = threading.Lock()
        self._auto_refresh = False
        self._flag_lock = threading.Lock()

    @property
    def auto_refresh(self) -> bool:
        with self._flag_lock:
            return self._auto_refresh

    def _set_auto_refresh(self, value: bool) -> None:
        with self._flag_lock:
            self._auto_refresh = value

    def on_key_event(self, key: KeyEvent) -> None:
        code = key.code
        if code in (Key.LEFT, Key.RIGHT):
            self.reset()
            self._send(_action_event(Action.GO_LOG))
        elif code is Key.UP:
            self.scroll = max(self.scroll - 1, 0)
        elif code is Key.DOWN:
            self.scroll += 1
        elif code is Key.PAGE_UP:
            self.scroll = max(self.scroll - SCROLL_PAGE, 0)
        elif code is Key.PAGE_DOWN:
            self.scroll += SCROLL_PAGE
        elif code == "q":
            self.reset()
            self._send(_action_event(Action.GO_LIST))

    def shortcuts(self) -> list[str]:
        """Help lines for the properties view; the first is a heading."""
        return ["Actions", "Switch tabs: ←/→ | Go back: q"]

    def start_auto_refresh(self) -> threading.Thread:
        """Turn auto-refresh on and start the thread that requests refreshes."""
        self._set_auto_refresh(True)
        thread = threading.Thread(target=self._refresh_loop, daemon=True)
        thread.start()
        return thread

    def _refresh_loop(self) -> None:
        while True:
            time.sleep(self.refresh_interval)
            if not self.auto_refresh:
                break
            self._send(_action_event(Action.REFRESH_DETAILS))

    def reset(self) -> None:
        self._set_auto_refresh(False)
        with self._service_lock:
            self._service = None
        self.scroll = 0

    def fetch_and_dispatch(self) -> Optional[threading.Thread]:
        """Reload the service's properties in the background and send UPDATE_DETAILS."""
        with self._service_lock:
            service = self._service
        if service is None:
            return None

        def fetch() -> None:
            with self._service_lock:
                try:
                    self._manager.update_properties(service)
                except Exception:
                    return
            self._send(_action_event(Action.UPDATE_DETAILS))

        thread = threading.Thread(target=fetch, daemon=True)
        thread.start()
        return thread

    def update(self, service: Service) -> None:
        """Show a copy of the given service."""
        with self._service_lock:
            self._service = copy.copy(service)

    def title(self) -> str:
        with self._service_lock:
            service = self._service
        return "" if service is None else f" {service.name} properties "

    def lines(self) -> list[Line]:
        """The property lines, empty until properties have been fetched."""
        with self._service_lock:
            service = self._service
            properties = service.properties if service is not None else None
        return [] if properties is None else property_lines(properties)