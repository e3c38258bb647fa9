"""The journal view of the selected service."""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional

from .events import Action, AppEvent, EventKind, Key, KeyEvent
from .service import Service
from .services_manager import ServicesManager

Send = Callable[[AppEvent], None]

REFRESH_INTERVAL = 1.0
SCROLL_PAGE = 10


def reverse_log(log: str) -> str:
    """Put the lines of a log in reverse order, newest first."""
    if not log:
        return ""
    lines = log.split("\n")
    if log.endswith("\n"):
        lines.pop()
    return "\n".join(line.removesuffix("\r") for line in reversed(lines))


def _action_event(action: Action, payload: object = None) -> AppEvent:
    return AppEvent(EventKind.ACTION, action=action, payload=payload)


class ServiceLog:
    """Scrollable journal of one service, optionally refreshed every second."""

    def __init__(self, send: Send, manager: Optional[ServicesManager] = None) -> None:
        self._send = send
        self._manager = manager if manager is not None else ServicesManager()
        self.service_name = ""
        self.scroll = 0
        self.refresh_interval = REFRESH_INTERVAL
        self.border_highlighted = False
        self._log: Optional[str] = None
        self._auto_refresh = False
        self._lock = threading.Lock()

    @property
    def auto_refresh(self) -> bool:
        with self._lock:
            return self._auto_refresh

    def _set_auto_refresh(self, value: bool) -> None:
        self.border_highlighted = value
        with self._lock:
            self._auto_refresh = value

    def _toggle_auto_refresh(self) -> None:
        self._set_auto_refresh(not self.auto_refresh)

    def on_key_event(self, key: KeyEvent) -> None:
        code = key.code
        if code in (Key.LEFT, Key.RIGHT):
            self.reset()
            self._send(_action_event(Action.GO_DETAILS))
        elif code is Key.UP:
            self.scroll = max(self.scroll - 1, 0)
        elif code is Key.DOWN:
            self.scroll += 1
        elif code is Key.PAGE_UP:
            self.scroll = max(self.scroll - SCROLL_PAGE, 0)
        elif code is Key.PAGE_DOWN:
            self.scroll += SCROLL_PAGE
        elif code == "a":
            self._toggle_auto_refresh()
        elif code == "q":
            self.reset()
            self._send(_action_event(Action.GO_LIST))

    def shortcuts(self) -> list[str]:
        """Help lines for the log view; the first is a heading."""
        label = "Disable auto-refresh" if self.auto_refresh else "Enable auto-refresh"
        return [
            "Actions",
            f"Scroll: ↑/↓ | Switch tabs: ←/→ | {label}: a | Go back: q",
        ]

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
            self._send(_action_event(Action.REFRESH_LOG))

    def reset(self) -> None:
        self._set_auto_refresh(False)
        self.scroll = 0
        self._log = None

    def fetch_log_and_dispatch(self, service: Service) -> threading.Thread:
        """Read the service's log in the background and send it as UPDATE_LOG."""

        def fetch() -> None:
            try:
                log = self._manager.get_log(service)
            except Exception:
                return
            self._send(_action_event(Action.UPDATE_LOG, (service.name, log)))

        thread = threading.Thread(target=fetch, daemon=True)
        thread.start()
        return thread

    def update(self, service_name: str, log: str) -> None:
        self.service_name = service_name
        self._log = reverse_log(log)

    def title(self) -> str:
        return f" {self.service_name} logs (newest at the top) "

    def lines(self) -> Optional[list[str]]:
        """The log lines, newest first, or None while the log is loading."""
        if self._log is None:
            return None
        return self._log.split("\n")