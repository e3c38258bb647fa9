"""The terminal application: event loop, views and drawing."""

from __future__ import annotations

import argparse
import curses
import locale
import queue
import textwrap
from enum import Enum
from typing import Any, Optional, Sequence, Union

from .details import ServiceDetails
from .events import Action, AppEvent, EventKind, Key, KeyEvent, friendly_error
from .filter import Filter, InputMode
from .service_list import HEADER, TableServices
from .service_log import ServiceLog
from .services_manager import ServicesManager

EXIT_LINE = "Exit: Ctrl + c"
POLL_TIMEOUT_MS = 100
SHORTCUTS_HEIGHT = 7
FILTER_HEIGHT = 4
TABLE_MIN_HEIGHT = 10
WIDE_HELP = 125


class Status(Enum):
    LIST = "list"
    LOG = "log"
    DETAILS = "details"


_CURSES_KEYS = {
    curses.KEY_UP: Key.UP,
    curses.KEY_DOWN: Key.DOWN,
    curses.KEY_LEFT: Key.LEFT,
    curses.KEY_RIGHT: Key.RIGHT,
    curses.KEY_PPAGE: Key.PAGE_UP,
    curses.KEY_NPAGE: Key.PAGE_DOWN,
    curses.KEY_HOME: Key.HOME,
    curses.KEY_END: Key.END,
    curses.KEY_ENTER: Key.ENTER,
    curses.KEY_BACKSPACE: Key.BACKSPACE,
    curses.KEY_DC: Key.DELETE,
}

_CHAR_KEYS = {
    "\n": Key.ENTER,
    "\r": Key.ENTER,
    "\x1b": Key.ESC,
    "\x7f": Key.BACKSPACE,
    "\b": Key.BACKSPACE,
    "\t": Key.TAB,
}


def translate_key(code: Union[int, str]) -> Optional[KeyEvent]:
    """Turn a curses key (from get_wch) into a KeyEvent; None for non-keys."""
    if isinstance(code, str):
        if code in _CHAR_KEYS:
            return KeyEvent(_CHAR_KEYS[code])
        if len(code) == 1 and ord(code) < 32:
            return KeyEvent(chr(ord(code) + 96), ctrl=True)
        return KeyEvent(code)
    if code == curses.KEY_RESIZE:
        return None
    return KeyEvent(_CURSES_KEYS.get(code, Key.OTHER))


def _put(win: Any, y: int, x: int, text: str, attr: int = 0) -> None:
    height, width = win.getmaxyx()
    if y < 0 or y >= height or x < 0 or x >= width:
        return
    try:
        win.addstr(y, x, text[: width - x], attr)
    except curses.error:
        pass


def _box(
    win: Any, top: int, left: int, height: int, width: int, title: str = "",
    attr: int = 0, center: bool = False,
) -> None:
    if height < 2 or width < 2:
        return
    _put(win, top, left, "┌" + "─" * (width - 2) + "┐", attr)
    for row in range(top + 1, top + height - 1):
        _put(win, row, left, "│", attr)
        _put(win, row, left + width - 1, "│", attr)
    _put(win, top + height - 1, left, "└" + "─" * (width - 2) + "┘", attr)
    if title:
        title = title[: max(width - 2, 0)]
        offset = (width - len(title)) // 2 if center else 1
        _put(win, top, left + offset, title, attr)


def _clear(win: Any, top: int, left: int, height: int, width: int) -> None:
    for row in range(top, top + height):
        _put(win, row, left, " " * width)


def _wrap(text: str, width: int) -> list[str]:
    if width <= 0:
        return []
    return textwrap.wrap(text, width) or [""]


class App:
    """Holds the views and reacts to keys and component actions."""

    def __init__(self, manager: Optional[ServicesManager] = None) -> None:
        manager = manager if manager is not None else ServicesManager()
        self.events: "queue.Queue[AppEvent]" = queue.Queue()
        send = self.events.put
        self.table = TableServices(send, manager)
        self.filter = Filter(send)
        self.log = ServiceLog(send, manager)
        self.details = ServiceDetails(send, manager)
        self.status = Status.LIST
        self.running = True
        self.error: Optional[str] = None
        self._table_offset = 0
        self._attrs: dict[str, int] = {}

    # ----- event handling -------------------------------------------------

    def _send(self, action: Action) -> None:
        self.events.put(AppEvent(EventKind.ACTION, action=action))

    def _on_key(self, key: KeyEvent) -> None:
        if key.ctrl and key.code in ("c", "C"):
            self.running = False
        if self.status is Status.LOG:
            self.log.on_key_event(key)
        elif self.status is Status.LIST:
            self.table.on_key_event(key)
            self.filter.on_key_event(key)
        else:
            self.details.on_key_event(key)

    def _on_action(self, action: Optional[Action], payload: Any) -> None:
        if action is Action.UPDATE_IGNORE_LIST_KEYS:
            self.table.set_ignore_key_events(bool(payload))
        elif action is Action.FILTER:
            self.table.set_selected_index(0)
            self.table.refresh(payload)
        elif action is Action.UPDATE_LOG:
            name, log = payload
            self.log.update(name, log)
        elif action is Action.REFRESH_LOG:
            if self.status is Status.LOG:
                service = self.table.selected_service()
                if service is not None:
                    self.log.fetch_log_and_dispatch(service)
        elif action is Action.GO_LOG:
            self.status = Status.LOG
            self._send(Action.REFRESH_LOG)
            self.log.start_auto_refresh()
        elif action is Action.GO_LIST:
            self.status = Status.LIST
        elif action is Action.REFRESH_DETAILS:
            if self.status is Status.DETAILS:
                self.details.fetch_and_dispatch()
        elif action is Action.GO_DETAILS:
            service = self.table.selected_service()
            if service is not None:
                self.details.update(service)
            self._send(Action.REFRESH_DETAILS)
            self.status = Status.DETAILS
            self.details.start_auto_refresh()

    def handle_event(self, event: AppEvent) -> None:
        """Apply one event from the queue to the application state."""
        if event.kind is EventKind.KEY:
            if self.error is not None:
                self.error = None
                return
            if event.key is not None:
                self._on_key(event.key)
        elif event.kind is EventKind.ACTION:
            self._on_action(event.action, event.payload)
        elif event.kind is EventKind.ERROR:
            self.error = friendly_error(event.message)

    def shortcut_lines(self, width: int) -> list[str]:
        """The help lines of the current view followed by the exit hint."""
        if self.status is Status.LIST:
            lines = self.table.shortcuts()
        elif self.status is Status.LOG:
            lines = self.log.shortcuts()
        else:
            lines = self.details.shortcuts()
        lines = list(lines)
        if lines:
            lines.append("")
            if width > WIDE_HELP:
                lines.append("")
        lines.append(EXIT_LINE)
        return lines

    # ----- terminal loop --------------------------------------------------

    def _init_colors(self) -> None:
        attrs = {
            "red": 0, "green": 0, "yellow": 0, "cyan": 0, "magenta": 0,
            "gray": 0, "highlight": curses.A_REVERSE, "dim_highlight": curses.A_REVERSE,
        }
        try:
            if curses.has_colors():
                curses.start_color()
                curses.use_default_colors()
                pairs = [
                    ("red", curses.COLOR_RED, -1),
                    ("green", curses.COLOR_GREEN, -1),
                    ("yellow", curses.COLOR_YELLOW, -1),
                    ("cyan", curses.COLOR_CYAN, -1),
                    ("magenta", curses.COLOR_MAGENTA, -1),
                    ("gray", curses.COLOR_WHITE, -1),
                    ("highlight", curses.COLOR_WHITE, curses.COLOR_BLUE),
                    ("dim_highlight", curses.COLOR_WHITE, curses.COLOR_BLACK),
                ]
                for number, (name, fg, bg) in enumerate(pairs, start=1):
                    curses.init_pair(number, fg, bg)
                    attrs[name] = curses.color_pair(number)
        except curses.error:
            pass
        attrs["highlight"] |= curses.A_BOLD
        attrs["dim_highlight"] |= curses.A_BOLD
        self._attrs = attrs

    def _attr(self, name: str) -> int:
        return self._attrs.get(name, 0)

    def _read_event(self, screen: Any) -> AppEvent:
        while True:
            try:
                return self.events.get_nowait()
            except queue.Empty:
                pass
            try:
                code = screen.get_wch()
            except curses.error:
                continue
            key = translate_key(code)
            if key is not None:
                return AppEvent(EventKind.KEY, key=key)

    def run(self, screen: Any) -> None:
        """Draw and process events until Ctrl+C is pressed."""
        self.running = True
        screen.keypad(True)
        screen.timeout(POLL_TIMEOUT_MS)
        try:
            curses.set_escdelay(25)
        except (AttributeError, curses.error):
            pass
        self._init_colors()
        while self.running:
            self._draw(screen)
            self.handle_event(self._read_event(screen))

    # ----- drawing --------------------------------------------------------

    def _set_cursor(self, visible: bool) -> None:
        try:
            curses.curs_set(1 if visible else 0)
        except curses.error:
            pass

    def _draw(self, screen: Any) -> None:
        screen.erase()
        height, width = screen.getmaxyx()
        cursor: Optional[tuple[int, int]] = None
        if self.status is Status.LIST:
            help_height = min(SHORTCUTS_HEIGHT, max(height - FILTER_HEIGHT - TABLE_MIN_HEIGHT, 0))
            table_height = max(height - FILTER_HEIGHT - help_height, 0)
            cursor = self._draw_filter(screen, 0, width)
            self._draw_table(screen, FILTER_HEIGHT, table_height, width)
            self._draw_shortcuts(screen, FILTER_HEIGHT + table_height, help_height, width)
        else:
            help_height = min(SHORTCUTS_HEIGHT, height)
            content_height = height - help_height
            if self.status is Status.LOG:
                self._draw_log(screen, content_height, width)
            else:
                self._draw_details(screen, content_height, width)
            self._draw_shortcuts(screen, content_height, help_height, width)
        if self.error is not None:
            self._draw_error(screen, height, width)
            cursor = None
        if cursor is not None:
            self._set_cursor(True)
            try:
                screen.move(*cursor)
            except curses.error:
                pass
        else:
            self._set_cursor(False)
        screen.refresh()

    def _draw_filter(self, screen: Any, top: int, width: int) -> Optional[tuple[int, int]]:
        column = 0
        for text, bold in self.filter.help_line():
            _put(screen, top, column, text, curses.A_BOLD if bold else 0)
            column += len(text)
        editing = self.filter.input_mode is InputMode.EDITING
        attr = self._attr("yellow") if editing else 0
        _box(screen, top + 1, 0, 3, width, "Input", attr)
        _put(screen, top + 2, 1, self.filter.input[: max(width - 2, 0)], attr)
        cursor_column = self.filter.cursor_column()
        if cursor_column is None:
            return None
        return top + 2, cursor_column

    def _column_widths(self, inner: int) -> list[int]:
        fixed = [inner * 15 // 100, 20, 10, 10]
        rest = max(inner - 3 - sum(fixed) - len(fixed), 0)
        return fixed + [rest]

    def _draw_table(self, screen: Any, top: int, height: int, width: int) -> None:
        if height < 3:
            return
        _box(screen, top, 0, height, width, "Systemd Services")
        widths = self._column_widths(width - 2)

        def cells(row: Sequence[str]) -> str:
            return " ".join(cell[:w].ljust(w) for cell, w in zip(row, widths))

        _put(screen, top + 1, 1, "   " + cells(HEADER), curses.A_BOLD)
        visible = height - 3
        rows = self.table.rows
        selected = self.table.selected
        if selected is not None and visible > 0:
            if selected < self._table_offset:
                self._table_offset = selected
            elif selected >= self._table_offset + visible:
                self._table_offset = selected - visible + 1
        self._table_offset = min(self._table_offset, max(len(rows) - 1, 0))
        highlight = self._attr(
            "dim_highlight" if self.table.ignore_key_events else "highlight"
        )
        for line, index in enumerate(range(self._table_offset, len(rows))):
            if line >= visible:
                break
            row = rows[index]
            y = top + 2 + line
            if index == selected:
                _put(screen, y, 1, (">> " + cells(row))[: width - 2].ljust(width - 2), highlight)
                continue
            x = 4
            active = row[1].split(" ", 1)[0]
            state_attr = {"active": "green", "activating": "yellow"}.get(active, "red")
            styles = [self._attr("cyan") | curses.A_BOLD, self._attr(state_attr)]
            styles += [self._attr("gray")] * 3
            for cell, cell_width, style in zip(row, widths, styles):
                _put(screen, y, x, cell[:cell_width], style)
                x += cell_width + 1

    def _draw_log(self, screen: Any, height: int, width: int) -> None:
        if height < 2:
            return
        lines = self.log.lines()
        if lines is None:
            _box(screen, 0, 0, height, width)
            text = "Loading..."
            _put(screen, height // 2, max((width - len(text)) // 2, 0), text)
            return
        attr = self._attr("yellow") if self.log.border_highlighted else 0
        _box(screen, 0, 0, height, width, self.log.title(), attr, center=True)
        inner = width - 2
        wrapped = [
            part
            for line in lines
            for part in (
                textwrap.wrap(line, inner, replace_whitespace=False, drop_whitespace=False)
                or [""]
            )
        ]
        for row, text in enumerate(wrapped[self.log.scroll : self.log.scroll + height - 2]):
            _put(screen, 1 + row, 1, text[:inner])

    def _draw_details(self, screen: Any, height: int, width: int) -> None:
        lines = self.details.lines()
        if not lines or height < 2:
            return
        _box(screen, 0, 0, height, width, self.details.title(), center=True)
        rendered: list[tuple[str, str]] = []
        for line in lines:
            if line is None:
                rendered.append(("", ""))
                continue
            key, value = line
            first, *more = value.split("\n")
            rendered.append((key, "=" + first))
            rendered.extend(("", extra) for extra in more)
        inner = width - 2
        visible = rendered[self.details.scroll : self.details.scroll + height - 2]
        for row, (key, value) in enumerate(visible):
            _put(screen, 1 + row, 1, key[:inner], curses.A_BOLD)
            if len(key) < inner:
                _put(screen, 1 + row, 1 + len(key), value[: inner - len(key)])
        if height > 2 and len(lines) > 1:
            span = height - 3
            position = min(self.details.scroll, len(lines) - 1) * span // (len(lines) - 1)
            _put(screen, 1 + position, width - 1, "█")

    def _draw_shortcuts(self, screen: Any, top: int, height: int, width: int) -> None:
        if height < 2:
            return
        _box(screen, top, 0, height, width, "Shortcuts")
        lines = self.shortcut_lines(width)
        has_heading = len(lines) > 1
        row = top + 1
        for index, line in enumerate(lines):
            for part in _wrap(line, width - 2):
                if row >= top + height - 1:
                    return
                if line == EXIT_LINE:
                    _put(screen, row, 1, "Exit", self._attr("red") | curses.A_BOLD)
                    _put(screen, row, 5, part[4:])
                elif index == 0 and has_heading:
                    _put(screen, row, 1, part, self._attr("magenta") | curses.A_BOLD)
                else:
                    _put(screen, row, 1, part)
                row += 1

    def _draw_error(self, screen: Any, height: int, width: int) -> None:
        popup_width = min(70, max(width - 4, 0))
        popup_height = min(12, max(height - 4, 0))
        if popup_width < 4 or popup_height < 3:
            return
        top = (height - popup_height) // 2
        left = (width - popup_width) // 2
        _clear(screen, top, left, popup_height, popup_width)
        red = self._attr("red")
        _box(screen, top, left, popup_height, popup_width, "Error", red)
        inner = popup_width - 2
        content: list[tuple[str, int]] = [("ERROR", red | curses.A_BOLD), ("", 0)]
        content += [(part, 0) for part in _wrap(self.error or "", inner)]
        content += [("", 0), ("Press any key to dismiss", self._attr("gray"))]
        for row, (text, attr) in enumerate(content[: popup_height - 2]):
            text = text[:inner]
            _put(screen, top + 1 + row, left + 1 + (inner - len(text)) // 2, text, attr)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Start the terminal interface."""
    parser = argparse.ArgumentParser(
        prog="unitdeck", description="Manage systemd services from the terminal."
    )
    parser.parse_args(argv)
    locale.setlocale(locale.LC_ALL, "")
    app = App()
    curses.wrapper(app.run)
    return 0