"""Runtime properties of a systemd service unit."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Sequence

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
_I64_LIMIT = 1 << 63


@dataclass(frozen=True)
class ExecCommand:
    """One command of an Exec* property (ExecStart, ExecStop, ...)."""

    path: str
    args: tuple[str, ...] = ()
    ignore_exit_status: bool = False
    start_timestamp: int = 0
    exit_timestamp: int = 0
    pid: int = 0
    exit_code: int = 0
    exit_status: int = 0
    user_id: int = 0
    group_id: int = 0

    @classmethod
    def from_tuple(cls, values: Sequence[Any]) -> "ExecCommand":
        """Build a command from the positional record systemd reports."""
        path, args, ignore, *numbers = values
        return cls(path, tuple(args), bool(ignore), *(int(n) for n in numbers))

    @property
    def command_line(self) -> str:
        return " ".join(self.args)


def format_timestamp(timestamp: int) -> str:
    """Format a count of seconds since the epoch as UTC; empty if out of range."""
    seconds = int(timestamp)
    if seconds >= _I64_LIMIT:
        seconds -= 1 << 64
    try:
        moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return ""
    return moment.strftime(_TIMESTAMP_FORMAT)


def _format_commands(commands: Sequence[ExecCommand]) -> str:
    return "\n".join(command.command_line for command in commands)


@dataclass(frozen=True)
class ServiceProperty:
    """Properties read from the org.freedesktop.systemd1.Service interface."""

    exec_start: tuple[ExecCommand, ...] = field(default_factory=tuple)
    exec_start_pre: tuple[ExecCommand, ...] = field(default_factory=tuple)
    exec_start_post: tuple[ExecCommand, ...] = field(default_factory=tuple)
    exec_stop: tuple[ExecCommand, ...] = field(default_factory=tuple)
    exec_stop_post: tuple[ExecCommand, ...] = field(default_factory=tuple)

    exec_main_pid: int = 0
    exec_main_start_timestamp: int = 0
    exec_main_exit_timestamp: int = 0
    exec_main_code: int = 0
    exec_main_status: int = 0

    main_pid: int = 0
    control_pid: int = 0

    restart: str = ""
    restart_usec: int = 0

    status_text: str = ""
    result: str = ""

    user: str = ""
    group: str = ""

    limit_cpu: int = 0
    limit_nofile: int = 0
    limit_nproc: int = 0
    limit_memlock: int = 0
    memory_limit: int = 0
    cpu_shares: int = 0

    def formatted_exec_start(self) -> str:
        return _format_commands(self.exec_start)

    def formatted_exec_start_pre(self) -> str:
        return _format_commands(self.exec_start_pre)

    def formatted_exec_start_post(self) -> str:
        return _format_commands(self.exec_start_post)

    def formatted_exec_stop(self) -> str:
        return _format_commands(self.exec_stop)

    def formatted_exec_stop_post(self) -> str:
        return _format_commands(self.exec_stop_post)