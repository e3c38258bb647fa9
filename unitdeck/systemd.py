"""Service repository backed by systemd, reached through busctl and journalctl."""

from __future__ import annotations

import json
import subprocess
from typing import Any, Callable, Optional, Sequence

from .repository import ServiceRepository
from .service import Service
from .service_property import ExecCommand, ServiceProperty
from .service_state import ServiceState

Runner = Callable[[Sequence[str]], "subprocess.CompletedProcess[Any]"]

_DESTINATION = "org.freedesktop.systemd1"
_MANAGER_PATH = "/org/freedesktop/systemd1"
_MANAGER_INTERFACE = "org.freedesktop.systemd1.Manager"
_SERVICE_INTERFACE = "org.freedesktop.systemd1.Service"

_EXEC_PROPERTIES = (
    ("ExecStart", "exec_start"),
    ("ExecStartPre", "exec_start_pre"),
    ("ExecStartPost", "exec_start_post"),
    ("ExecStop", "exec_stop"),
    ("ExecStopPost", "exec_stop_post"),
)

_SCALAR_PROPERTIES = (
    ("ExecMainPID", "exec_main_pid"),
    ("ExecMainStartTimestamp", "exec_main_start_timestamp"),
    ("ExecMainExitTimestamp", "exec_main_exit_timestamp"),
    ("ExecMainCode", "exec_main_code"),
    ("ExecMainStatus", "exec_main_status"),
    ("MainPID", "main_pid"),
    ("ControlPID", "control_pid"),
    ("Restart", "restart"),
    ("RestartUSec", "restart_usec"),
    ("StatusText", "status_text"),
    ("Result", "result"),
    ("User", "user"),
    ("Group", "group"),
    ("LimitCPU", "limit_cpu"),
    ("LimitNOFILE", "limit_nofile"),
    ("LimitNPROC", "limit_nproc"),
    ("LimitMEMLOCK", "limit_memlock"),
    ("MemoryLimit", "memory_limit"),
    ("CPUShares", "cpu_shares"),
)


class SystemdError(Exception):
    """A request to systemd or the journal failed."""


def _run(args: Sequence[str]) -> "subprocess.CompletedProcess[bytes]":
    return subprocess.run(list(args), capture_output=True, check=False)


def _text(data: Any) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return str(data)


def _argument(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class SystemdServiceAdapter(ServiceRepository):
    """Manages services of the system instance of systemd."""

    def __init__(self, runner: Optional[Runner] = None, busctl: str = "busctl") -> None:
        self._runner = runner or _run
        self._busctl = busctl

    def _execute(self, args: Sequence[str]) -> "subprocess.CompletedProcess[Any]":
        try:
            return self._runner(args)
        except OSError as exc:
            raise SystemdError(str(exc)) from exc

    def _bus(self, *args: str) -> str:
        result = self._execute([self._busctl, "--system", "--json=short", *args])
        if result.returncode != 0:
            message = _text(result.stderr).strip()
            raise SystemdError(message or f"busctl exited with status {result.returncode}")
        return _text(result.stdout)

    @staticmethod
    def _decode(line: str) -> Any:
        try:
            return json.loads(line)["data"]
        except (ValueError, KeyError, TypeError) as exc:
            raise SystemdError(f"unexpected reply from busctl: {line!r}") from exc

    def _call(self, method: str, signature: str = "", *args: Any) -> list[Any]:
        command = ["call", _DESTINATION, _MANAGER_PATH, _MANAGER_INTERFACE, method]
        if signature:
            command += [signature, *(_argument(a) for a in args)]
        reply = self._bus(*command).strip()
        if not reply:
            return []
        return self._decode(reply)

    def _properties(self, path: str, names: Sequence[str]) -> dict[str, Any]:
        reply = self._bus("get-property", _DESTINATION, path, _SERVICE_INTERFACE, *names)
        values = [self._decode(line) for line in reply.splitlines() if line.strip()]
        if len(values) != len(names):
            raise SystemdError(
                f"expected {len(names)} property values from busctl, got {len(values)}"
            )
        return dict(zip(names, values))

    def reload_daemon(self) -> None:
        self._call("Reload")

    def get_service_property(self, name: str) -> ServiceProperty:
        reply = self._call("GetUnit", "s", name)
        if not reply:
            raise SystemdError(f"no unit path returned for {name}")
        unit_path = reply[0]
        names = [dbus for dbus, _ in _EXEC_PROPERTIES] + [dbus for dbus, _ in _SCALAR_PROPERTIES]
        values = self._properties(unit_path, names)
        fields: dict[str, Any] = {
            attr: tuple(ExecCommand.from_tuple(item) for item in values[dbus])
            for dbus, attr in _EXEC_PROPERTIES
        }
        fields.update({attr: values[dbus] for dbus, attr in _SCALAR_PROPERTIES})
        return ServiceProperty(**fields)

    def _unit_file_state(self, name: str) -> str:
        try:
            reply = self._call("GetUnitFileState", "s", name)
        except SystemdError:
            return "unknown"
        return str(reply[0]) if reply else "unknown"

    def list_services(self) -> list[Service]:
        reply = self._call("ListUnits")
        units = reply[0] if reply else []
        return [
            Service(
                unit[0],
                unit[1],
                ServiceState(unit[2], unit[3], unit[4], self._unit_file_state(unit[0])),
            )
            for unit in units
            if unit[0].endswith(".service")
        ]

    def get_service_log(self, name: str) -> str:
        result = self._execute(["journalctl", "-eu", name, "--no-pager"])
        return _text(result.stdout if result.returncode == 0 else result.stderr)

    def start_service(self, name: str) -> None:
        self._call("StartUnit", "ss", name, "replace")

    def stop_service(self, name: str) -> None:
        self._call("StopUnit", "ss", name, "replace")

    def restart_service(self, name: str) -> None:
        self._call("RestartUnit", "ss", name, "replace")

    def enable_service(self, name: str) -> None:
        self._call("EnableUnitFiles", "asbb", 1, name, False, True)

    def disable_service(self, name: str) -> None:
        self._call("DisableUnitFiles", "asb", 1, name, False)