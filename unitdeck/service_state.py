"""Load, activity and unit-file state of a systemd service."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ServiceState:
    """State columns reported for a unit: load, active, sub and unit-file state."""

    load: str
    active: str
    sub: str
    file: str