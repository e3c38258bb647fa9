"""A systemd service as listed by the manager."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .service_property import ServiceProperty
from .service_state import ServiceState

_SUFFIX = ".service"


@dataclass
class Service:
    """A service unit with its state and, once fetched, its properties."""

    name: str
    description: str
    state: ServiceState
    properties: Optional[ServiceProperty] = None

    def formatted_name(self) -> str:
        """The unit name without its ".service" suffix."""
        return self.name.removesuffix(_SUFFIX)

    def update_properties(self, properties: ServiceProperty) -> None:
        self.properties = properties