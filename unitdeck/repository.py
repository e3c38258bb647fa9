"""Abstract access to the services of a service manager."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .service import Service


class ServiceRepository(ABC):
    """Operations a service backend provides."""

    @abstractmethod
    def list_services(self) -> list[Service]:
        """Return all known services."""

    @abstractmethod
    def get_service_log(self, name: str) -> str:
        """Return the journal text of the named service."""

    @abstractmethod
    def start_service(self, name: str) -> None:
        """Start the named service."""

    @abstractmethod
    def stop_service(self, name: str) -> None:
        """Stop the named service."""

    @abstractmethod
    def restart_service(self, name: str) -> None:
        """Restart the named service."""

    @abstractmethod
    def enable_service(self, name: str) -> None:
        """Enable the named service's unit file."""

    @abstractmethod
    def disable_service(self, name: str) -> None:
        """Disable the named service's unit file."""