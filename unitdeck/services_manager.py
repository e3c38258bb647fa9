"""Use cases acting on services through a repository."""

from __future__ import annotations

import time
from typing import Any, Optional

from .service import Service
from .systemd import SystemdServiceAdapter

SLEEP_DURATION = 0.2


class ServicesManager:
    """Runs service operations and gives the manager time to settle after each."""

    def __init__(self, repository: Optional[Any] = None, delay: float = SLEEP_DURATION) -> None:
        self._repository = repository if repository is not None else SystemdServiceAdapter()
        self._delay = delay

    def _pause(self) -> None:
        time.sleep(self._delay)

    def start_service(self, service: Service) -> None:
        self._repository.start_service(service.name)
        self._pause()

    def stop_service(self, service: Service) -> None:
        self._repository.stop_service(service.name)
        self._pause()

    def restart_service(self, service: Service) -> None:
        self._repository.restart_service(service.name)
        self._pause()

    def enable_service(self, service: Service) -> None:
        self._repository.enable_service(service.name)
        self._pause()
        self._repository.reload_daemon()

    def disable_service(self, service: Service) -> None:
        self._repository.disable_service(service.name)
        self._pause()
        self._repository.reload_daemon()

    def list_services(self) -> list[Service]:
        """All services, sorted by name without regard to case."""
        return sorted(self._repository.list_services(), key=lambda s: s.name.lower())

    def update_properties(self, service: Service) -> None:
        service.update_properties(self._repository.get_service_property(service.name))

    def get_log(self, service: Service) -> str:
        return self._repository.get_service_log(service.name)