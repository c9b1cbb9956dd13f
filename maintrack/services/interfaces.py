"""Collaborator contracts used by the view-state controller.

The controller never talks to a backend directly: it is handed an
``AuthService`` and a ``DataService`` at construction time, so any backend
(the bundled SQL one, a hosted one, or a test double) can be plugged in.
"""
from typing import Any, Awaitable, Callable, Protocol

from maintrack.schemas.maintenance import MaintenanceRecordResponse
from maintrack.schemas.session import Session
from maintrack.schemas.vehicle import VehicleResponse
from maintrack.utils.result import Result

SessionHandler = Callable[[Session], Awaitable[None]]


class Subscription(Protocol):
    def unsubscribe(self) -> None: ...


class AuthService(Protocol):
    async def get_current_session(self) -> Result[Session]: ...

    async def sign_in(self, email: str, password: str) -> Result[None]: ...

    async def sign_up(self, email: str, password: str) -> Result[None]: ...

    async def sign_out(self) -> None: ...

    def subscribe(self, handler: SessionHandler) -> Subscription: ...


class DataService(Protocol):
    async def list_vehicles(self) -> Result[list[VehicleResponse]]: ...

    async def insert_vehicle(self, fields: dict[str, Any]) -> Result[VehicleResponse]: ...

    async def list_maintenance_records(self, vehicle_id: str) -> Result[list[MaintenanceRecordResponse]]: ...

    async def insert_maintenance_record(self, fields: dict[str, Any]) -> Result[MaintenanceRecordResponse]: ...


class HandlerSubscription:
    """Subscription handle that removes its handler from a registry once."""

    def __init__(self, registry: list[SessionHandler], handler: SessionHandler):
        self._registry = registry
        self._handler = handler
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        if self._handler in self._registry:
            self._registry.remove(self._handler)
