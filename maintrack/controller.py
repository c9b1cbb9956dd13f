"""View-state controller for the maintenance tracker.

Owns the in-memory application state (session, vehicle list, selection,
maintenance history, form buffers, status message, loading flag) and keeps it
consistent while the user authenticates, selects vehicles and creates data.

All collaborator calls go through the injected ``AuthService`` and
``DataService``. Responses are applied only if they belong to the latest
request issued for that list: a vehicle list fetched for a previous session,
or records fetched for a vehicle that is no longer selected, are discarded.
"""
import logging

from maintrack.schemas.auth import AuthForm
from maintrack.schemas.maintenance import MaintenanceRecordForm, MaintenanceRecordResponse
from maintrack.schemas.session import EMPTY_SESSION, Session
from maintrack.schemas.vehicle import VehicleForm, VehicleResponse
from maintrack.schemas.view import AuthView, GarageView, ViewState
from maintrack.services.interfaces import AuthService, DataService, Subscription
from maintrack.utils.result import Err

logger = logging.getLogger(__name__)

SIGN_UP_CONFIRMATION = "Check your email for the confirmation link."


def _set_form_field(form, field: str, value) -> None:
    if field not in type(form).model_fields:
        raise ValueError(f"Unknown form field: {field}")
    setattr(form, field, value)


class ViewStateController:
    def __init__(self, auth: AuthService, data: DataService):
        self._auth = auth
        self._data = data
        self._subscription: Subscription | None = None
        self._closed = False
        # bumped on every new request and on every session/selection change
        self._vehicle_request = 0
        self._record_request = 0

        self.session: Session = EMPTY_SESSION
        self.loading = True
        self.status_message: str | None = None
        self.vehicles: list[VehicleResponse] = []
        self.selected_vehicle_id: str | None = None
        self.records: list[MaintenanceRecordResponse] = []

        self.auth_form = AuthForm()
        self.vehicle_form = VehicleForm()
        self.vehicle_form_open = False
        self.record_form = MaintenanceRecordForm()
        self.record_form_open = False

    async def __aenter__(self) -> "ViewStateController":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Lifecycle and session
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Subscribe to session changes and restore any existing session."""
        if self._subscription is None and not self._closed:
            self._subscription = self._auth.subscribe(self._on_session_changed)

        needs_fetch = False
        try:
            result = await self._auth.get_current_session()
            if isinstance(result, Err):
                logger.error("Error checking user: %s", result.message)
            else:
                needs_fetch = self._apply_session(result.value)
        finally:
            self.loading = False

        if needs_fetch:
            await self.fetch_vehicles()

    def close(self) -> None:
        """Release the session subscription. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    async def _on_session_changed(self, session: Session) -> None:
        if self._closed:
            return
        needs_fetch = self._apply_session(session)
        self.loading = False
        if needs_fetch:
            await self.fetch_vehicles()

    def _apply_session(self, session: Session) -> bool:
        """Store ``session``; return True when the vehicle list must be fetched."""
        previous = self.session
        self.session = session

        if session.is_active and previous.is_active and previous.user_id == session.user_id:
            return False

        # a different identity (or none): nothing fetched so far applies any more
        self._vehicle_request += 1
        self._record_request += 1
        self.vehicles = []
        self.selected_vehicle_id = None
        self.records = []
        self.vehicle_form_open = False
        self.record_form_open = False

        if not session.is_active:
            if previous.is_active:
                logger.info("Session ended for user %s", previous.user_id)
            return False

        logger.info("Session started for user %s", session.user_id)
        return True

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def update_auth_form(self, field: str, value) -> None:
        _set_form_field(self.auth_form, field, value)

    async def sign_in(self, email: str | None = None, password: str | None = None) -> None:
        self.status_message = None
        result = await self._auth.sign_in(
            self.auth_form.email if email is None else email,
            self.auth_form.password if password is None else password,
        )
        if isinstance(result, Err):
            self.status_message = result.message

    async def sign_up(self, email: str | None = None, password: str | None = None) -> None:
        self.status_message = None
        result = await self._auth.sign_up(
            self.auth_form.email if email is None else email,
            self.auth_form.password if password is None else password,
        )
        if isinstance(result, Err):
            self.status_message = result.message
        else:
            self.status_message = SIGN_UP_CONFIRMATION

    async def sign_out(self) -> None:
        await self._auth.sign_out()

    # ------------------------------------------------------------------
    # Vehicles
    # ------------------------------------------------------------------

    async def fetch_vehicles(self) -> None:
        self._vehicle_request += 1
        request = self._vehicle_request

        result = await self._data.list_vehicles()
        if request != self._vehicle_request:
            logger.debug("Discarding superseded vehicle list response")
            return
        if isinstance(result, Err):
            logger.error("Error fetching vehicles: %s", result.message)
            return
        self.vehicles = list(result.value)

    async def select_vehicle(self, vehicle_id: str | None) -> None:
        if vehicle_id == self.selected_vehicle_id:
            return

        self.selected_vehicle_id = vehicle_id
        self.record_form_open = False
        self.record_form = MaintenanceRecordForm()

        if vehicle_id is None:
            self._record_request += 1
            self.records = []
            return

        if not any(v.id == vehicle_id for v in self.vehicles):
            logger.warning("Selected vehicle %s is not in the current vehicle list", vehicle_id)
        await self.fetch_maintenance_records(vehicle_id)

    def open_vehicle_form(self) -> None:
        self.vehicle_form_open = True

    def close_vehicle_form(self) -> None:
        self.vehicle_form_open = False

    def update_vehicle_form(self, field: str, value) -> None:
        _set_form_field(self.vehicle_form, field, value)

    async def add_vehicle(self) -> bool:
        if not self.session.is_active:
            logger.error("Error adding vehicle: user not authenticated")
            return False

        missing = self.vehicle_form.missing_required()
        if missing:
            logger.warning("Vehicle form is missing required fields: %s", ", ".join(missing))
            return False

        fields = {**self.vehicle_form.model_dump(), "user_id": self.session.user_id}
        result = await self._data.insert_vehicle(fields)
        if isinstance(result, Err):
            logger.error("Error adding vehicle: %s", result.message)
            return False

        self.vehicle_form_open = False
        self.vehicle_form = VehicleForm()
        await self.fetch_vehicles()
        return True

    # ------------------------------------------------------------------
    # Maintenance records
    # ------------------------------------------------------------------

    async def fetch_maintenance_records(self, vehicle_id: str) -> None:
        self._record_request += 1
        request = self._record_request

        result = await self._data.list_maintenance_records(vehicle_id)
        if request != self._record_request or vehicle_id != self.selected_vehicle_id:
            logger.debug("Discarding stale maintenance records for vehicle %s", vehicle_id)
            return
        if isinstance(result, Err):
            logger.error("Error fetching maintenance records: %s", result.message)
            return
        self.records = list(result.value)

    def open_record_form(self) -> None:
        if self.selected_vehicle_id is None:
            logger.warning("Cannot open the service record form without a selected vehicle")
            return
        self.record_form_open = True

    def close_record_form(self) -> None:
        self.record_form_open = False

    def update_record_form(self, field: str, value) -> None:
        _set_form_field(self.record_form, field, value)

    async def add_maintenance_record(self) -> bool:
        if not self.session.is_active:
            logger.error("Error adding maintenance record: user not authenticated")
            return False

        vehicle_id = self.selected_vehicle_id
        if vehicle_id is None:
            logger.error("Error adding maintenance record: no vehicle selected")
            return False

        missing = self.record_form.missing_required()
        if missing:
            logger.warning("Service record form is missing required fields: %s", ", ".join(missing))
            return False

        fields = {**self.record_form.to_fields(), "vehicle_id": vehicle_id}
        result = await self._data.insert_maintenance_record(fields)
        if isinstance(result, Err):
            logger.error("Error adding maintenance record: %s", result.message)
            return False

        self.record_form_open = False
        self.record_form = MaintenanceRecordForm()
        if self.selected_vehicle_id is not None:
            await self.fetch_maintenance_records(self.selected_vehicle_id)
        return True

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def view(self) -> ViewState:
        if self.loading:
            return ViewState(mode="loading")

        if not self.session.is_active:
            return ViewState(
                mode="unauthenticated",
                auth=AuthView(email=self.auth_form.email, status_message=self.status_message),
            )

        return ViewState(
            mode="authenticated",
            garage=GarageView(
                user_id=self.session.user_id,
                email=self.session.email,
                vehicles=self.vehicles,
                selected_vehicle_id=self.selected_vehicle_id,
                records=self.records,
                vehicle_form=self.vehicle_form if self.vehicle_form_open else None,
                record_form=self.record_form if self.record_form_open else None,
            ),
        )
