"""Data service over the local ``vehicles`` and ``maintenance_records`` tables.

Row access follows the owner policy: every read and write is scoped to the
user of the auth service's current session.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from maintrack.database import async_session
from maintrack.models.maintenance_record import MaintenanceRecord
from maintrack.models.vehicle import Vehicle
from maintrack.schemas.maintenance import MaintenanceRecordResponse
from maintrack.schemas.vehicle import VehicleResponse
from maintrack.services.local_auth import LocalAuthService
from maintrack.utils.result import Err, Ok, Result

logger = logging.getLogger(__name__)

VEHICLE_COLUMNS = {"name", "type", "model", "year", "vin", "user_id"}
RECORD_COLUMNS = {
    "vehicle_id",
    "service_type",
    "service_date",
    "mileage",
    "notes",
    "next_service_date",
    "next_service_mileage",
    "performed_by",
}


def _policy_violation(table: str) -> Err:
    return Err(f'new row violates row-level security policy for table "{table}"')


def _unknown_columns(fields: dict[str, Any], allowed: set[str], table: str) -> Err | None:
    unknown = sorted(set(fields) - allowed)
    if unknown:
        return Err(f"Could not find the '{unknown[0]}' column of '{table}'")
    return None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SqlDataService:
    def __init__(
        self,
        auth: LocalAuthService,
        session_factory: async_sessionmaker[AsyncSession] = async_session,
    ):
        self._auth = auth
        self._session_factory = session_factory

    def _current_user_id(self) -> str | None:
        session = self._auth.current_session
        return session.user_id if session.is_active else None

    async def list_vehicles(self) -> Result[list[VehicleResponse]]:
        user_id = self._current_user_id()
        if user_id is None:
            return Ok([])
        try:
            async with self._session_factory() as db:
                result = await db.execute(
                    select(Vehicle).where(Vehicle.user_id == user_id).order_by(Vehicle.name.asc())
                )
                vehicles = result.scalars().all()
                return Ok([VehicleResponse.model_validate(v) for v in vehicles])
        except SQLAlchemyError as exc:
            logger.exception("Vehicle query failed")
            return Err(str(exc))

    async def insert_vehicle(self, fields: dict[str, Any]) -> Result[VehicleResponse]:
        error = _unknown_columns(fields, VEHICLE_COLUMNS, "vehicles")
        if error:
            return error
        user_id = self._current_user_id()
        if user_id is None or fields.get("user_id") != user_id:
            return _policy_violation("vehicles")

        vehicle = Vehicle(id=str(uuid.uuid4()), created_at=_now(), **fields)
        try:
            async with self._session_factory() as db:
                db.add(vehicle)
                await db.commit()
                await db.refresh(vehicle)
                return Ok(VehicleResponse.model_validate(vehicle))
        except SQLAlchemyError as exc:
            logger.exception("Vehicle insert failed")
            return Err(str(exc))

    async def list_maintenance_records(self, vehicle_id: str) -> Result[list[MaintenanceRecordResponse]]:
        user_id = self._current_user_id()
        if user_id is None:
            return Ok([])
        try:
            async with self._session_factory() as db:
                result = await db.execute(
                    select(MaintenanceRecord)
                    .join(Vehicle, Vehicle.id == MaintenanceRecord.vehicle_id)
                    .where(MaintenanceRecord.vehicle_id == vehicle_id, Vehicle.user_id == user_id)
                    .order_by(MaintenanceRecord.service_date.desc())
                )
                records = result.scalars().all()
                return Ok([MaintenanceRecordResponse.model_validate(r) for r in records])
        except SQLAlchemyError as exc:
            logger.exception("Maintenance record query failed for vehicle %s", vehicle_id)
            return Err(str(exc))

    async def insert_maintenance_record(self, fields: dict[str, Any]) -> Result[MaintenanceRecordResponse]:
        error = _unknown_columns(fields, RECORD_COLUMNS, "maintenance_records")
        if error:
            return error
        user_id = self._current_user_id()
        if user_id is None or not fields.get("vehicle_id"):
            return _policy_violation("maintenance_records")

        try:
            async with self._session_factory() as db:
                vehicle = await db.get(Vehicle, fields.get("vehicle_id"))
                if vehicle is None or vehicle.user_id != user_id:
                    return _policy_violation("maintenance_records")

                record = MaintenanceRecord(id=str(uuid.uuid4()), created_at=_now(), **fields)
                db.add(record)
                await db.commit()
                await db.refresh(record)
                return Ok(MaintenanceRecordResponse.model_validate(record))
        except SQLAlchemyError as exc:
            logger.exception("Maintenance record insert failed")
            return Err(str(exc))
