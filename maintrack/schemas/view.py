from typing import Literal

from pydantic import BaseModel

from maintrack.schemas.maintenance import MaintenanceRecordForm, MaintenanceRecordResponse
from maintrack.schemas.vehicle import VEHICLE_TYPES, VehicleForm, VehicleResponse

ViewMode = Literal["loading", "unauthenticated", "authenticated"]


class AuthView(BaseModel):
    email: str = ""
    status_message: str | None = None


class GarageView(BaseModel):
    user_id: str
    email: str
    vehicles: list[VehicleResponse]
    selected_vehicle_id: str | None = None
    records: list[MaintenanceRecordResponse]
    vehicle_types: list[str] = VEHICLE_TYPES
    vehicle_form: VehicleForm | None = None
    record_form: MaintenanceRecordForm | None = None


class ViewState(BaseModel):
    mode: ViewMode
    auth: AuthView | None = None
    garage: GarageView | None = None
