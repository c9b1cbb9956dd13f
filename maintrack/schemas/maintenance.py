from datetime import date

from pydantic import BaseModel, Field


class MaintenanceRecordResponse(BaseModel):
    id: str
    vehicle_id: str
    service_type: str
    service_date: date
    mileage: int | None = None
    notes: str | None = None
    next_service_date: date | None = None
    next_service_mileage: int | None = None
    performed_by: str | None = None
    created_at: str

    model_config = {"from_attributes": True}


class MaintenanceRecordForm(BaseModel):
    service_type: str = ""
    service_date: date = Field(default_factory=date.today)
    mileage: int | None = Field(default=None, ge=0)
    notes: str = ""
    next_service_date: date | None = None
    next_service_mileage: int | None = Field(default=None, ge=0)
    performed_by: str = ""

    model_config = {"validate_assignment": True}

    def missing_required(self) -> list[str]:
        return ["service_type"] if not self.service_type.strip() else []

    def to_fields(self) -> dict:
        fields = self.model_dump()
        # blank optional text is stored as NULL
        for name in ("notes", "performed_by"):
            if not fields[name].strip():
                fields[name] = None
        return fields
