from datetime import date

from pydantic import BaseModel, Field, field_validator

VEHICLE_TYPES = ["Truck", "Car", "Equipment", "Other"]

MIN_YEAR = 1900


def max_year() -> int:
    return date.today().year + 1


class VehicleResponse(BaseModel):
    id: str
    name: str
    type: str
    model: str = ""
    year: int
    vin: str = ""
    created_at: str
    user_id: str

    model_config = {"from_attributes": True}


class VehicleForm(BaseModel):
    name: str = ""
    type: str = ""
    model: str = ""
    year: int = Field(default_factory=lambda: date.today().year)
    vin: str = ""

    model_config = {"validate_assignment": True}

    @field_validator("year")
    @classmethod
    def year_in_range(cls, value: int) -> int:
        if not MIN_YEAR <= value <= max_year():
            raise ValueError(f"year must be between {MIN_YEAR} and {max_year()}")
        return value

    def missing_required(self) -> list[str]:
        return [name for name in ("name", "type") if not getattr(self, name).strip()]


class SelectVehicleRequest(BaseModel):
    vehicle_id: str | None = None
