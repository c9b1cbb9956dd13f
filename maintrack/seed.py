import uuid
from datetime import date, datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from maintrack.models.maintenance_record import MaintenanceRecord
from maintrack.models.user import User
from maintrack.models.vehicle import Vehicle
from maintrack.services.local_auth import hash_password


SEED_USER_ID = str(uuid.uuid5(uuid.NAMESPACE_DNS, "user-demo.maintrack"))
SEED_USER_EMAIL = "demo@maintrack.local"
SEED_USER_PASSWORD = "demo1234"

SEED_VEHICLES = [
    {"id": str(uuid.uuid5(uuid.NAMESPACE_DNS, "vehicle-f250")), "name": "Work Truck", "type": "Truck", "model": "Ford F-250", "year": 2018, "vin": "1FT7W2BT5JEC00001"},
    {"id": str(uuid.uuid5(uuid.NAMESPACE_DNS, "vehicle-civic")), "name": "Commuter", "type": "Car", "model": "Honda Civic", "year": 2021, "vin": "2HGFE2F50MH500002"},
    {"id": str(uuid.uuid5(uuid.NAMESPACE_DNS, "vehicle-kubota")), "name": "Tractor", "type": "Equipment", "model": "Kubota L2501", "year": 2015, "vin": ""},
]

SEED_RECORDS = [
    {"vehicle": "vehicle-f250", "service_type": "Oil change", "service_date": date(2025, 3, 14), "mileage": 61200, "next_service_date": date(2025, 9, 14), "next_service_mileage": 66200, "performed_by": "Main St Garage"},
    {"vehicle": "vehicle-f250", "service_type": "Tire rotation", "service_date": date(2025, 6, 2), "mileage": 64050, "performed_by": "self"},
    {"vehicle": "vehicle-civic", "service_type": "Brake pads", "service_date": date(2024, 11, 20), "mileage": 28900, "notes": "Front pads only"},
]


async def seed_data(session: AsyncSession) -> None:
    result = await session.execute(select(User).where(User.id == SEED_USER_ID))
    if result.scalars().first() is not None:
        return

    now = datetime.now(timezone.utc).isoformat()
    session.add(User(
        id=SEED_USER_ID,
        email=SEED_USER_EMAIL,
        password_hash=hash_password(SEED_USER_PASSWORD),
        confirmed=1,
        created_at=now,
    ))
    # no relationship() on the models, so parents are flushed before children
    await session.flush()

    for v in SEED_VEHICLES:
        session.add(Vehicle(**v, created_at=now, user_id=SEED_USER_ID))
    await session.flush()

    for r in SEED_RECORDS:
        fields = dict(r)
        vehicle_id = str(uuid.uuid5(uuid.NAMESPACE_DNS, fields.pop("vehicle")))
        session.add(MaintenanceRecord(
            id=str(uuid.uuid4()),
            vehicle_id=vehicle_id,
            created_at=now,
            **fields,
        ))

    await session.commit()
