import asyncio
from datetime import date

import pytest
import pytest_asyncio

from maintrack.controller import ViewStateController
from maintrack.database import build_engine, build_session_factory, create_tables
from maintrack.schemas.maintenance import MaintenanceRecordResponse
from maintrack.schemas.session import EMPTY_SESSION, Session
from maintrack.schemas.vehicle import VehicleResponse
from maintrack.seed import seed_data
from maintrack.services.interfaces import HandlerSubscription
from maintrack.services.local_auth import LocalAuthService
from maintrack.services.local_data import SqlDataService
from maintrack.utils.result import Err, Ok


def make_vehicle(vehicle_id: str, name: str, user_id: str = "u1", **overrides) -> VehicleResponse:
    fields = {
        "id": vehicle_id,
        "name": name,
        "type": "Car",
        "model": "",
        "year": 2020,
        "vin": "",
        "created_at": "2026-01-01T00:00:00+00:00",
        "user_id": user_id,
    }
    fields.update(overrides)
    return VehicleResponse(**fields)


def make_record(record_id: str, vehicle_id: str, service_date: date, **overrides) -> MaintenanceRecordResponse:
    fields = {
        "id": record_id,
        "vehicle_id": vehicle_id,
        "service_type": "Oil change",
        "service_date": service_date,
        "created_at": "2026-01-01T00:00:00+00:00",
    }
    fields.update(overrides)
    return MaintenanceRecordResponse(**fields)


class StubAuthService:
    """Auth double: sign-in/up only record the call; ``emit`` pushes sessions."""

    def __init__(self, session: Session = EMPTY_SESSION):
        self.session = session
        self.session_error: str | None = None
        self.sign_in_result = Ok()
        self.sign_up_result = Ok()
        self.handlers = []
        self.subscriptions: list[HandlerSubscription] = []
        self.calls: list[tuple] = []

    async def get_current_session(self):
        if self.session_error:
            return Err(self.session_error)
        return Ok(self.session)

    async def sign_in(self, email, password):
        self.calls.append(("sign_in", email, password))
        return self.sign_in_result

    async def sign_up(self, email, password):
        self.calls.append(("sign_up", email, password))
        return self.sign_up_result

    async def sign_out(self):
        self.calls.append(("sign_out",))

    def subscribe(self, handler):
        self.handlers.append(handler)
        subscription = HandlerSubscription(self.handlers, handler)
        self.subscriptions.append(subscription)
        return subscription

    async def emit(self, session: Session):
        self.session = session
        for handler in list(self.handlers):
            await handler(session)


class StubDataService:
    """Data double backed by plain lists, with optional gates to hold responses."""

    def __init__(self):
        self.vehicles: list[VehicleResponse] = []
        self.records: dict[str, list[MaintenanceRecordResponse]] = {}
        self.vehicle_fetches = 0
        self.record_fetches: list[str] = []
        self.inserted_vehicles: list[dict] = []
        self.inserted_records: list[dict] = []
        self.list_error: str | None = None
        self.insert_error: str | None = None
        self.vehicle_gate: asyncio.Event | None = None
        self.record_gates: dict[str, asyncio.Event] = {}

    async def list_vehicles(self):
        self.vehicle_fetches += 1
        snapshot = list(self.vehicles)
        if self.vehicle_gate is not None:
            await self.vehicle_gate.wait()
        if self.list_error:
            return Err(self.list_error)
        return Ok(snapshot)

    async def insert_vehicle(self, fields):
        self.inserted_vehicles.append(fields)
        if self.insert_error:
            return Err(self.insert_error)
        vehicle = make_vehicle(f"v{len(self.vehicles) + 1}", **fields)
        self.vehicles.append(vehicle)
        return Ok(vehicle)

    async def list_maintenance_records(self, vehicle_id):
        self.record_fetches.append(vehicle_id)
        gate = self.record_gates.get(vehicle_id)
        if gate is not None:
            await gate.wait()
        if self.list_error:
            return Err(self.list_error)
        return Ok(list(self.records.get(vehicle_id, [])))

    async def insert_maintenance_record(self, fields):
        self.inserted_records.append(fields)
        if self.insert_error:
            return Err(self.insert_error)
        vehicle_id = fields["vehicle_id"]
        records = self.records.setdefault(vehicle_id, [])
        record = make_record(f"r{len(records) + 1}", **fields)
        records.insert(0, record)
        return Ok(record)


@pytest.fixture
def stub_auth():
    return StubAuthService()


@pytest.fixture
def stub_data():
    return StubDataService()


@pytest.fixture
def controller(stub_auth, stub_data):
    ctrl = ViewStateController(stub_auth, stub_data)
    yield ctrl
    ctrl.close()


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.sqlite3'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    factory = build_session_factory(db_engine)
    async with factory() as session:
        await seed_data(session)
    return factory


@pytest.fixture
def auth_service(session_factory):
    return LocalAuthService(session_factory)


@pytest.fixture
def data_service(auth_service, session_factory):
    return SqlDataService(auth_service, session_factory)


@pytest_asyncio.fixture
async def ready_app(auth_service, data_service):
    """The FastAPI app wired to a fresh seeded database, as the lifespan would."""
    from maintrack.main import app

    controller = ViewStateController(auth_service, data_service)
    app.state.auth_service = auth_service
    app.state.controller = controller
    await controller.initialize()
    yield app
    controller.close()
    del app.state.controller
    del app.state.auth_service
