"""HTTP front end for a single local user.

The process holds one auth session and one view-state controller, and every
client talks to that same pair: whoever signs in last is the session all
clients see. Run it as a personal local app (optionally behind ``api_key``),
not as a shared multi-user server.
"""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import make_url

from maintrack.config import settings
from maintrack.controller import ViewStateController
from maintrack.database import create_tables, async_session
from maintrack.dependencies import verify_api_key
from maintrack.logging_config import setup_logging
from maintrack.seed import seed_data
from maintrack.services.local_auth import LocalAuthService
from maintrack.services.local_data import SqlDataService
from maintrack.routers.auth import router as auth_router
from maintrack.routers.records import router as records_router
from maintrack.routers.vehicles import router as vehicles_router
from maintrack.routers.view import router as view_router
from maintrack.utils.exceptions import register_exception_handlers

logger = logging.getLogger(__name__)


def _ensure_sqlite_dir() -> None:
    url = make_url(settings.database_url)
    if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
        return
    directory = os.path.dirname(url.database)
    if directory:
        os.makedirs(directory, exist_ok=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)
    _ensure_sqlite_dir()
    await create_tables()
    if settings.seed_demo_user:
        async with async_session() as session:
            await seed_data(session)

    auth = LocalAuthService(async_session)
    controller = ViewStateController(auth, SqlDataService(auth, async_session))
    app.state.auth_service = auth
    app.state.controller = controller
    await controller.initialize()
    logger.info("Controller ready")
    try:
        yield
    finally:
        controller.close()


app = FastAPI(
    title="Maintrack API",
    description="Vehicle maintenance record tracker for a single local user",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

_api_key_dep = [Depends(verify_api_key)]

app.include_router(view_router, prefix="/api/v1", dependencies=_api_key_dep)
app.include_router(auth_router, prefix="/api/v1", dependencies=_api_key_dep)
app.include_router(vehicles_router, prefix="/api/v1", dependencies=_api_key_dep)
app.include_router(records_router, prefix="/api/v1", dependencies=_api_key_dep)


@app.get("/health")
async def health_check():
    return {"status": "success", "data": {"service": "maintrack-api", "version": "0.1.0"}, "message": None}
