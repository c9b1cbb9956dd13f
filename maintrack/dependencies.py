from fastapi import Header, HTTPException, Request

from maintrack.config import settings
from maintrack.controller import ViewStateController
from maintrack.services.local_auth import LocalAuthService


async def verify_api_key(x_api_key: str = Header(default="")) -> None:
    if not settings.api_key:
        return
    if x_api_key != settings.api_key:
        raise HTTPException(status_code=403, detail="Invalid or missing API key")


async def get_controller(request: Request) -> ViewStateController:
    controller = getattr(request.app.state, "controller", None)
    if controller is None or controller.closed:
        raise HTTPException(status_code=503, detail="Controller not initialized")
    return controller


async def get_auth_service(request: Request) -> LocalAuthService:
    auth = getattr(request.app.state, "auth_service", None)
    if auth is None:
        raise HTTPException(status_code=503, detail="Auth service not initialized")
    return auth
