from fastapi import APIRouter, Body, Depends

from maintrack.controller import SIGN_UP_CONFIRMATION, ViewStateController
from maintrack.dependencies import get_auth_service, get_controller
from maintrack.schemas.auth import AuthForm, ConfirmRequest, FormFieldUpdate
from maintrack.services.local_auth import LocalAuthService
from maintrack.utils.exceptions import AppException
from maintrack.utils.response import view_response

router = APIRouter(prefix="/auth", tags=["auth"])


def _raise_on_status(controller: ViewStateController) -> None:
    if controller.status_message:
        raise AppException(
            controller.status_message,
            status_code=400,
            data=controller.view().model_dump(mode="json"),
        )


@router.patch("/form")
async def update_auth_form(
    update: FormFieldUpdate,
    controller: ViewStateController = Depends(get_controller),
):
    controller.update_auth_form(update.field, update.value)
    return view_response(controller.view())


@router.post("/sign-in")
async def sign_in(
    payload: AuthForm | None = Body(default=None),
    controller: ViewStateController = Depends(get_controller),
):
    if payload is not None:
        controller.auth_form = payload
    await controller.sign_in()
    _raise_on_status(controller)
    return view_response(controller.view())


@router.post("/sign-up")
async def sign_up(
    payload: AuthForm | None = Body(default=None),
    controller: ViewStateController = Depends(get_controller),
):
    if payload is not None:
        controller.auth_form = payload
    await controller.sign_up()
    if controller.status_message != SIGN_UP_CONFIRMATION:
        _raise_on_status(controller)
    return view_response(controller.view(), message=controller.status_message)


@router.post("/confirm")
async def confirm_email(
    payload: ConfirmRequest,
    auth: LocalAuthService = Depends(get_auth_service),
    controller: ViewStateController = Depends(get_controller),
):
    result = await auth.confirm_email(payload.token)
    if not result.is_ok:
        raise AppException(result.message, status_code=400)
    return view_response(controller.view())


@router.post("/sign-out")
async def sign_out(controller: ViewStateController = Depends(get_controller)):
    await controller.sign_out()
    return view_response(controller.view())
