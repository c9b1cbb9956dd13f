from fastapi import APIRouter, Body, Depends

from maintrack.controller import ViewStateController
from maintrack.dependencies import get_controller
from maintrack.schemas.auth import FormFieldUpdate
from maintrack.schemas.vehicle import SelectVehicleRequest, VehicleForm
from maintrack.utils.exceptions import AppException
from maintrack.utils.response import view_response

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


@router.post("/select")
async def select_vehicle(
    payload: SelectVehicleRequest,
    controller: ViewStateController = Depends(get_controller),
):
    await controller.select_vehicle(payload.vehicle_id)
    return view_response(controller.view())


@router.post("/form/open")
async def open_vehicle_form(controller: ViewStateController = Depends(get_controller)):
    controller.open_vehicle_form()
    return view_response(controller.view())


@router.post("/form/close")
async def close_vehicle_form(controller: ViewStateController = Depends(get_controller)):
    controller.close_vehicle_form()
    return view_response(controller.view())


@router.patch("/form")
async def update_vehicle_form(
    update: FormFieldUpdate,
    controller: ViewStateController = Depends(get_controller),
):
    controller.update_vehicle_form(update.field, update.value)
    return view_response(controller.view())


@router.post("", status_code=201)
async def add_vehicle(
    payload: VehicleForm | None = Body(default=None),
    controller: ViewStateController = Depends(get_controller),
):
    if payload is not None:
        controller.vehicle_form = payload
    if not await controller.add_vehicle():
        raise AppException(
            "Vehicle was not added",
            status_code=400,
            data=controller.view().model_dump(mode="json"),
        )
    return view_response(controller.view())
