from fastapi import APIRouter, Body, Depends

from maintrack.controller import ViewStateController
from maintrack.dependencies import get_controller
from maintrack.schemas.auth import FormFieldUpdate
from maintrack.schemas.maintenance import MaintenanceRecordForm
from maintrack.utils.exceptions import AppException
from maintrack.utils.response import view_response

router = APIRouter(prefix="/records", tags=["records"])


@router.post("/form/open")
async def open_record_form(controller: ViewStateController = Depends(get_controller)):
    controller.open_record_form()
    return view_response(controller.view())


@router.post("/form/close")
async def close_record_form(controller: ViewStateController = Depends(get_controller)):
    controller.close_record_form()
    return view_response(controller.view())


@router.patch("/form")
async def update_record_form(
    update: FormFieldUpdate,
    controller: ViewStateController = Depends(get_controller),
):
    controller.update_record_form(update.field, update.value)
    return view_response(controller.view())


@router.post("", status_code=201)
async def add_maintenance_record(
    payload: MaintenanceRecordForm | None = Body(default=None),
    controller: ViewStateController = Depends(get_controller),
):
    if payload is not None:
        controller.record_form = payload
    if not await controller.add_maintenance_record():
        raise AppException(
            "Service record was not added",
            status_code=400,
            data=controller.view().model_dump(mode="json"),
        )
    return view_response(controller.view())
