from fastapi import APIRouter, Depends

from maintrack.controller import ViewStateController
from maintrack.dependencies import get_controller
from maintrack.utils.response import view_response

router = APIRouter(tags=["view"])


@router.get("/view")
async def get_view(controller: ViewStateController = Depends(get_controller)):
    return view_response(controller.view())
