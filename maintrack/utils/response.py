from typing import Any

from maintrack.schemas.view import ViewState


def success_response(data: Any = None, message: str | None = None) -> dict:
    return {"status": "success", "data": data, "message": message}


def error_response(message: str, data: Any = None) -> dict:
    return {"status": "error", "data": data, "message": message}


def view_response(view: ViewState, message: str | None = None) -> dict:
    return success_response(data=view.model_dump(mode="json"), message=message)
