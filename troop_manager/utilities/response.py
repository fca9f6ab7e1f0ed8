# troop_manager/utilities/response.py
from typing import Any, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success_response(
    message: str,
    data: Optional[Any] = None,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    """Wrap data in the {success, message, data} envelope"""
    content = {"success": True, "message": message}
    if data is not None:
        content["data"] = jsonable_encoder(data)
    return JSONResponse(status_code=status_code, content=content)


def error_response(
    error: str,
    status_code: int = status.HTTP_400_BAD_REQUEST,
    **extra: Any,
) -> JSONResponse:
    """Wrap an error message in the {success: false, error} envelope"""
    content = {"success": False, "error": error}
    content.update({key: value for key, value in extra.items() if value is not None})
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))
