from typing import Optional
from fastapi.responses import JSONResponse
from fastapi import status
from app.utilities.convert_object_id import convert_object_ids


def return_json(data=None, code: int = status.HTTP_200_OK):
    return JSONResponse(
        status_code=code,
        content=convert_object_ids(data)
    )


def return_error_json(message: str = "Error", error: str = "error", code: int = status.HTTP_400_BAD_REQUEST,
                      field: Optional[str] = None):
    content = {"error": error, "message": message}
    if field:
        content["field"] = field
    return JSONResponse(
        status_code=code,
        content=content
    )
