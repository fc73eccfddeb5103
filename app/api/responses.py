"""
Uniform JSON envelope: {success, message, data?, meta?}
"""
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success(data: Any = None, message: str = "Success", status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"success": True, "message": message, "data": data}),
    )


def success_list(items: list, message: str = "Success", meta: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=200,
        content=jsonable_encoder({
            "success": True,
            "message": message,
            "data": items,
            "meta": {"count": len(items), **(meta or {})},
        }),
    )


def success_message(message: str, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": True, "message": message})


def created(data: Any, message: str = "Created successfully") -> JSONResponse:
    return success(data, message, status_code=201)


def error(
    message: str,
    status_code: int = 500,
    error_type: str | None = None,
    errors: list | None = None,
    **extra,
) -> JSONResponse:
    content = {"success": False, "message": message}
    if error_type:
        content["errorType"] = error_type
    if errors:
        content["errors"] = errors
    content.update(extra)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))
