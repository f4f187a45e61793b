# app/api/responses.py
from typing import Any, Optional
from fastapi import Request
from fastapi.responses import JSONResponse
from app.schemas.base_schema import ApiResponse, Meta


def _trace_id(request: Optional[Request]) -> str:
    return getattr(request.state, "trace_id", "") if request else ""


def ok(
    data: Any,
    message: str,
    request: Optional[Request] = None,
    meta: Optional[Meta] = None,
) -> ApiResponse:
    """Wrap a successful response in the standard ApiResponse envelope."""
    return ApiResponse(
        success=True,
        data=data,
        meta=meta,
        message=message,
        errors=None,
        trace_id=_trace_id(request),
    )


def error(status_code: int, message: str, request: Optional[Request] = None, errors: Optional[list] = None) -> JSONResponse:
    """Wrap a failure in the ApiResponse envelope with the given HTTP status."""
    return JSONResponse(
        status_code=status_code,
        content=ApiResponse(
            success=False,
            data=None,
            message=message,
            errors=errors or [message],
            trace_id=_trace_id(request),
        ).model_dump(),
    )
