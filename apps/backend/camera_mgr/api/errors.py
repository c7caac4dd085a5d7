from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

NOT_FOUND_REASON = "Resource was not found."


def error_body(reason: str) -> dict[str, object]:
    return {"status": "error", "reason": reason}


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    reason = NOT_FOUND_REASON if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(error_body(reason), status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    body = error_body("Request body or parameters are invalid.")
    body["errors"] = [
        {"loc": list(error.get("loc", ())), "msg": str(error.get("msg", ""))}
        for error in exc.errors()
    ]
    return JSONResponse(body, status_code=422)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
