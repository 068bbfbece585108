# healthflow/responses.py
from __future__ import annotations
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .exceptions import RecordNotFoundError, RecordValidationError

logger = logging.getLogger(__name__)

# ──────────────────────────────────────────────────────────────────────────────
# Envelope: {"ok": true, "data": ...} | {"ok": false, "message": "..."}
# ──────────────────────────────────────────────────────────────────────────────
def success(data: Any = None, message: Optional[str] = None) -> dict:
    body: dict = {"ok": True}
    if data is not None:
        body["data"] = jsonable_encoder(data)
    if message:
        body["message"] = message
    return body


def failure(status_code: int, message: str, **extra: Any) -> JSONResponse:
    body = {"ok": False, "message": message}
    body.update(jsonable_encoder(extra))
    return JSONResponse(status_code=status_code, content=body)


# ──────────────────────────────────────────────────────────────────────────────
# Handlers: erros do store → 404/400, resto do HTTP no mesmo envelope
# ──────────────────────────────────────────────────────────────────────────────
async def _not_found_handler(request: Request, exc: RecordNotFoundError) -> JSONResponse:
    return failure(status.HTTP_404_NOT_FOUND, exc.message)


async def _validation_handler(request: Request, exc: RecordValidationError) -> JSONResponse:
    return failure(status.HTTP_400_BAD_REQUEST, exc.message)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # "input" ecoa o corpo cru do cliente (pode ser bytes que não são UTF-8)
    errors = [{k: v for k, v in err.items() if k != "input"} for err in exc.errors()]
    logger.info("Requisição inválida em %s %s: %s", request.method, request.url.path, errors)
    return failure(status.HTTP_400_BAD_REQUEST, "Dados inválidos", errors=errors)


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Erro na requisição"
    response = failure(exc.status_code, message)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RecordNotFoundError, _not_found_handler)
    app.add_exception_handler(RecordValidationError, _validation_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
