"""HTTP adapter (FastAPI).

Exposes the price calculator and both payment reconciliation paths.
Every JSON response uses the ``{"success": ..., "data" | "error": ...}``
envelope, except the webhook acknowledgement which the gateway only
inspects for its status code.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from starlette.concurrency import run_in_threadpool

from quikprint.application.reconcile_payment import SIGNATURE_HEADER
from quikprint.domain.exceptions import (
    AccessDeniedError,
    AuthenticationError,
    ConflictError,
    DomainException,
    EntityNotFoundError,
    UpstreamError,
    ValidationError,
)
from quikprint.infrastructure.bootstrap import Services, build_services
from quikprint.infrastructure.config import Settings

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[DomainException], int], ...] = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AccessDeniedError, 403),
    (EntityNotFoundError, 404),
    (ConflictError, 409),
    (UpstreamError, 502),
)


def status_for(exc: DomainException) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 400


def success(data: Any, status_code: int = 200) -> JSONResponse:
    if dataclasses.is_dataclass(data):
        data = dataclasses.asdict(data)
    return JSONResponse(status_code=status_code, content={"success": True, "data": data})


def failure(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


class CalculatePriceRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(alias="productId", min_length=1)
    configuration: dict[str, Any] = Field(default_factory=dict)
    quantity: int = 0


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(DomainException)
    async def domain_error(request: Request, exc: DomainException) -> JSONResponse:
        status = status_for(exc)
        if status >= 500:
            logger.warning("%s %s failed upstream: %s", request.method, request.url.path, exc)
        return failure(str(exc), status)

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = first.get("msg", "Invalid request")
        return failure(f"{location}: {message}" if location else message, 400)

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return failure("Internal server error", 500)


def register_routes(app: FastAPI, services: Services) -> None:

    @app.post("/api/pricing/calculate")
    def calculate_price(req: CalculatePriceRequest) -> JSONResponse:
        dto = services.calculate_price.handle(req.product_id, req.configuration, req.quantity)
        return success(dto)

    @app.get("/api/payments/verify/{reference}")
    def verify_payment(reference: str) -> JSONResponse:
        dto = services.reconciler.verify(reference)
        return success(
            {
                "status": dto.gateway_status,
                "reference": dto.reference,
                "payment_status": dto.payment_status,
                "order_status": dto.order_status,
            }
        )

    @app.post("/api/payments/webhook")
    async def payment_webhook(request: Request) -> JSONResponse:
        body = await request.body()
        signature = request.headers.get(SIGNATURE_HEADER)
        try:
            outcome = await run_in_threadpool(
                services.reconciler.handle_webhook, body, signature
            )
        except AuthenticationError:
            return JSONResponse(status_code=401, content={"status": "unauthorized"})
        except ValidationError:
            return JSONResponse(status_code=400, content={"status": "bad request"})
        logger.debug("webhook outcome=%s", outcome.value)
        return JSONResponse({"status": "ok"})


def create_app(services: Services | None = None, settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application.

    Tests pass a ready ``Services`` bundle; the ``serve`` command passes
    the loaded settings and lets this function wire everything.
    """
    if services is None:
        services = build_services(settings or Settings.from_env())

    app = FastAPI(title="QuikPrint")
    register_exception_handlers(app)
    register_routes(app, services)
    return app
