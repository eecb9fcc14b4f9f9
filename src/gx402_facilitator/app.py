# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import FacilitatorConfig
from .errors import FacilitatorError
from .routes import get_facilitator_cfg, router

logger = logging.getLogger(__name__)


def _with_request_id(request: Request, resp: JSONResponse) -> JSONResponse:
    req_id = getattr(request.state, "request_id", None)
    if req_id:
        resp.headers["X-Request-ID"] = req_id
    return resp


async def facilitator_error_handler(request: Request, exc: FacilitatorError) -> JSONResponse:
    return _with_request_id(
        request,
        JSONResponse(status_code=exc.status_code, content={"error": exc.message}),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code in (404, 405):
        return JSONResponse(status_code=404, content={"error": "Endpoint not found"})
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": detail})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return _with_request_id(
        request,
        JSONResponse(status_code=500, content={"error": "Internal server error"}),
    )


def build_app(cfg: Optional[FacilitatorConfig] = None) -> FastAPI:
    """Create the facilitator app bound to one immutable configuration."""
    cfg = cfg or FacilitatorConfig()

    app = FastAPI(
        title="GX402 Facilitator",
        description="Verifies and settles x402 payments on EVM and SVM networks",
        version=__version__,
    )

    def cfg_factory() -> FacilitatorConfig:
        return cfg

    app.dependency_overrides[get_facilitator_cfg] = cfg_factory
    app.include_router(router)

    app.add_exception_handler(FacilitatorError, facilitator_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    summary = cfg.describe()
    if not cfg.evm_enabled and not cfg.svm_enabled:
        logger.warning("No EVM_PRIVATE_KEY or SVM_PRIVATE_KEY configured; /verify and /settle will fail")
    if summary["evm_address"]:
        logger.info(f"EVM facilitator account: {summary['evm_address']}")
    if summary["svm_address"]:
        logger.info(f"SVM facilitator account: {summary['svm_address']}")
    if summary["custom_network"]:
        logger.info(f"Custom EVM network enabled: {summary['custom_network']}")

    logger.info("Facilitator app initialized")
    return app
