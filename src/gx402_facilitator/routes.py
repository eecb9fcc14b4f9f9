# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

from fastapi import APIRouter, Depends, Request, Response
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field, ValidationError
from x402.schemas import parse_payment_payload, parse_payment_requirements

from . import __version__, signers
from .config import FacilitatorConfig
from .errors import DelegateError, FacilitatorError, PaymentValidationError
from .networks import (
    SCHEME_EXACT,
    SUPPORTED_EVM_NETWORKS,
    SUPPORTED_SVM_NETWORK,
    align_custom_network,
    apply_custom_token_defaults,
    ensure_configured,
    resolve_network,
)

logger = logging.getLogger(__name__)


# -------------------------------
# Models
# -------------------------------


class PaymentRequest(BaseModel):
    paymentPayload: Dict[str, Any]
    paymentRequirements: Dict[str, Any]


class SupportedKind(BaseModel):
    x402Version: int = Field(1, description="x402 protocol version")
    scheme: str = SCHEME_EXACT
    network: str
    extra: Optional[Dict[str, Any]] = None


class SupportedResponse(BaseModel):
    kinds: List[SupportedKind] = Field(default_factory=list)


def get_facilitator_cfg() -> FacilitatorConfig:
    return FacilitatorConfig()


router = APIRouter(tags=["x402-facilitator"])


# -------------------------------
# Helpers
# -------------------------------


async def _parse_payment_request(request: Request) -> Tuple[Any, Any]:
    try:
        data = await request.json()
    except ValueError:
        raise PaymentValidationError("Request body must be valid JSON")
    try:
        body = PaymentRequest.model_validate(data)
        payload = parse_payment_payload(body.paymentPayload)
        requirements = parse_payment_requirements(payload.x402_version, body.paymentRequirements)
    except (ValidationError, ValueError) as e:
        raise PaymentValidationError(str(e))
    return payload, requirements


async def _run_delegate(
    op: str, request: Request, response: Response, cfg: FacilitatorConfig
) -> Dict[str, Any]:
    req_id = uuid.uuid4().hex
    request.state.request_id = req_id
    response.headers["X-Request-ID"] = req_id

    ensure_configured(cfg)
    try:
        payload, requirements = await _parse_payment_request(request)
        network = requirements.network
        target = resolve_network(network, cfg)
        payload, requirements = align_custom_network(target, payload, requirements)
        requirements = apply_custom_token_defaults(target, requirements)
        facilitator = signers.build_facilitator(target, requirements.network, cfg)
        logger.info(f"[{req_id}] {op} on {network} (x402Version={payload.x402_version})")
        # Signers block on RPC round trips
        if op == "verify":
            result = await run_in_threadpool(facilitator.verify, payload, requirements)
        else:
            result = await run_in_threadpool(facilitator.settle, payload, requirements)
    except FacilitatorError as e:
        logger.error(f"[{req_id}] {op.capitalize()} rejected: {e.message}")
        raise
    except Exception as e:
        logger.error(f"[{req_id}] {op.capitalize()} error: {e!r}")
        raise DelegateError(str(e)) from e

    return result.model_dump(by_alias=True, exclude_none=True)


# -------------------------------
# Routes
# -------------------------------


@router.get("/")
async def root() -> Dict[str, Any]:
    return {
        "message": "GX402 Facilitator Server",
        "status": "running",
        "version": __version__,
        "endpoints": {
            "verify": "POST /verify",
            "settle": "POST /settle",
            "supported": "GET /supported",
        },
    }


@router.post("/verify")
async def verify_payment(
    request: Request,
    response: Response,
    cfg: FacilitatorConfig = Depends(get_facilitator_cfg),
) -> Dict[str, Any]:
    """Verify a payment payload against its requirements."""
    return await _run_delegate("verify", request, response, cfg)


@router.post("/settle")
async def settle_payment(
    request: Request,
    response: Response,
    cfg: FacilitatorConfig = Depends(get_facilitator_cfg),
) -> Dict[str, Any]:
    """Settle a payment on-chain and return the settlement result."""
    return await _run_delegate("settle", request, response, cfg)


@router.get("/supported", response_model=SupportedResponse, response_model_exclude_none=True)
async def supported(cfg: FacilitatorConfig = Depends(get_facilitator_cfg)) -> SupportedResponse:
    kinds: List[SupportedKind] = []

    if cfg.evm_enabled:
        kinds.extend(SupportedKind(network=network) for network in SUPPORTED_EVM_NETWORKS)

    # Custom EVM networks are served by /verify and /settle but not advertised here

    if cfg.svm_enabled:
        try:
            fee_payer = signers.svm_fee_payer(cfg.svm_private_key, cfg.svm_rpc_url)
        except Exception as e:
            logger.error(f"Error creating SVM signer: {e}")
        else:
            kinds.append(
                SupportedKind(network=SUPPORTED_SVM_NETWORK, extra={"feePayer": fee_payer})
            )

    return SupportedResponse(kinds=kinds)
