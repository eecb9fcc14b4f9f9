# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
"""Signer and facilitator construction on top of the x402 SDK.

A fresh facilitator is assembled per request with only the mechanism the
resolved network needs, so a request can never reach a signer for a family
it was not resolved to.

The SDK's schemes make blocking RPC calls, so the synchronous facilitator is
used and callers run it off the event loop.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional

from x402 import x402FacilitatorSync
from x402.mechanisms.evm import FacilitatorWeb3Signer
from x402.mechanisms.evm.exact import register_exact_evm_facilitator
from x402.mechanisms.svm import FacilitatorKeypairSigner
from x402.mechanisms.svm.exact import register_exact_svm_facilitator

from .config import FacilitatorConfig, load_svm_keypair, normalize_evm_private_key
from .networks import (
    BuiltinEvmNetwork,
    BuiltinSvmNetwork,
    CustomEvmNetwork,
    NetworkTarget,
)

logger = logging.getLogger(__name__)


def create_evm_signer(private_key: str, rpc_url: str) -> FacilitatorWeb3Signer:
    return FacilitatorWeb3Signer(
        private_key=normalize_evm_private_key(private_key),
        rpc_url=rpc_url,
    )


def create_svm_signer(private_key: str, rpc_url: Optional[str] = None) -> FacilitatorKeypairSigner:
    keypair = load_svm_keypair(private_key)
    return FacilitatorKeypairSigner(keypair, rpc_url=rpc_url or None)


def _networks_for(target: NetworkTarget, requested: str) -> List[str]:
    networks = [target.caip2]
    if requested not in networks:
        networks.append(requested)
    return networks


def _log_verify_failure(ctx: Any) -> None:
    logger.warning(f"Verify failure: {ctx.error}")


def _log_settle_failure(ctx: Any) -> None:
    logger.warning(f"Settle failure: {ctx.error}")


def _log_after_settle(ctx: Any) -> None:
    logger.info(f"Settled: {ctx.result}")


def build_facilitator(
    target: NetworkTarget, requested: str, cfg: FacilitatorConfig
) -> x402FacilitatorSync:
    """Return a synchronous x402 facilitator holding a signer for ``target``.

    ``requested`` is the identifier the caller used; it is registered next to
    the target's CAIP-2 id so the SDK routes the payload to this signer.
    """
    facilitator = (
        x402FacilitatorSync()
        .on_verify_failure(_log_verify_failure)
        .on_settle_failure(_log_settle_failure)
        .on_after_settle(_log_after_settle)
    )
    networks = _networks_for(target, requested)

    if isinstance(target, BuiltinEvmNetwork):
        signer = create_evm_signer(cfg.evm_private_key, cfg.evm_rpc_url or target.rpc_url)
        register_exact_evm_facilitator(facilitator, signer, networks=networks)
    elif isinstance(target, BuiltinSvmNetwork):
        signer = create_svm_signer(cfg.svm_private_key, cfg.svm_rpc_url)
        register_exact_svm_facilitator(facilitator, signer, networks=networks)
    elif isinstance(target, CustomEvmNetwork):
        signer = create_evm_signer(cfg.evm_private_key, target.rpc_url)
        register_exact_evm_facilitator(facilitator, signer, networks=networks)
    else:  # pragma: no cover - exhaustive over NetworkTarget
        raise TypeError(f"Unsupported network target: {target!r}")

    logger.debug(f"Facilitator assembled for {networks}")
    return facilitator


def svm_fee_payer(private_key: str, rpc_url: Optional[str] = None) -> str:
    """Fee payer address the SVM signer would use."""
    signer = create_svm_signer(private_key, rpc_url)
    return signer.get_addresses()[0]
