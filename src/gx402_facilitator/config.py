# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import logging
import os
from typing import Dict, Optional

import base58
from eth_account import Account
from pydantic import BaseModel, ConfigDict, Field
from solders.keypair import Keypair

from .networks import CustomEvmNetwork

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}; using {default}")
        return default


def _custom_evm_from_env() -> Optional[CustomEvmNetwork]:
    return CustomEvmNetwork.from_settings(
        chain_id=_env_int("CUSTOM_EVM_CHAIN_ID", 0),
        rpc_url=os.getenv("CUSTOM_EVM_RPC_URL", ""),
        token_address=os.getenv("CUSTOM_USDC_ADDRESS", ""),
        token_name=os.getenv("CUSTOM_TOKEN_NAME") or "USD Coin",
        token_version=os.getenv("CUSTOM_TOKEN_VERSION") or "2",
    )


def normalize_evm_private_key(key: str) -> str:
    return key if key.startswith("0x") else f"0x{key}"


def load_svm_keypair(private_key: str) -> Keypair:
    """Decode a base58 64-byte Solana secret key.

    Raises:
        ValueError: the key is not valid base58 or not a keypair.
    """
    try:
        return Keypair.from_bytes(base58.b58decode(private_key))
    except Exception as e:
        raise ValueError(f"Invalid base58 private key: {e}") from e


class FacilitatorConfig(BaseModel):
    """Process-wide facilitator settings, read from the environment once."""

    model_config = ConfigDict(frozen=True)

    evm_private_key: str = Field(default_factory=lambda: os.getenv("EVM_PRIVATE_KEY", ""))
    svm_private_key: str = Field(default_factory=lambda: os.getenv("SVM_PRIVATE_KEY", ""))
    svm_rpc_url: str = Field(default_factory=lambda: os.getenv("SVM_RPC_URL", ""))
    # Overrides the per-network default RPC of built-in EVM chains
    evm_rpc_url: str = Field(default_factory=lambda: os.getenv("EVM_RPC_URL", ""))
    custom_evm: Optional[CustomEvmNetwork] = Field(default_factory=_custom_evm_from_env)
    host: str = Field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = Field(default_factory=lambda: _env_int("PORT", 3000))

    @property
    def evm_enabled(self) -> bool:
        return bool(self.evm_private_key)

    @property
    def svm_enabled(self) -> bool:
        return bool(self.svm_private_key)

    @property
    def formatted_evm_private_key(self) -> str:
        return normalize_evm_private_key(self.evm_private_key)

    def describe(self) -> Dict[str, Optional[str]]:
        """Summarise enabled families and facilitator addresses without exposing keys."""
        summary: Dict[str, Optional[str]] = {
            "evm_address": None,
            "svm_address": None,
            "custom_network": self.custom_evm.caip2 if self.custom_evm else None,
        }
        if self.evm_private_key:
            try:
                summary["evm_address"] = Account.from_key(self.formatted_evm_private_key).address
            except Exception as e:
                logger.warning(f"EVM_PRIVATE_KEY could not be decoded: {e}")
        if self.svm_private_key:
            try:
                summary["svm_address"] = str(load_svm_keypair(self.svm_private_key).pubkey())
            except ValueError as e:
                logger.warning(f"SVM_PRIVATE_KEY could not be decoded: {e}")
        return summary
