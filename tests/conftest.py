# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
import os
import sys
import time
from typing import Any, Callable, Dict, List, Tuple

import pytest


def _add_src_to_syspath() -> None:
    src = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
    if src not in sys.path:
        sys.path.insert(0, src)


_add_src_to_syspath()


# Import after adding to syspath
from fastapi.testclient import TestClient
from x402.schemas import SettleResponse, VerifyResponse

from gx402_facilitator import FacilitatorConfig, build_app
from gx402_facilitator.networks import CustomEvmNetwork


PAYER = "0x" + "b" * 40
PAY_TO = "0x" + "c" * 40
TX_HASH = "0x" + "f" * 64

FACILITATOR_ENV_VARS = (
    "EVM_PRIVATE_KEY",
    "SVM_PRIVATE_KEY",
    "SVM_RPC_URL",
    "EVM_RPC_URL",
    "CUSTOM_EVM_RPC_URL",
    "CUSTOM_EVM_CHAIN_ID",
    "CUSTOM_USDC_ADDRESS",
    "CUSTOM_TOKEN_NAME",
    "CUSTOM_TOKEN_VERSION",
    "HOST",
    "PORT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    """Keep developer credentials out of the tests."""
    for name in FACILITATOR_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class FakeFacilitator:
    """Stands in for x402FacilitatorSync; records every delegated call."""

    def __init__(self) -> None:
        self.verify_calls: List[Tuple[Any, Any]] = []
        self.settle_calls: List[Tuple[Any, Any]] = []
        self.error: Exception = None  # type: ignore[assignment]
        # seconds each call blocks, like an RPC round trip
        self.delay = 0.0

    def verify(self, payload, requirements):
        self.verify_calls.append((payload, requirements))
        time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return VerifyResponse(is_valid=True, payer=PAYER)

    def settle(self, payload, requirements):
        self.settle_calls.append((payload, requirements))
        time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return SettleResponse(
            success=True,
            payer=PAYER,
            transaction=TX_HASH,
            network=requirements.network,
        )


@pytest.fixture
def fake_facilitator(monkeypatch) -> FakeFacilitator:
    """Patch facilitator construction; ``built`` records (target, requested)."""
    fake = FakeFacilitator()
    fake.built = []  # type: ignore[attr-defined]

    def _build(target, requested, cfg):
        fake.built.append((target, requested))  # type: ignore[attr-defined]
        return fake

    monkeypatch.setattr("gx402_facilitator.signers.build_facilitator", _build)
    return fake


@pytest.fixture
def custom_network() -> CustomEvmNetwork:
    return CustomEvmNetwork(
        chain_id=8453,
        rpc_url="https://rpc.custom.example.com",
        token_address="0x" + "d" * 40,
        token_name="Custom Dollar",
        token_version="1",
    )


@pytest.fixture
def make_client() -> Callable[..., TestClient]:
    """Build a TestClient around an explicit FacilitatorConfig."""

    def _make(**cfg_kwargs: Any) -> TestClient:
        cfg_kwargs.setdefault("custom_evm", None)
        cfg = FacilitatorConfig(**cfg_kwargs)
        return TestClient(build_app(cfg), raise_server_exceptions=False)

    return _make


@pytest.fixture
def v2_requirements() -> Dict[str, Any]:
    return {
        "scheme": "exact",
        "network": "eip155:84532",
        "asset": "0x036CbD53842c5426634e7929541eC2318f3dCF7e",
        "amount": "1000000",
        "payTo": PAY_TO,
        "maxTimeoutSeconds": 300,
        "extra": {"name": "USDC", "version": "2"},
    }


@pytest.fixture
def v2_body(v2_requirements) -> Dict[str, Any]:
    return make_v2_body(v2_requirements)


@pytest.fixture
def body_for(v2_requirements) -> Callable[..., Dict[str, Any]]:
    """V2 body for ``network``, with optional overrides of the requirements."""

    def _body(network: str, **overrides: Any) -> Dict[str, Any]:
        return make_v2_body({**v2_requirements, "network": network, **overrides})

    return _body


def make_v2_body(requirements: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "paymentPayload": {
            "x402Version": 2,
            "payload": {
                "signature": "0x" + "e" * 130,
                "authorization": {
                    "from": PAYER,
                    "to": PAY_TO,
                    "value": requirements["amount"],
                    "validAfter": "0",
                    "validBefore": "9999999999",
                    "nonce": "0x" + "0" * 64,
                },
            },
            "accepted": requirements,
        },
        "paymentRequirements": requirements,
    }


@pytest.fixture
def v1_body() -> Dict[str, Any]:
    return {
        "paymentPayload": {
            "x402Version": 1,
            "scheme": "exact",
            "network": "base-sepolia",
            "payload": {
                "signature": "0x" + "e" * 130,
                "authorization": {"from": PAYER, "to": PAY_TO, "value": "1000000"},
            },
        },
        "paymentRequirements": {
            "scheme": "exact",
            "network": "base-sepolia",
            "maxAmountRequired": "1000000",
            "resource": "https://api.example.com/premium",
            "payTo": PAY_TO,
            "maxTimeoutSeconds": 300,
            "asset": "0x036CbD53842c5426634e7929541eC2318f3dCF7e",
            "extra": {"name": "USDC", "version": "2"},
        },
    }
