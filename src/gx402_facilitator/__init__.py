# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
"""GX402 Facilitator

FastAPI service that verifies and settles x402 payments through the x402 SDK,
picking the EVM or SVM signer from the configured credentials.

Usage:
    from gx402_facilitator import build_app, FacilitatorConfig

    app = build_app(FacilitatorConfig())
"""

__version__ = "1.0.0"

from .app import build_app
from .config import FacilitatorConfig
from .errors import (
    DelegateError,
    ErrorKind,
    FacilitatorError,
    InvalidNetworkError,
    NetworkNotSupportedError,
    PaymentValidationError,
    ServerNotConfiguredError,
)
from .networks import (
    BuiltinEvmNetwork,
    BuiltinSvmNetwork,
    CustomEvmNetwork,
    NetworkTarget,
    resolve_network,
)
from .routes import SupportedKind, SupportedResponse, get_facilitator_cfg, router

__all__ = [
    "build_app",
    "router",
    "FacilitatorConfig",
    "get_facilitator_cfg",
    "SupportedKind",
    "SupportedResponse",
    "BuiltinEvmNetwork",
    "BuiltinSvmNetwork",
    "CustomEvmNetwork",
    "NetworkTarget",
    "resolve_network",
    "ErrorKind",
    "FacilitatorError",
    "ServerNotConfiguredError",
    "NetworkNotSupportedError",
    "InvalidNetworkError",
    "PaymentValidationError",
    "DelegateError",
]
