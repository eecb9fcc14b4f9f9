# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    configuration = "configuration"
    validation = "validation"
    unknown_network = "unknown_network"
    delegate = "delegate"


class FacilitatorError(Exception):
    """Base error rendered to callers as ``{"error": message}``."""

    kind: ErrorKind = ErrorKind.delegate
    status_code: int = 400
    default_message: str = "Invalid request"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ServerNotConfiguredError(FacilitatorError):
    kind = ErrorKind.configuration
    status_code = 500
    default_message = "Server not properly configured - missing private keys"


class NetworkNotSupportedError(FacilitatorError):
    """A known network family was requested but its private key is absent."""

    kind = ErrorKind.configuration

    def __init__(self, family: str):
        self.family = family
        super().__init__(f"{family} network not supported - no private key configured")


class InvalidNetworkError(FacilitatorError):
    kind = ErrorKind.unknown_network
    default_message = "Invalid network"

    def __init__(self, network: Optional[str] = None):
        self.network = network
        super().__init__()


class PaymentValidationError(FacilitatorError):
    kind = ErrorKind.validation


class DelegateError(FacilitatorError):
    kind = ErrorKind.delegate
