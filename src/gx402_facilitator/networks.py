# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
"""Network/credential selection.

Maps a requested network identifier (legacy name such as ``base-sepolia`` or
CAIP-2 form such as ``eip155:84532``) onto a typed network target, checking
that the credential the target needs is configured.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, FrozenSet, Optional, Tuple, Union

from .errors import InvalidNetworkError, NetworkNotSupportedError, ServerNotConfiguredError

if TYPE_CHECKING:  # pragma: no cover
    from .config import FacilitatorConfig

logger = logging.getLogger(__name__)


SCHEME_EXACT = "exact"

# legacy name -> (chain id, public RPC endpoint)
_EVM_CHAINS: Dict[str, Tuple[int, str]] = {
    "base": (8453, "https://mainnet.base.org"),
    "base-sepolia": (84532, "https://sepolia.base.org"),
    "avalanche": (43114, "https://api.avax.network/ext/bc/C/rpc"),
    "avalanche-fuji": (43113, "https://api.avax-test.network/ext/bc/C/rpc"),
    "polygon": (137, "https://polygon-rpc.com"),
    "polygon-amoy": (80002, "https://rpc-amoy.polygon.technology"),
}

SOLANA_MAINNET_CAIP2 = "solana:5eykt4UsFv8P8NJdTREpY1vzqKqZKvdp"
SOLANA_DEVNET_CAIP2 = "solana:EtWTRABZaYq6iMfeYKouRu166VU2xqa1"
SOLANA_TESTNET_CAIP2 = "solana:4uhcVJyU9pJkvQyS88uRDiswHXSCkY3z"

_SVM_CHAINS: Dict[str, str] = {
    "solana": SOLANA_MAINNET_CAIP2,
    "solana-devnet": SOLANA_DEVNET_CAIP2,
    "solana-testnet": SOLANA_TESTNET_CAIP2,
}

# Fixed entries advertised by GET /supported
SUPPORTED_EVM_NETWORKS = ("base-sepolia", "base")
SUPPORTED_SVM_NETWORK = "solana-devnet"


@dataclass(frozen=True)
class BuiltinEvmNetwork:
    network: str
    chain_id: int
    rpc_url: str

    @property
    def caip2(self) -> str:
        return f"eip155:{self.chain_id}"


@dataclass(frozen=True)
class BuiltinSvmNetwork:
    network: str
    caip2: str


@dataclass(frozen=True)
class CustomEvmNetwork:
    chain_id: int
    rpc_url: str
    token_address: str
    token_name: str = "USD Coin"
    token_version: str = "2"

    @property
    def caip2(self) -> str:
        return f"eip155:{self.chain_id}"

    @property
    def identifiers(self) -> FrozenSet[str]:
        return frozenset({self.caip2, f"custom-{self.chain_id}"})

    @classmethod
    def from_settings(
        cls,
        chain_id: int,
        rpc_url: str,
        token_address: str,
        token_name: str = "USD Coin",
        token_version: str = "2",
    ) -> Optional["CustomEvmNetwork"]:
        """Return a custom network only when chain id, RPC URL and token are all set."""
        if chain_id <= 0 or not rpc_url or not token_address:
            return None
        return cls(
            chain_id=chain_id,
            rpc_url=rpc_url,
            token_address=token_address,
            token_name=token_name,
            token_version=token_version,
        )


NetworkTarget = Union[BuiltinEvmNetwork, BuiltinSvmNetwork, CustomEvmNetwork]


def _build_evm_index() -> Dict[str, BuiltinEvmNetwork]:
    index: Dict[str, BuiltinEvmNetwork] = {}
    for name, (chain_id, rpc_url) in _EVM_CHAINS.items():
        net = BuiltinEvmNetwork(network=name, chain_id=chain_id, rpc_url=rpc_url)
        index[name] = net
        index[net.caip2] = net
    return index


def _build_svm_index() -> Dict[str, BuiltinSvmNetwork]:
    index: Dict[str, BuiltinSvmNetwork] = {}
    for name, caip2 in _SVM_CHAINS.items():
        net = BuiltinSvmNetwork(network=name, caip2=caip2)
        index[name] = net
        index[caip2] = net
    return index


BUILTIN_EVM_NETWORKS: Dict[str, BuiltinEvmNetwork] = _build_evm_index()
BUILTIN_SVM_NETWORKS: Dict[str, BuiltinSvmNetwork] = _build_svm_index()


def ensure_configured(cfg: "FacilitatorConfig") -> None:
    if not cfg.evm_private_key and not cfg.svm_private_key:
        raise ServerNotConfiguredError()


def resolve_network(network: str, cfg: "FacilitatorConfig") -> NetworkTarget:
    """Resolve ``network`` to a target the configured credentials can serve.

    Built-in EVM networks are checked first, then built-in SVM networks, then
    the deployment's custom EVM network. A matching family with a missing key
    is rejected immediately instead of falling through.

    Raises:
        ServerNotConfiguredError: neither private key is configured.
        NetworkNotSupportedError: the family matched but its key is absent.
        InvalidNetworkError: nothing matched.
    """
    ensure_configured(cfg)

    evm = BUILTIN_EVM_NETWORKS.get(network)
    if evm is not None:
        if not cfg.evm_private_key:
            raise NetworkNotSupportedError("EVM")
        return evm

    svm = BUILTIN_SVM_NETWORKS.get(network)
    if svm is not None:
        if not cfg.svm_private_key:
            raise NetworkNotSupportedError("SVM")
        return svm

    custom = cfg.custom_evm
    if custom is not None and network in custom.identifiers:
        if not cfg.evm_private_key:
            raise NetworkNotSupportedError("Custom EVM")
        return custom

    raise InvalidNetworkError(network)


def align_custom_network(target: NetworkTarget, payload: Any, requirements: Any) -> Tuple[Any, Any]:
    """Rewrite a ``custom-<chainId>`` alias to the custom chain's CAIP-2 id.

    The SDK's EVM scheme only understands ``eip155:<chainId>``, so both the
    requirements and the accepted requirements inside a v2 payload (or the
    ``network`` of a v1 payload) are copied with the canonical id.
    """
    if not isinstance(target, CustomEvmNetwork) or requirements.network == target.caip2:
        return payload, requirements
    requirements = requirements.model_copy(update={"network": target.caip2})
    accepted = getattr(payload, "accepted", None)
    if accepted is not None:
        payload = payload.model_copy(
            update={"accepted": accepted.model_copy(update={"network": target.caip2})}
        )
    elif getattr(payload, "network", None) is not None:
        payload = payload.model_copy(update={"network": target.caip2})
    return payload, requirements


def apply_custom_token_defaults(target: NetworkTarget, requirements: Any) -> Any:
    """Fill the custom EVM token's address and EIP-712 ``name``/``version``.

    Returns ``requirements`` untouched for built-in networks or when the
    caller already supplied ``asset`` and both ``extra`` keys; otherwise a
    copy with the configured defaults. Caller values are never overwritten.
    """
    if not isinstance(target, CustomEvmNetwork):
        return requirements
    update: Dict[str, Any] = {}
    if not getattr(requirements, "asset", None):
        update["asset"] = target.token_address
    extra: Dict[str, Any] = dict(getattr(requirements, "extra", None) or {})
    if "name" not in extra or "version" not in extra:
        extra.setdefault("name", target.token_name)
        extra.setdefault("version", target.token_version)
        update["extra"] = extra
    if not update:
        return requirements
    logger.debug(f"Applied custom token defaults {sorted(update)} for chain {target.chain_id}")
    return requirements.model_copy(update=update)
