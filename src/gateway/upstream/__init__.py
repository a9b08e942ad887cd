"""Upstream HTTP layer -- Synthos backend, RPC providers and Etherscan via httpx."""

from gateway.upstream.client import UpstreamClient
from gateway.upstream.endpoints import BackendEndpoints
from gateway.upstream.etherscan import EtherscanClient

__all__ = ["BackendEndpoints", "EtherscanClient", "UpstreamClient"]
