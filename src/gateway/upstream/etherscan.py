"""Etherscan multichain API client for account transaction lists."""

from typing import Any

from gateway.config import EtherscanSettings
from gateway.exceptions import ConfigurationError, UpstreamError
from gateway.logging import get_logger
from gateway.upstream.client import UpstreamClient

logger = get_logger(__name__)


class EtherscanClient:
    """Fetches normal transactions and ERC-20 token transfers for an address."""

    def __init__(self, client: UpstreamClient, settings: EtherscanSettings) -> None:
        self._client = client
        self._settings = settings

    def _params(self, chain_id: int, action: str, address: str) -> dict[str, Any]:
        api_key = self._settings.api_key.get_secret_value()
        if not api_key:
            raise ConfigurationError("Etherscan API key is not configured")
        return {
            "chainid": chain_id,
            "module": "account",
            "action": action,
            "address": address,
            "startblock": 0,
            "endblock": 99999999,
            "page": 1,
            "offset": self._settings.page_size,
            "sort": "desc",
            "apikey": api_key,
        }

    async def fetch_transactions(self, chain_id: int, address: str) -> list[dict]:
        """Return the account's normal transactions, newest first.

        A non-"1" status from Etherscan is an error for this call.
        """
        data = await self._client.get_json(
            self._settings.api_url,
            params=self._params(chain_id, "txlist", address),
        )
        if not isinstance(data, dict) or data.get("status") != "1":
            message = data.get("message") if isinstance(data, dict) else None
            logger.warning(
                "etherscan_txlist_failed", chain_id=chain_id, message=message
            )
            raise UpstreamError(message or "Failed to fetch transactions")
        return list(data.get("result") or [])

    async def fetch_token_transfers(self, chain_id: int, address: str) -> list[dict]:
        """Return the account's ERC-20 transfers; an empty list when Etherscan reports none."""
        data = await self._client.get_json(
            self._settings.api_url,
            params=self._params(chain_id, "tokentx", address),
        )
        if not isinstance(data, dict) or data.get("status") != "1":
            return []
        return list(data.get("result") or [])
