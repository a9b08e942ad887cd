"""Tests for UpstreamClient and BackendEndpoints.

Outbound traffic goes through httpx.MockTransport, so no network is used.
"""

import json

import httpx
import pytest

from gateway.config import UpstreamSettings
from gateway.exceptions import UpstreamError
from gateway.upstream.client import UpstreamClient
from gateway.upstream.endpoints import BackendEndpoints

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def upstream_settings() -> UpstreamSettings:
    return UpstreamSettings(
        backend_url="https://backend.test/",
        ai_analyzer_url="https://ai.test",
        api_key="secret-key",  # type: ignore[arg-type]
    )


def _client_for(
    settings: UpstreamSettings, handler
) -> tuple[UpstreamClient, list[httpx.Request]]:
    """Return a client whose transport records requests and answers with ``handler``."""
    seen: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    return UpstreamClient(settings, transport=httpx.MockTransport(record)), seen


# ---------------------------------------------------------------------------
# UpstreamClient
# ---------------------------------------------------------------------------


class TestUpstreamClientLifecycle:
    """connect/close behaviour."""

    def test_http_before_connect_raises(self, upstream_settings: UpstreamSettings) -> None:
        client = UpstreamClient(upstream_settings)

        with pytest.raises(RuntimeError, match="not connected"):
            _ = client.http

    @pytest.mark.asyncio
    async def test_connect_is_idempotent(self, upstream_settings: UpstreamSettings) -> None:
        client = UpstreamClient(upstream_settings)
        await client.connect()
        first = client.http
        await client.connect()

        assert client.http is first
        await client.close()

    @pytest.mark.asyncio
    async def test_close_without_connect_is_noop(
        self, upstream_settings: UpstreamSettings
    ) -> None:
        client = UpstreamClient(upstream_settings)
        await client.close()


class TestUpstreamClientRequests:
    """JSON decoding, error mapping and authentication headers."""

    @pytest.mark.asyncio
    async def test_get_json_returns_body(self, upstream_settings: UpstreamSettings) -> None:
        client, _ = _client_for(
            upstream_settings, lambda r: httpx.Response(200, json={"balance": "1.5"})
        )

        async with client:
            data = await client.get_json("https://backend.test/accounts/balance/0x1")

        assert data == {"balance": "1.5"}

    @pytest.mark.asyncio
    async def test_authenticated_call_sends_api_key(
        self, upstream_settings: UpstreamSettings
    ) -> None:
        client, seen = _client_for(upstream_settings, lambda r: httpx.Response(200, json={}))

        async with client:
            await client.post_json("https://backend.test/action/deposit", {"a": 1}, authenticated=True)

        assert seen[0].headers["X-API-Key"] == "secret-key"
        assert seen[0].headers["Accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_unauthenticated_call_omits_api_key(
        self, upstream_settings: UpstreamSettings
    ) -> None:
        client, seen = _client_for(upstream_settings, lambda r: httpx.Response(200, json={}))

        async with client:
            await client.get_json("https://ai.test/api/analyze/0x1")

        assert "X-API-Key" not in seen[0].headers

    def test_no_api_key_means_no_header(self) -> None:
        client = UpstreamClient(UpstreamSettings(api_key=""))  # type: ignore[arg-type]
        assert client.backend_headers == {}

    @pytest.mark.asyncio
    async def test_post_json_sends_payload(self, upstream_settings: UpstreamSettings) -> None:
        client, seen = _client_for(upstream_settings, lambda r: httpx.Response(200, json={"ok": True}))

        async with client:
            await client.post_json("https://backend.test/action/deposit", {"amount": 100})

        assert seen[0].method == "POST"
        assert json.loads(seen[0].content) == {"amount": 100}

    @pytest.mark.asyncio
    async def test_error_status_with_json_body(self, upstream_settings: UpstreamSettings) -> None:
        client, _ = _client_for(
            upstream_settings,
            lambda r: httpx.Response(400, json={"message": "amount too small"}),
        )

        async with client:
            with pytest.raises(UpstreamError) as exc_info:
                await client.post_json("https://backend.test/action/deposit", {})

        error = exc_info.value
        assert error.status_code == 400
        assert error.reason == "Bad Request"
        assert error.body == {"message": "amount too small"}
        assert error.responded

    @pytest.mark.asyncio
    async def test_error_status_with_text_body(self, upstream_settings: UpstreamSettings) -> None:
        client, _ = _client_for(
            upstream_settings, lambda r: httpx.Response(503, text="maintenance")
        )

        async with client:
            with pytest.raises(UpstreamError) as exc_info:
                await client.get_json("https://backend.test/protocol/protocols")

        error = exc_info.value
        assert error.status_code == 503
        assert error.body is None
        assert error.details == "maintenance"

    @pytest.mark.asyncio
    async def test_success_with_invalid_json_raises(
        self, upstream_settings: UpstreamSettings
    ) -> None:
        client, _ = _client_for(upstream_settings, lambda r: httpx.Response(200, text="<html>"))

        async with client:
            with pytest.raises(UpstreamError) as exc_info:
                await client.get_json("https://backend.test/protocol/protocols")

        assert exc_info.value.status_code == 500
        assert not exc_info.value.responded

    @pytest.mark.asyncio
    async def test_transport_error_becomes_upstream_error(
        self, upstream_settings: UpstreamSettings
    ) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client, _ = _client_for(upstream_settings, refuse)

        async with client:
            with pytest.raises(UpstreamError) as exc_info:
                await client.get_json("https://backend.test/protocol/protocols")

        assert exc_info.value.status_code == 500
        assert not exc_info.value.responded
        assert "connection refused" in exc_info.value.message


# ---------------------------------------------------------------------------
# BackendEndpoints
# ---------------------------------------------------------------------------


class TestBackendEndpoints:
    """URL construction from configured base URLs."""

    def test_trailing_slash_is_stripped(self, upstream_settings: UpstreamSettings) -> None:
        endpoints = BackendEndpoints(upstream_settings)
        assert endpoints.deposit() == "https://backend.test/action/deposit"

    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("looping_deposit", "/action/looping-deposit"),
            ("withdraw", "/action/withdraw"),
            ("withdraw_tracking", "/action/withdraw-with-tracking"),
            ("update_deposit_tx", "/action/update-deposit-transaction"),
            ("update_withdraw_tx", "/action/update-withdraw-transaction"),
            ("minimum_deposits", "/protocol/minimum-deposits"),
            ("protocol_pairs", "/protocol/protocol-pairs"),
            ("protocol_pairs_apy", "/protocol/protocol-pairs-apy"),
            ("protocols", "/protocol/protocols"),
        ],
    )
    def test_fixed_paths(
        self, upstream_settings: UpstreamSettings, method: str, path: str
    ) -> None:
        endpoints = BackendEndpoints(upstream_settings)
        assert getattr(endpoints, method)() == "https://backend.test" + path

    def test_address_paths(self, upstream_settings: UpstreamSettings) -> None:
        endpoints = BackendEndpoints(upstream_settings)
        address = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"

        assert endpoints.balance(address) == f"https://backend.test/accounts/balance/{address}"
        assert endpoints.holdings(address) == f"https://backend.test/accounts/holdings/{address}"
        assert endpoints.ai_analyzer(address) == f"https://ai.test/api/analyze/{address}"

    def test_protocol_id_is_quoted(self, upstream_settings: UpstreamSettings) -> None:
        endpoints = BackendEndpoints(upstream_settings)
        assert endpoints.protocol_pairs_apy_single("aave v3/x") == (
            "https://backend.test/protocol/protocol-pairs-apy/aave%20v3%2Fx"
        )
