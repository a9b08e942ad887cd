"""Shared test fixtures for the Synthos gateway."""

from collections.abc import Callable, Iterator
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from gateway.config import (
    AppSettings,
    DatabaseSettings,
    EtherscanSettings,
    RpcSettings,
    UpstreamSettings,
)
from gateway.main import build_app

# EIP-55 reference vectors: lowercase input -> checksummed output
CHECKSUM_VECTORS = [
    "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
    "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359",
    "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB",
    "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb",
]

WALLET = CHECKSUM_VECTORS[0]
WALLET_LOWER = WALLET.lower()

BACKEND_URL = "https://backend.test"
AI_ANALYZER_URL = "https://ai.test"
RPC_URL = "https://rpc.test/v2/key"
ETHERSCAN_URL = "https://etherscan.test/v2/api"
TENDERLY_URL = "https://tenderly.test/{key}"


class FakeUpstream:
    """Programmable httpx.MockTransport handler keyed by (method, url without query)."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        status_code: int = 200,
        text: str | None = None,
    ) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status_code, text=text)
            return httpx.Response(status_code, json=json)

        self.routes[(method, url)] = respond

    def add_handler(
        self,
        method: str,
        url: str,
        handler: Callable[[httpx.Request], httpx.Response],
    ) -> None:
        self.routes[(method, url)] = handler

    def fail(self, method: str, url: str) -> None:
        def raise_connect_error(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        self.routes[(method, url)] = raise_connect_error

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, str(request.url).split("?")[0])
        route = self.routes.get(key)
        if route is None:
            return httpx.Response(404, json={"detail": f"no fake route for {key}"})
        return route(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def fake_upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def mock_settings(tmp_path) -> AppSettings:
    """Return AppSettings pointing at fake upstreams and a temporary database."""
    return AppSettings(
        log_level="DEBUG",
        upstream=UpstreamSettings(
            backend_url=BACKEND_URL,
            ai_analyzer_url=AI_ANALYZER_URL,
            api_key="test-api-key",  # type: ignore[arg-type]
            timeout_seconds=5.0,
        ),
        rpc=RpcSettings(
            alchemy_url=RPC_URL,
            tenderly_access_key="tenderly-key",  # type: ignore[arg-type]
            tenderly_url_template=TENDERLY_URL,
        ),
        etherscan=EtherscanSettings(
            api_key="etherscan-key",  # type: ignore[arg-type]
            api_url=ETHERSCAN_URL,
        ),
        database=DatabaseSettings(path=str(tmp_path / "records.db")),
    )


@pytest.fixture
def client(mock_settings: AppSettings, fake_upstream: FakeUpstream) -> Iterator[TestClient]:
    """TestClient running the full lifespan against the fake upstream."""
    app = build_app(mock_settings, transport=fake_upstream.transport)
    with TestClient(app) as test_client:
        yield test_client
