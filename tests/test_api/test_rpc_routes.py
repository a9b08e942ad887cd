"""Route tests for the JSON-RPC and Tenderly simulation passthroughs."""

import json

from fastapi.testclient import TestClient

from gateway.config import AppSettings, RpcSettings
from gateway.main import build_app

RPC_URL = "https://rpc.test/v2/key"
TENDERLY_URL = "https://tenderly.test/tenderly-key"


def _simulate_body(method: str = "tenderly_simulateBundle") -> dict:
    return {
        "jsonrpc": "2.0",
        "id": 1,
        "method": method,
        "params": [[{"from": "0x1", "to": "0x2", "data": "0x"}], "latest"],
    }


class TestRpcPassthrough:
    """POST and GET /api/rpc."""

    def test_post_forwards_payload_unchanged(self, client: TestClient, fake_upstream) -> None:
        fake_upstream.add("POST", RPC_URL, json={"jsonrpc": "2.0", "id": 1, "result": "0x10"})
        payload = {"jsonrpc": "2.0", "id": 1, "method": "eth_blockNumber", "params": []}

        response = client.post("/api/rpc", json=payload)

        assert response.status_code == 200
        assert response.json() == {"jsonrpc": "2.0", "id": 1, "result": "0x10"}
        assert json.loads(fake_upstream.last_request.content) == payload
        assert "X-API-Key" not in fake_upstream.last_request.headers

    def test_post_batch_is_forwarded(self, client: TestClient, fake_upstream) -> None:
        fake_upstream.add("POST", RPC_URL, json=[{"id": 1}, {"id": 2}])
        batch = [{"id": 1, "method": "eth_chainId"}, {"id": 2, "method": "eth_gasPrice"}]

        response = client.post("/api/rpc", json=batch)

        assert response.json() == [{"id": 1}, {"id": 2}]
        assert json.loads(fake_upstream.last_request.content) == batch

    def test_get_forwards_query_string(self, client: TestClient, fake_upstream) -> None:
        fake_upstream.add("GET", RPC_URL, json={"ok": True})

        response = client.get("/api/rpc", params={"module": "proxy", "action": "eth_blockNumber"})

        assert response.status_code == 200
        params = fake_upstream.last_request.url.params
        assert params["module"] == "proxy"
        assert params["action"] == "eth_blockNumber"

    def test_upstream_error_reports_reason_and_details(
        self, client: TestClient, fake_upstream
    ) -> None:
        fake_upstream.add("POST", RPC_URL, status_code=429, text="rate limited")

        response = client.post("/api/rpc", json={"method": "eth_call"})

        assert response.status_code == 429
        assert response.json() == {
            "error": "RPC error: Too Many Requests",
            "details": "rate limited",
        }

    def test_transport_failure_is_500(self, client: TestClient, fake_upstream) -> None:
        fake_upstream.fail("POST", RPC_URL)

        response = client.post("/api/rpc", json={"method": "eth_call"})

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}

    def test_malformed_json_is_400(self, client: TestClient) -> None:
        response = client.post(
            "/api/rpc", content=b"{oops", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request body"}

    def test_unconfigured_rpc_is_500(self, mock_settings: AppSettings, fake_upstream) -> None:
        settings = mock_settings.model_copy(
            update={"rpc": RpcSettings(alchemy_url="", tenderly_access_key="k")}  # type: ignore[arg-type]
        )
        app = build_app(settings, transport=fake_upstream.transport)

        with TestClient(app) as client:
            response = client.post("/api/rpc", json={"method": "eth_call"})

        assert response.status_code == 500
        assert response.json() == {"error": "RPC endpoint is not configured"}
        assert fake_upstream.requests == []


class TestTenderlyRpc:
    """POST /api/tenderly-rpc."""

    def test_simulation_is_forwarded(self, client: TestClient, fake_upstream) -> None:
        result = {
            "id": 0,
            "jsonrpc": "2.0",
            "result": [{"status": True, "gasUsed": "0x5208", "logs": []}],
        }
        fake_upstream.add("POST", TENDERLY_URL, json=result)

        response = client.post("/api/tenderly-rpc", json=_simulate_body())

        assert response.status_code == 200
        assert response.json() == result
        sent = json.loads(fake_upstream.last_request.content)
        assert sent == {
            "id": 0,
            "jsonrpc": "2.0",
            "method": "tenderly_simulateBundle",
            "params": _simulate_body()["params"],
        }

    def test_failed_simulation_is_still_relayed(self, client: TestClient, fake_upstream) -> None:
        result = {
            "result": [
                {"status": False, "gasUsed": "not-hex", "error": "reverted", "revertReason": "x"}
            ]
        }
        fake_upstream.add("POST", TENDERLY_URL, json=result)

        response = client.post("/api/tenderly-rpc", json=_simulate_body())

        assert response.status_code == 200
        assert response.json() == result

    def test_other_methods_are_rejected(self, client: TestClient, fake_upstream) -> None:
        response = client.post("/api/tenderly-rpc", json=_simulate_body("eth_call"))

        assert response.status_code == 400
        assert response.json() == {
            "error": "Only tenderly_simulateBundle method is supported"
        }
        assert fake_upstream.requests == []

    def test_upstream_error(self, client: TestClient, fake_upstream) -> None:
        fake_upstream.add("POST", TENDERLY_URL, status_code=401, json={"message": "bad key"})

        response = client.post("/api/tenderly-rpc", json=_simulate_body())

        assert response.status_code == 401
        body = response.json()
        assert body["error"] == "Tenderly RPC error: Unauthorized"
        assert json.loads(body["details"]) == {"message": "bad key"}

    def test_missing_access_key_is_500(self, mock_settings: AppSettings, fake_upstream) -> None:
        settings = mock_settings.model_copy(
            update={"rpc": RpcSettings(alchemy_url=RPC_URL, tenderly_access_key="")}  # type: ignore[arg-type]
        )
        app = build_app(settings, transport=fake_upstream.transport)

        with TestClient(app) as client:
            response = client.post("/api/tenderly-rpc", json=_simulate_body())

        assert response.status_code == 500
        assert response.json() == {"error": "Tenderly configuration missing"}
