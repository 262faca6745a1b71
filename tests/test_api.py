from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from conftest import TOKEN, FakeChain
from mintkit.main import app
from mintkit.routes.mint import get_context
from mintkit.services.builder import TransactionBuilder
from mintkit.services.context import MintContext
from mintkit.services.executor import MintExecutor
from mintkit.services.gas import GasStrategy
from mintkit.services.registry import default_registry
from mintkit.services.rpc import RpcError
from mintkit.utils.address import normalize_address

PRIVATE_KEY = "0x" + "11" * 32


def _context(chain: FakeChain, signer: bool = True) -> MintContext:
    executor = MintExecutor.from_private_key(chain, PRIVATE_KEY, 1) if signer else None
    return MintContext(
        client=chain,
        registry=default_registry(chain),
        gas=GasStrategy(chain),
        builder=TransactionBuilder(chain, sender=executor.address if executor else None),
        executor=executor,
        min_poll_interval=0.25,
    )


@pytest.fixture
def api(chain):
    ctx = _context(chain)
    app.dependency_overrides[get_context] = lambda: ctx
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def readonly_api(chain):
    ctx = _context(chain, signer=False)
    app.dependency_overrides[get_context] = lambda: ctx
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealthEndpoint:
    def test_health_returns_ok(self):
        resp = TestClient(app).get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"


class TestContracts:
    def test_platform_list(self, api):
        resp = api.get("/v1/platforms")
        assert resp.status_code == 200
        platforms = resp.json()["platforms"]
        assert platforms[0] == "nfts2me"
        assert platforms[-1] == "generic"

    def test_analyze_generic(self, api, chain):
        chain.set(TOKEN, "name()", "Plain")
        chain.set(TOKEN, "cost()", 10_000_000_000_000_000)

        resp = api.get(f"/v1/contracts/{TOKEN}")

        assert resp.status_code == 200
        data = resp.json()
        assert data["platform"] == "generic"
        assert data["mint_price_per_token"] == "10000000000000000"
        assert data["total_value_one"] == "10000000000000000"
        assert data["address"] == normalize_address(TOKEN)

    def test_invalid_address(self, api):
        resp = api.get("/v1/contracts/0x1234")
        assert resp.status_code == 400
        assert "Invalid EVM address" in resp.json()["error"]

    def test_unknown_platform(self, api):
        resp = api.get(f"/v1/contracts/{TOKEN}", params={"platform": "foundation"})
        assert resp.status_code == 400

    def test_chain_mismatch(self, api):
        resp = api.get(f"/v1/contracts/{TOKEN}", params={"chain_id": 137})
        assert resp.status_code == 400


class TestGas:
    def test_turbo_quote(self, api):
        resp = api.get("/v1/gas", params={"turbo": "true"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["skip_simulation"] is True
        assert data["fees"]["max_priority_fee_per_gas"] == "20000000000"


class TestMint:
    def test_prepare(self, api, chain):
        chain.set(TOKEN, "price()", 10_000_000_000_000_000)

        resp = api.post("/v1/mint/prepare", json={"address": TOKEN, "quantity": 2})

        assert resp.status_code == 200
        tx = resp.json()["transaction"]
        assert tx["value"] == "20000000000000000"
        assert tx["data"] == "0xa0712d68" + "0" * 63 + "2"
        assert tx["gas_limit"] == 120_000

    def test_prepare_simulation_failure(self, api, chain):
        chain.eth_call.side_effect = RpcError("execution reverted", code=3, data="0x646cf558")
        resp = api.post("/v1/mint/prepare", json={"address": TOKEN})
        assert resp.status_code == 422
        assert "Paused()" in resp.json()["error"]

    def test_execute(self, api, chain):
        resp = api.post(
            "/v1/mint/execute", json={"address": TOKEN, "quantity": 1, "priceWei": 5}
        )
        assert resp.status_code == 200
        assert resp.json()["status"] == "success"

    def test_execute_reverted(self, api, chain):
        chain.wait_for_receipt.return_value = {"status": "0x0", "blockNumber": "0x1"}
        resp = api.post("/v1/mint/execute", json={"address": TOKEN})
        assert resp.status_code == 409

    def test_execute_without_signer(self, readonly_api):
        resp = readonly_api.post("/v1/mint/execute", json={"address": TOKEN})
        assert resp.status_code == 503

    def test_zero_quantity_rejected(self, api):
        resp = api.post("/v1/mint/prepare", json={"address": TOKEN, "quantity": 0})
        assert resp.status_code == 422


class TestMonitor:
    def test_idle_status(self, api):
        resp = api.get("/v1/monitor")
        assert resp.status_code == 200
        assert resp.json() == {"state": "idle", "session": None}

    def test_interval_below_minimum(self, api):
        resp = api.post(
            "/v1/monitor/start", json={"address": TOKEN, "intervalSeconds": 0.1}
        )
        assert resp.status_code == 400

    def test_stop_without_session(self, api):
        resp = api.post("/v1/monitor/stop")
        assert resp.json() == {"stopped": False}

    def test_start_requires_signer(self, readonly_api):
        resp = readonly_api.post("/v1/monitor/start", json={"address": TOKEN})
        assert resp.status_code == 503

    def test_start_rejects_unknown_platform(self, api):
        resp = api.post(
            "/v1/monitor/start", json={"address": TOKEN, "platform": "foundation"}
        )
        assert resp.status_code == 400
        assert "Unknown platform" in resp.json()["error"]
