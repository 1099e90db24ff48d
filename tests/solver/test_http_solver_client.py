"""
Tests for HttpSolverClient.

The HTTP layer is mocked; no solver service is needed.
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from alloyshare.config import SolverConfig
from alloyshare.core.solver import HttpSolverClient
from alloyshare.models.instance import SolverRequest
from alloyshare.utils.exceptions import TransportError


@pytest.fixture
def request_payload() -> SolverRequest:
    return SolverRequest(
        source_text="sig A {}\nrun {}",
        command_index=0,
        is_private=True,
        last_model_id="model_prev",
    )


@pytest.fixture
async def client():
    solver = HttpSolverClient(base_url="http://solver.test", timeout=5.0)
    yield solver
    await solver.close()


@pytest.mark.unit
@pytest.mark.asyncio
class TestHttpSolverClient:
    """Request encoding, reply parsing and error mapping."""

    async def test_get_instances_posts_wire_payload(self, client, request_payload):
        reply = httpx.Response(
            200,
            json={
                "newModelId": "model_new",
                "instances": [{"unsat": False, "instance": [{"atoms": []}]}, {"unsat": True}],
            },
        )

        with patch.object(client.client, "post", AsyncMock(return_value=reply)) as post:
            result = await client.get_instances(request_payload)

        post.assert_awaited_once_with(
            "/getInstances",
            json={
                "sourceText": "sig A {}\nrun {}",
                "commandIndex": 0,
                "isPrivateSession": True,
                "lastDerivationId": "model_prev",
            },
        )
        assert result.new_model_id == "model_new"
        assert len(result.instances) == 2
        assert result.instances[0].satisfiable
        assert result.instances[1].unsat

    async def test_next_instances_uses_next_path(self, client, request_payload):
        reply = httpx.Response(200, json={"newModelId": "model_new", "unsat": True})

        with patch.object(client.client, "post", AsyncMock(return_value=reply)) as post:
            result = await client.next_instances(request_payload)

        assert post.await_args.args[0] == "/nextInstances"
        assert len(result.instances) == 1
        assert result.first.unsat

    async def test_flat_error_payload(self, client, request_payload):
        reply = httpx.Response(
            200,
            json={"alloy_error": True, "msg": "Parse error", "line": 4, "column": 2},
        )

        with patch.object(client.client, "post", AsyncMock(return_value=reply)):
            result = await client.get_instances(request_payload)

        error = result.first.alloy_error
        assert error.msg == "Parse error"
        assert error.zero_based_range() == (3, 1, 3, 1)
        assert result.first.satisfiable is False

    async def test_timeout_raises_transport_error(self, client, request_payload):
        with patch.object(
            client.client, "post", AsyncMock(side_effect=httpx.ReadTimeout("slow"))
        ):
            with pytest.raises(TransportError) as exc_info:
                await client.get_instances(request_payload)

        assert "did not answer" in exc_info.value.message

    async def test_connection_error_raises_transport_error(self, client, request_payload):
        with patch.object(
            client.client, "post", AsyncMock(side_effect=httpx.ConnectError("refused"))
        ):
            with pytest.raises(TransportError):
                await client.get_instances(request_payload)

    async def test_http_error_status(self, client, request_payload):
        reply = httpx.Response(503, text="unavailable")

        with patch.object(client.client, "post", AsyncMock(return_value=reply)):
            with pytest.raises(TransportError) as exc_info:
                await client.get_instances(request_payload)

        assert exc_info.value.context["status_code"] == 503

    async def test_invalid_json(self, client, request_payload):
        reply = httpx.Response(200, text="<html>not json</html>")

        with patch.object(client.client, "post", AsyncMock(return_value=reply)):
            with pytest.raises(TransportError):
                await client.get_instances(request_payload)

    async def test_malformed_envelope(self, client, request_payload):
        reply = httpx.Response(200, json=["not", "an", "object"])

        with patch.object(client.client, "post", AsyncMock(return_value=reply)):
            with pytest.raises(TransportError):
                await client.get_instances(request_payload)

    async def test_from_config(self):
        config = SolverConfig(
            url="http://solver:9000", next_instances_path="/next", timeout=2.5
        )

        solver = HttpSolverClient.from_config(config)

        assert solver.base_url == "http://solver:9000"
        assert solver.get_instances_path == "/getInstances"
        assert solver.next_instances_path == "/next"
        assert solver.timeout == 2.5

    async def test_context_manager_closes_client(self):
        async with HttpSolverClient(base_url="http://solver.test") as solver:
            _ = solver.client
            assert solver._client is not None

        assert solver._client is None
