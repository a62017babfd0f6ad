"""
Test Voice Agent Client Module

Tests the Vapi wrapper against an httpx mock transport: call creation payloads,
live call control on stop, error mapping, and event subscription.

Dependencies:
- pytest: For testing framework
- httpx: For the mock transport
- app.core.voice_agent_client: The module being tested

Author: @kcaparas1630
"""

import json
import httpx
import pytest
from app.core.voice_agent_client import VapiClient
from app.errors.exceptions import VoiceAgentError


def mock_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestStartStop:

    @pytest.mark.asyncio
    async def test_start_with_inline_assistant(self):
        requests = []

        def handler(request: httpx.Request):
            requests.append(request)
            return httpx.Response(201, json={
                "id": "call-123",
                "webCallUrl": "https://vapi.daily.co/abc",
                "monitor": {"controlUrl": "https://control.vapi.ai/call-123/control"},
            })

        async with mock_client(handler) as http_client:
            agent = VapiClient(api_key="secret", base_url="https://api.vapi.ai", http_client=http_client)
            await agent.start({"name": "Interviewer"}, {"questions": "- Q1"})

        assert requests[0].url == "https://api.vapi.ai/call/web"
        assert requests[0].headers["Authorization"] == "Bearer secret"
        assert json.loads(requests[0].content) == {
            "assistant": {"name": "Interviewer"},
            "assistantOverrides": {"variableValues": {"questions": "- Q1"}},
        }
        assert agent.call_id == "call-123"
        assert agent.web_call_url == "https://vapi.daily.co/abc"
        assert agent.control_url == "https://control.vapi.ai/call-123/control"

    @pytest.mark.asyncio
    async def test_start_with_workflow_id(self):
        bodies = []

        def handler(request: httpx.Request):
            bodies.append(json.loads(request.content))
            return httpx.Response(201, json={"id": "call-9"})

        async with mock_client(handler) as http_client:
            agent = VapiClient(api_key="k", base_url="https://api.vapi.ai/", http_client=http_client)
            await agent.start("wf-1", {"username": "Ada", "userid": "u1"})

        assert bodies[0] == {
            "workflowId": "wf-1",
            "workflowOverrides": {"variableValues": {"username": "Ada", "userid": "u1"}},
        }

    @pytest.mark.asyncio
    async def test_stop_posts_end_call_to_control_url(self):
        requests = []

        def handler(request: httpx.Request):
            requests.append(request)
            if request.url.path == "/call/web":
                return httpx.Response(201, json={"id": "c1", "monitor": {"controlUrl": "https://control.test/c1"}})
            return httpx.Response(200)

        async with mock_client(handler) as http_client:
            agent = VapiClient(api_key="k", base_url="https://api.vapi.ai", http_client=http_client)
            await agent.start("wf-1", {})
            await agent.stop()

        assert str(requests[1].url) == "https://control.test/c1"
        assert json.loads(requests[1].content) == {"type": "end-call"}

    @pytest.mark.asyncio
    async def test_stop_without_call_is_noop(self):
        def handler(request: httpx.Request):
            raise AssertionError("no request expected")

        async with mock_client(handler) as http_client:
            await VapiClient(api_key="k", http_client=http_client).stop()

    @pytest.mark.asyncio
    async def test_http_error_raises_voice_agent_error(self):
        def handler(request: httpx.Request):
            return httpx.Response(401, json={"message": "Invalid key"})

        async with mock_client(handler) as http_client:
            agent = VapiClient(api_key="bad", http_client=http_client)
            with pytest.raises(VoiceAgentError) as exc_info:
                await agent.start("wf-1", {})

        assert exc_info.value.status_code == 502
        assert agent.call_id is None

    @pytest.mark.asyncio
    async def test_connection_error_raises_voice_agent_error(self):
        def handler(request: httpx.Request):
            raise httpx.ConnectError("refused", request=request)

        async with mock_client(handler) as http_client:
            with pytest.raises(VoiceAgentError):
                await VapiClient(api_key="k", http_client=http_client).start("wf-1", {})


class TestEvents:

    @pytest.mark.asyncio
    async def test_emit_calls_sync_and_async_handlers_in_order(self):
        agent = VapiClient(api_key="k")
        seen = []

        def sync_handler(message):
            seen.append(("sync", message["transcript"]))

        async def async_handler(message):
            seen.append(("async", message["transcript"]))

        agent.on("message", sync_handler)
        agent.on("message", async_handler)
        await agent.emit("message", {"transcript": "hi"})

        assert seen == [("sync", "hi"), ("async", "hi")]

    @pytest.mark.asyncio
    async def test_off_removes_handler(self):
        agent = VapiClient(api_key="k")
        calls = []
        handler = lambda: calls.append(1)

        agent.on("call-start", handler)
        agent.off("call-start", handler)
        await agent.emit("call-start")

        assert calls == []

    def test_unknown_event_is_rejected(self):
        with pytest.raises(ValueError):
            VapiClient(api_key="k").on("volume-level", lambda level: None)
