"""
Voice Agent Client

This module wraps the Vapi REST API behind the same start/stop/on/off surface the
browser SDK exposes. A session creates one client, subscribes its handlers, and
relays the events it receives from the browser (or from the Vapi webhook) through
emit().

Starting a call creates a web call the browser joins with the returned URL.
Stopping a call sends an end-call control message to the live call.

Dependencies:
- httpx: For async HTTP calls to the Vapi API.
- loguru: For logging operations.
- app.errors.exceptions: For VoiceAgentError.

Author: @kcaparas1630
"""

import inspect
import os
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union
import httpx
from dotenv import load_dotenv
from loguru import logger
from app.constants.session_constants import VOICE_AGENT_EVENTS
from app.errors.exceptions import VoiceAgentError

load_dotenv()

EventHandler = Callable[..., Union[None, Awaitable[None]]]


class VapiClient:
    """
    Per-session voice agent handle.

    Attributes:
        call_id (Optional[str]): Id of the call created by start().
        web_call_url (Optional[str]): URL the browser joins to take part in the call.
        control_url (Optional[str]): Live call control endpoint used by stop().
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self.api_key = api_key or os.getenv("VAPI_API_KEY", "")
        self.base_url = (base_url or os.getenv("VAPI_BASE_URL", "https://api.vapi.ai")).rstrip("/")
        self._http_client = http_client
        self.timeout = timeout
        self._handlers: Dict[str, List[EventHandler]] = defaultdict(list)
        self.call_id: Optional[str] = None
        self.web_call_url: Optional[str] = None
        self.control_url: Optional[str] = None

    # Event subscription

    def on(self, event: str, handler: EventHandler) -> None:
        if event not in VOICE_AGENT_EVENTS:
            raise ValueError(f"Unknown voice agent event: {event}")
        self._handlers[event].append(handler)

    def off(self, event: str, handler: EventHandler) -> None:
        if handler in self._handlers.get(event, []):
            self._handlers[event].remove(handler)

    def listener_count(self, event: str) -> int:
        return len(self._handlers.get(event, []))

    async def emit(self, event: str, *args: Any) -> None:
        """Invoke every handler subscribed to event, in subscription order."""
        for handler in list(self._handlers.get(event, [])):
            result = handler(*args)
            if inspect.isawaitable(result):
                await result

    # REST calls

    async def _post(self, url: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            if self._http_client is not None:
                response = await self._http_client.post(url, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Vapi request to {url} failed with {e.response.status_code}: {e.response.text[:200]}")
            raise VoiceAgentError(f"Voice agent returned {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.error(f"Vapi request to {url} failed: {e}")
            raise VoiceAgentError("Voice agent is unreachable") from e

        if not response.content:
            return {}
        return response.json()

    async def start(self, assistant_or_workflow: Union[str, Dict[str, Any]], variable_values: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a web call.

        Args:
            assistant_or_workflow: A workflow id, or an inline assistant definition.
            variable_values: Values substituted into the assistant or workflow prompts.

        Returns:
            Dict[str, Any]: The call object returned by Vapi.

        Raises:
            VoiceAgentError: If the call could not be created.
        """
        if isinstance(assistant_or_workflow, str):
            payload = {
                "workflowId": assistant_or_workflow,
                "workflowOverrides": {"variableValues": variable_values},
            }
        else:
            payload = {
                "assistant": assistant_or_workflow,
                "assistantOverrides": {"variableValues": variable_values},
            }

        call = await self._post(f"{self.base_url}/call/web", payload)
        self.call_id = call.get("id")
        self.web_call_url = call.get("webCallUrl")
        self.control_url = (call.get("monitor") or {}).get("controlUrl")
        logger.info(f"Started voice call {self.call_id}")
        return call

    async def stop(self) -> None:
        """End the live call. A client that never started a call has nothing to stop."""
        if not self.control_url:
            logger.debug("No active voice call to stop")
            return
        await self._post(self.control_url, {"type": "end-call"})
        logger.info(f"Requested end of voice call {self.call_id}")
