"""Chat completion client producing triage suggestions."""

import asyncio
import logging
from typing import Any

import httpx

from ..cancellation import CancellationToken, run_bounded
from ..errors import FailureKind, ResourceFailure
from ..github_client.models import Aggregate, Suggestion
from .config import CompletionSettings
from .prompts import build_messages

logger = logging.getLogger(__name__)

NO_SUGGESTION_TEXT = "No response"


def extract_completion_text(data: Any) -> str:
    """Pull the first choice's message content out of a response body.

    Missing fields along the path yield the placeholder text.

    Raises:
        ResourceFailure: If the body is not a JSON object
    """
    if not isinstance(data, dict):
        raise ResourceFailure(
            FailureKind.PARSE, "Completion response is not a JSON object"
        )

    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return NO_SUGGESTION_TEXT
    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str) or not content:
        return NO_SUGGESTION_TEXT
    return content


class CompletionClient:
    """Sends the triage prompt to an OpenAI-compatible completion endpoint."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        settings: CompletionSettings | None = None,
    ):
        """Initialize the completion client.

        Args:
            client: Shared async HTTP client
            api_key: Completion API key sent as a bearer token
            settings: Endpoint and sampling parameters
        """
        self.client = client
        self.settings = settings or CompletionSettings()
        self.headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def build_payload(self, aggregate: Aggregate) -> dict[str, Any]:
        """Build the request body for an aggregate."""
        return {
            "model": self.settings.model_name,
            "messages": build_messages(aggregate),
            "temperature": self.settings.temperature,
            "max_tokens": self.settings.max_tokens,
        }

    async def complete(
        self, aggregate: Aggregate, cancel: CancellationToken | None = None
    ) -> Suggestion:
        """Request a triage suggestion for an aggregate.

        Args:
            aggregate: Issue material to embed in the prompt
            cancel: Token of the run issuing the request

        Returns:
            Suggestion holding the first completion's Markdown

        Raises:
            ResourceFailure: On transport, status, timeout or parse failures
            RunCancelled: If the run was superseded
        """
        endpoint = self.settings.endpoint
        payload = self.build_payload(aggregate)
        logger.debug(
            "Requesting completion for %s (%d prompt chars)",
            aggregate.context,
            sum(len(m["content"]) for m in payload["messages"]),
        )

        try:
            response = await run_bounded(
                self.client.post(
                    endpoint,
                    headers=self.headers,
                    json=payload,
                    timeout=self.settings.timeout_s,
                ),
                self.settings.timeout_s,
                cancel,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            raise ResourceFailure(
                FailureKind.TIMEOUT,
                f"Completion request timed out after {self.settings.timeout_s}s",
                url=endpoint,
            )
        except httpx.HTTPError as e:
            raise ResourceFailure(
                FailureKind.NETWORK,
                f"Failed to reach AI server: {e}",
                url=endpoint,
            )

        if not response.is_success:
            raise ResourceFailure(
                FailureKind.HTTP_STATUS,
                f"AI server error {response.status_code}",
                url=endpoint,
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            raise ResourceFailure(
                FailureKind.PARSE, "Failed to parse AI response", url=endpoint
            )

        return Suggestion(text=extract_completion_text(data))
