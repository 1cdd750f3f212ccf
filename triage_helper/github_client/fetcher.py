"""Bounded-time GET requests against the GitHub REST API."""

import asyncio
import logging

import httpx

from ..cancellation import CancellationToken, run_bounded
from ..errors import Failure, FailureKind, ResourceResult, Success

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 5000
USER_AGENT = "github-triage-helper/0.1.0"


def github_headers(token: str) -> dict[str, str]:
    """Build the headers sent with every GitHub API request."""
    return {
        "Accept": "application/vnd.github+json",
        "Authorization": f"token {token}",
        "User-Agent": USER_AGENT,
    }


class ResourceFetcher:
    """Performs one GET per call, racing it against a fixed deadline."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        headers: dict[str, str],
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ):
        """Initialize the fetcher.

        Args:
            client: Shared async HTTP client
            headers: Headers sent with every request
            timeout_ms: Per-request deadline in milliseconds
        """
        self.client = client
        self.headers = headers
        self.timeout_ms = timeout_ms

    async def fetch(
        self, url: str, cancel: CancellationToken | None = None
    ) -> ResourceResult:
        """Fetch a URL and decode its JSON body.

        Args:
            url: Resource URL
            cancel: Token of the run issuing the request

        Returns:
            Success with the decoded payload, or Failure describing what went wrong

        Raises:
            RunCancelled: If the run was superseded before the response arrived
        """
        logger.debug("GET %s", url)
        deadline = self.timeout_ms / 1000
        try:
            response = await run_bounded(
                self.client.get(url, headers=self.headers, timeout=deadline),
                deadline,
                cancel,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            return Failure(
                kind=FailureKind.TIMEOUT,
                detail=f"Request timed out after {self.timeout_ms}ms",
                url=url,
                timeout_ms=self.timeout_ms,
            )
        except httpx.HTTPError as e:
            return Failure(
                kind=FailureKind.NETWORK,
                detail=f"Network error for {url}: {e}",
                url=url,
            )

        if not response.is_success:
            return Failure(
                kind=FailureKind.HTTP_STATUS,
                detail=f"GitHub API error {response.status_code} for {url}",
                url=url,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError:
            return Failure(
                kind=FailureKind.PARSE,
                detail=f"Failed to parse JSON from {url}",
                url=url,
            )

        return Success(payload=payload)
