"""Concurrent collection of the readme, issue and comments for one issue."""

import asyncio
import base64
import binascii
import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

from ..cancellation import CancellationToken
from ..errors import Failure, FailureKind, ResourceFailure
from .context import IssueContext
from .fetcher import ResourceFetcher
from .models import (
    Aggregate,
    CommentEntry,
    GitHubComment,
    GitHubIssue,
    GitHubReadme,
)

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"

README = "readme"
ISSUE = "issue"
COMMENTS = "comments"

_comments_adapter = TypeAdapter(list[GitHubComment])


def decode_readme(content: str | None) -> str:
    """Decode base64 readme content, tolerating the embedded line breaks.

    Raises:
        ValueError: If the content is not valid base64 or not UTF-8 text
    """
    if not content:
        return ""
    try:
        raw = base64.b64decode("".join(content.split()), validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ValueError(f"Invalid readme content: {e}") from e


class DataAggregator:
    """All-or-nothing aggregation of the three resources behind an issue."""

    def __init__(self, fetcher: ResourceFetcher, api_url: str = DEFAULT_API_URL):
        self.fetcher = fetcher
        self.api_url = api_url.rstrip("/")

    def resource_urls(self, context: IssueContext) -> dict[str, str]:
        """Build the readme, issue and comments URLs, in that order."""
        repo_url = f"{self.api_url}/repos/{context.owner}/{context.repo}"
        issue_url = f"{repo_url}/issues/{context.issue_number}"
        return {
            README: f"{repo_url}/readme",
            ISSUE: issue_url,
            COMMENTS: f"{issue_url}/comments",
        }

    async def aggregate(
        self, context: IssueContext, cancel: CancellationToken | None = None
    ) -> Aggregate:
        """Fetch all three resources concurrently and combine them.

        The first failure observed fails the whole step; fetches still
        pending at that point are cancelled and their outcome discarded.
        A repository without a readme (404) contributes an empty readme.

        Args:
            context: Issue to collect material for
            cancel: Token of the run issuing the requests

        Returns:
            Aggregate of readme, issue and comments

        Raises:
            ResourceFailure: If any fetch fails or its payload is malformed
            RunCancelled: If the run was superseded
        """
        urls = self.resource_urls(context)
        tasks = {
            name: asyncio.ensure_future(self.fetcher.fetch(url, cancel))
            for name, url in urls.items()
        }
        payloads: dict[str, Any] = {}
        pending = set(tasks.values())

        try:
            while pending:
                done, pending = await asyncio.wait(
                    pending, return_when=asyncio.FIRST_COMPLETED
                )
                # Fixed resource order breaks ties between simultaneous results
                for name, task in tasks.items():
                    if task not in done:
                        continue
                    result = task.result()
                    if isinstance(result, Failure):
                        if name == README and _is_not_found(result):
                            logger.debug("No readme for %s", context.slug)
                            payloads[name] = None
                            continue
                        logger.debug("Fetching %s for %s failed", name, context)
                        raise result.to_error()
                    payloads[name] = result.payload
        finally:
            for task in pending:
                task.cancel()

        return self._combine(context, urls, payloads)

    def _combine(
        self, context: IssueContext, urls: dict[str, str], payloads: dict[str, Any]
    ) -> Aggregate:
        try:
            readme_text = ""
            if payloads[README] is not None:
                readme = GitHubReadme.model_validate(payloads[README])
                readme_text = decode_readme(readme.content)
        except (ValidationError, ValueError) as e:
            raise _parse_failure(urls[README], e)

        try:
            issue = GitHubIssue.model_validate(payloads[ISSUE])
        except ValidationError as e:
            raise _parse_failure(urls[ISSUE], e)

        try:
            comments = _comments_adapter.validate_python(payloads[COMMENTS])
        except ValidationError as e:
            raise _parse_failure(urls[COMMENTS], e)

        logger.debug(
            "Aggregated %s: readme %d chars, %d comments",
            context,
            len(readme_text),
            len(comments),
        )
        return Aggregate(
            context=context,
            readme_text=readme_text,
            issue_author=issue.author,
            issue_title=issue.title,
            issue_body=issue.body or "",
            comments=tuple(
                CommentEntry(author=comment.author, body=comment.body or "")
                for comment in comments
            ),
        )


def _parse_failure(url: str, error: Exception) -> ResourceFailure:
    return ResourceFailure(
        FailureKind.PARSE, f"Unexpected response shape from {url}: {error}", url=url
    )


def _is_not_found(failure: Failure) -> bool:
    return failure.kind == FailureKind.HTTP_STATUS and failure.status_code == 404
