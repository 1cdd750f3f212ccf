"""Test configuration and fixtures."""

import asyncio
import base64
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from triage_helper.errors import RenderTargetMissing
from triage_helper.github_client.context import IssueContext
from triage_helper.github_client.models import Aggregate, CommentEntry, Suggestion
from triage_helper.render.sink import RenderTarget, TargetState

API = "https://api.github.com"
COMPLETION_URL = "https://api.openai.com/v1/chat/completions"


class RecordingSink:
    """In-memory render sink that records every update."""

    def __init__(self, anchor_available: bool = True) -> None:
        self.anchor_available = anchor_available
        self.target: RenderTarget | None = None
        self.history: list[tuple[TargetState, str]] = []
        self.created = 0

    def has_target(self) -> bool:
        return self.target is not None

    def create_target(self) -> RenderTarget | None:
        if not self.anchor_available:
            return None
        self.created += 1
        self.target = RenderTarget()
        return self.target

    def show_loading(self) -> None:
        self._update(TargetState.LOADING, "Loading AI suggestions...")

    def show_suggestion(self, suggestion: Suggestion) -> None:
        self._update(TargetState.SUGGESTION, suggestion.text)

    def show_failure(self, message: str) -> None:
        self._update(TargetState.FAILURE, message)

    def clear(self) -> None:
        self.target = None

    def _update(self, state: TargetState, content: str) -> None:
        if self.target is None:
            raise RenderTargetMissing("No render target")
        self.target.state = state
        self.target.content = content
        self.history.append((state, content))

    @property
    def suggestions(self) -> list[str]:
        return [c for s, c in self.history if s == TargetState.SUGGESTION]


def encode(text: str) -> str:
    return base64.b64encode(text.encode()).decode()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def sink_factory() -> Callable[..., RecordingSink]:
    return RecordingSink


@pytest.fixture
def widgets_context() -> IssueContext:
    return IssueContext(owner="acme", repo="widgets", issue_number=7)


@pytest.fixture
def widgets_payloads() -> dict[str, Any]:
    """Readme, issue and comments payloads for acme/widgets#7."""
    return {
        f"{API}/repos/acme/widgets/readme": {
            "content": "IyBXaWRnZXRz",
            "encoding": "base64",
        },
        f"{API}/repos/acme/widgets/issues/7": {
            "user": {"login": "alice", "id": 1},
            "title": "Crash",
            "body": "It crashes",
            "state": "open",
        },
        f"{API}/repos/acme/widgets/issues/7/comments": [
            {"user": {"login": "bob", "id": 2}, "body": "Can you share logs?"},
        ],
    }


@pytest.fixture
def widgets_aggregate(widgets_context: IssueContext) -> Aggregate:
    return Aggregate(
        context=widgets_context,
        readme_text="# Widgets",
        issue_author="alice",
        issue_title="Crash",
        issue_body="It crashes",
        comments=(CommentEntry(author="bob", body="Can you share logs?"),),
    )


@pytest.fixture
def encode_base64() -> Callable[[str], str]:
    return encode


@pytest.fixture
def json_transport() -> Callable[[dict[str, Any]], httpx.MockTransport]:
    """Build a transport answering GETs from a URL -> payload mapping.

    Values may be a payload (served as JSON with 200), an ``httpx.Response``,
    or an exception instance to raise.
    """

    def build(routes: dict[str, Any]) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            url = str(request.url)
            if url not in routes:
                return httpx.Response(404, json={"message": "Not Found"})
            value = routes[url]
            if isinstance(value, Exception):
                raise value
            if isinstance(value, httpx.Response):
                return value
            return httpx.Response(200, json=value)

        return httpx.MockTransport(handler)

    return build


class FakeAggregator:
    """Aggregator returning canned aggregates; gates hold individual issues back.

    It ignores cancellation tokens so the orchestrator's own guard is exercised.
    """

    def __init__(self) -> None:
        self.gates: dict[int, asyncio.Event] = {}
        self.failures: dict[int, Exception] = {}
        self.calls: list[IssueContext] = []

    async def aggregate(
        self, context: IssueContext, cancel: Any = None
    ) -> Aggregate:
        self.calls.append(context)
        gate = self.gates.get(context.issue_number)
        if gate is not None:
            await gate.wait()
        if context.issue_number in self.failures:
            raise self.failures[context.issue_number]
        return Aggregate(
            context=context,
            readme_text="# Readme",
            issue_author="alice",
            issue_title=f"Issue {context.issue_number}",
            issue_body="body",
        )


class FakeCompletion:
    """Completion client answering 'Suggestion for #N'; gates hold answers back."""

    def __init__(self) -> None:
        self.gates: dict[int, asyncio.Event] = {}
        self.failures: dict[int, Exception] = {}
        self.calls: list[Aggregate] = []

    async def complete(self, aggregate: Aggregate, cancel: Any = None) -> Suggestion:
        self.calls.append(aggregate)
        number = aggregate.context.issue_number
        gate = self.gates.get(number)
        if gate is not None:
            await gate.wait()
        if number in self.failures:
            raise self.failures[number]
        return Suggestion(text=f"Suggestion for #{number}")


async def until(predicate: Callable[[], bool], attempts: int = 200) -> None:
    """Yield to the event loop until ``predicate`` holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("Condition not reached")


@pytest.fixture
def fake_aggregator() -> FakeAggregator:
    return FakeAggregator()


@pytest.fixture
def fake_completion() -> FakeCompletion:
    return FakeCompletion()


@pytest.fixture
def wait_until() -> Callable[..., Any]:
    return until
