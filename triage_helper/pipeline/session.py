"""State owned by one issue view: HTTP client, orchestrator and in-flight runs."""

import asyncio
import logging

import httpx

from ..ai.completion import CompletionClient
from ..config import TriageSettings
from ..github_client.aggregator import DataAggregator
from ..github_client.context import extract_issue_context
from ..github_client.fetcher import ResourceFetcher, github_headers
from ..render.sink import RenderSink
from ..storage.credentials import Credentials
from .orchestrator import PipelineOrchestrator, PipelineRun

logger = logging.getLogger(__name__)


class TriageSession:
    """Created on the first issue trigger, closed when leaving issue pages."""

    def __init__(
        self,
        orchestrator: PipelineOrchestrator,
        client: httpx.AsyncClient | None = None,
    ):
        self.orchestrator = orchestrator
        self._client = client
        self._tasks: set[asyncio.Task[PipelineRun]] = set()
        self.closed = False

    @classmethod
    def open(
        cls, credentials: Credentials, settings: TriageSettings, sink: RenderSink
    ) -> "TriageSession":
        """Wire up the pipeline for one session."""
        # Deadlines are set per request
        client = httpx.AsyncClient(timeout=None)
        fetcher = ResourceFetcher(
            client,
            github_headers(credentials.github_token),
            timeout_ms=settings.request_timeout_ms,
        )
        aggregator = DataAggregator(fetcher, api_url=settings.github_api_url)
        completion = CompletionClient(
            client, credentials.openai_api_key, settings.completion
        )
        logger.debug("Opened triage session")
        return cls(PipelineOrchestrator(aggregator, completion, sink), client)

    def start_run(self, location: str) -> asyncio.Task[PipelineRun]:
        """Start a run in the background, superseding the previous one."""
        run = self.orchestrator.start(location)
        task = asyncio.create_task(self.orchestrator.execute(run))
        self._tasks.add(task)
        task.add_done_callback(self._on_run_done)
        return task

    def _on_run_done(self, task: asyncio.Task[PipelineRun]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Triage run crashed", exc_info=error)

    def run_in_flight(self, location: str) -> bool:
        """Check for an unfinished run started for the issue at ``location``."""
        run = self.orchestrator.current_run
        if run is None or run.finished:
            return False
        return extract_issue_context(run.location) == extract_issue_context(location)

    async def wait(self) -> None:
        """Wait for every in-flight run to finish."""
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def close(self) -> None:
        """Supersede the current run, abandon in-flight requests and release the client."""
        if self.closed:
            return
        self.closed = True
        self.orchestrator.supersede()
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        if self._client is not None:
            await self._client.aclose()
        logger.debug("Closed triage session")
