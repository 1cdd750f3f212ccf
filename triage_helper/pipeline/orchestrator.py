"""Sequences extraction, aggregation, completion and rendering for one run."""

import itertools
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from ..cancellation import CancellationToken
from ..errors import (
    NotAnIssuePage,
    RenderTargetMissing,
    ResourceFailure,
    RunCancelled,
    TriageError,
)
from ..github_client.context import IssueContext, extract_issue_context
from ..github_client.models import Aggregate, Suggestion
from ..render.sink import RenderSink

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Could not load AI suggestions: {error}"


class RunState(str, Enum):
    IDLE = "idle"
    EXTRACTING = "extracting"
    AGGREGATING = "aggregating"
    REQUESTING = "requesting"
    RENDERING = "rendering"
    DONE = "done"
    ABORTED = "aborted"


TERMINAL_STATES = {RunState.DONE, RunState.ABORTED}


@dataclass(frozen=True, order=True)
class RunToken:
    """Opaque, monotonically increasing run identifier."""

    value: int


class Aggregating(Protocol):
    async def aggregate(
        self, context: IssueContext, cancel: CancellationToken | None = None
    ) -> Aggregate: ...


class Completing(Protocol):
    async def complete(
        self, aggregate: Aggregate, cancel: CancellationToken | None = None
    ) -> Suggestion: ...


@dataclass
class PipelineRun:
    """State of one pass through the pipeline."""

    token: RunToken
    location: str
    state: RunState = RunState.IDLE
    context: IssueContext | None = None
    suggestion: Suggestion | None = None
    failure: TriageError | None = None
    superseded: bool = False
    cancel: CancellationToken = field(default_factory=CancellationToken, repr=False)

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES

    def advance(self, state: RunState) -> None:
        logger.debug("Run %d: %s -> %s", self.token.value, self.state.value, state.value)
        self.state = state

    def abort(self, failure: TriageError | None = None) -> None:
        self.failure = failure
        self.advance(RunState.ABORTED)


class PipelineOrchestrator:
    """Runs the pipeline and keeps superseded runs away from the render target."""

    def __init__(self, aggregator: Aggregating, completion: Completing, sink: RenderSink):
        self.aggregator = aggregator
        self.completion = completion
        self.sink = sink
        self._tokens = itertools.count(1)
        self._current: PipelineRun | None = None

    @property
    def current_run(self) -> PipelineRun | None:
        return self._current

    def is_current(self, run: PipelineRun) -> bool:
        return self._current is run and not run.cancel.cancelled

    def supersede(self) -> None:
        """Mark the current run stale without starting a new one."""
        if self._current is not None:
            self._current.cancel.cancel()
            self._current = None

    def start(self, location: str) -> PipelineRun:
        """Mint a run for a location, superseding whatever ran before it."""
        self.supersede()
        run = PipelineRun(token=RunToken(next(self._tokens)), location=location)
        self._current = run
        return run

    async def run(self, location: str) -> PipelineRun:
        return await self.execute(self.start(location))

    async def execute(self, run: PipelineRun) -> PipelineRun:
        """Drive a run from extraction to render.

        Returns:
            The same run in a terminal state
        """
        try:
            run.advance(RunState.EXTRACTING)
            context = extract_issue_context(run.location)
            if context is None:
                raise NotAnIssuePage(run.location)
            run.context = context

            run.advance(RunState.AGGREGATING)
            aggregate = await self.aggregator.aggregate(context, run.cancel)
            self._ensure_current(run)

            run.advance(RunState.REQUESTING)
            suggestion = await self.completion.complete(aggregate, run.cancel)
            self._ensure_current(run)

            run.advance(RunState.RENDERING)
            self.sink.show_suggestion(suggestion)
            run.suggestion = suggestion
            run.advance(RunState.DONE)
            logger.info("Rendered suggestions for %s", context)

        except RunCancelled:
            run.superseded = True
            run.abort()
            logger.debug("Discarded result of superseded run %d", run.token.value)
        except NotAnIssuePage as e:
            run.abort(e)
            logger.debug("Ignoring: %s", run.location)
        except RenderTargetMissing as e:
            run.abort(e)
            logger.debug("Nowhere to render suggestions for %s", run.location)
        except ResourceFailure as e:
            run.abort(e)
            if self.is_current(run):
                logger.warning("Run %d failed (%s): %s", run.token.value, e.kind.value, e)
                self._show_failure(e)
            else:
                run.superseded = True
                logger.debug("Discarded failure of superseded run %d", run.token.value)

        return run

    def _ensure_current(self, run: PipelineRun) -> None:
        if not self.is_current(run):
            raise RunCancelled(f"Run {run.token.value} was superseded")

    def _show_failure(self, error: ResourceFailure) -> None:
        try:
            self.sink.show_failure(FAILURE_MESSAGE.format(error=error))
        except RenderTargetMissing:
            logger.debug("No render target to show the failure in")
