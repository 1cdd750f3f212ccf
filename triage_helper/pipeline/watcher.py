"""Decides when page events (re)start the pipeline or recreate the render target."""

import asyncio
import logging
from collections.abc import AsyncIterable, Callable

from ..github_client.context import extract_issue_context, is_duplicate_load
from ..render.sink import RenderSink
from .events import NavigationChanged, PageEvent
from .orchestrator import PipelineRun
from .session import TriageSession

logger = logging.getLogger(__name__)


class PageWatcher:
    """Steady-state watcher reacting to navigation and lost render targets."""

    def __init__(
        self, sink: RenderSink, session_factory: Callable[[], TriageSession]
    ):
        """Initialize the watcher.

        Args:
            sink: Render sink shared with the session's orchestrator
            session_factory: Builds a session on the first issue trigger
        """
        self.sink = sink
        self._session_factory = session_factory
        self.session: TriageSession | None = None
        self.last_location: str | None = None

    async def handle(self, event: PageEvent) -> asyncio.Task[PipelineRun] | None:
        """React to one page event.

        Returns:
            The task of a newly started run, if any
        """
        if isinstance(event, NavigationChanged) and event.location != self.last_location:
            return await self._on_navigation(event.location)
        return self._on_page_changed()

    async def watch(self, events: AsyncIterable[PageEvent]) -> None:
        """Consume events until the source ends, then drain and close."""
        try:
            async for event in events:
                await self.handle(event)
            if self.session is not None:
                await self.session.wait()
        finally:
            await self.close()

    async def close(self) -> None:
        if self.session is not None:
            await self.session.close()
            self.session = None
        self.sink.clear()

    async def _on_navigation(self, location: str) -> asyncio.Task[PipelineRun] | None:
        logger.debug("URL changed: %s", location)
        self.last_location = location

        if is_duplicate_load(location) and self._showing_issue_of(location):
            logger.debug("Ignoring duplicate load: %s", location)
            return None

        if extract_issue_context(location) is None:
            logger.debug("Left issue pages: %s", location)
            await self.close()
            return None

        if self.session is None:
            self.session = self._session_factory()

        self.sink.clear()
        self._recreate_target()
        return self.session.start_run(location)

    def _on_page_changed(self) -> asyncio.Task[PipelineRun] | None:
        if self.session is None or self.last_location is None:
            return None
        if self.sink.has_target():
            return None

        logger.debug("DOM changed, injecting suggestion box")
        if not self._recreate_target():
            return None
        if self.session.run_in_flight(self.last_location):
            return None
        return self.session.start_run(self.last_location)

    def _showing_issue_of(self, location: str) -> bool:
        if self.session is None:
            return False
        run = self.session.orchestrator.current_run
        if run is None:
            return False
        return extract_issue_context(run.location) == extract_issue_context(location)

    def _recreate_target(self) -> bool:
        if self.sink.create_target() is None:
            logger.debug("Nowhere to inject suggestion box")
            return False
        self.sink.show_loading()
        return True
