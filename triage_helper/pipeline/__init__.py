"""Pipeline orchestration and page watching."""

from .events import AnchorMissing, NavigationChanged, PageEvent, parse_event
from .orchestrator import PipelineOrchestrator, PipelineRun, RunState, RunToken
from .session import TriageSession
from .watcher import PageWatcher

__all__ = [
    "AnchorMissing",
    "NavigationChanged",
    "PageEvent",
    "PageWatcher",
    "PipelineOrchestrator",
    "PipelineRun",
    "RunState",
    "RunToken",
    "TriageSession",
    "parse_event",
]
