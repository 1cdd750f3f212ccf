"""Render targets and the sinks that display suggestions."""

import logging
from enum import Enum
from pathlib import Path
from typing import Protocol

import markdown
from pydantic import BaseModel, Field
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel

from ..errors import RenderTargetMissing
from ..github_client.models import Suggestion

logger = logging.getLogger(__name__)

LOADING_TEXT = "Loading AI suggestions..."
PANEL_TITLE = "AI triage suggestions"


class TargetState(str, Enum):
    LOADING = "loading"
    SUGGESTION = "suggestion"
    FAILURE = "failure"


class RenderTarget(BaseModel):
    """The single slot where the current suggestion is displayed."""

    state: TargetState = Field(TargetState.LOADING, description="What is shown")
    content: str = Field("", description="Markdown or plain text shown")
    html: str = Field("", description="HTML rendering of the content")


class RenderSink(Protocol):
    """Owns the render target. ``show_*`` raise RenderTargetMissing without one."""

    def has_target(self) -> bool: ...

    def create_target(self) -> RenderTarget | None: ...

    def show_loading(self) -> None: ...

    def show_suggestion(self, suggestion: Suggestion) -> None: ...

    def show_failure(self, message: str) -> None: ...

    def clear(self) -> None: ...


def markdown_to_html(text: str) -> str:
    """Convert Markdown to an HTML fragment for the render target."""
    return markdown.markdown(text, extensions=["tables", "fenced_code"])


class ConsoleRenderSink:
    """Renders the target into a rich console, optionally mirroring it as HTML."""

    def __init__(self, console: Console | None = None, html_path: Path | None = None):
        """Initialize the sink.

        Args:
            console: Console to print into
            html_path: File rewritten with the HTML rendering on every update
        """
        self.console = console or Console()
        self.html_path = html_path
        self.target: RenderTarget | None = None

    def has_target(self) -> bool:
        return self.target is not None

    def create_target(self) -> RenderTarget | None:
        self.target = RenderTarget()
        return self.target

    def show_loading(self) -> None:
        self._update(TargetState.LOADING, LOADING_TEXT)
        self.console.print(f"⏳ {LOADING_TEXT}")

    def show_suggestion(self, suggestion: Suggestion) -> None:
        self._update(TargetState.SUGGESTION, suggestion.text)
        self.console.print(
            Panel(Markdown(suggestion.text), title=PANEL_TITLE, border_style="green")
        )

    def show_failure(self, message: str) -> None:
        self._update(TargetState.FAILURE, message)
        self.console.print(f"❌ {message}")

    def clear(self) -> None:
        self.target = None

    def _update(self, state: TargetState, content: str) -> None:
        if self.target is None:
            raise RenderTargetMissing("No render target to write into")

        self.target.state = state
        self.target.content = content
        self.target.html = markdown_to_html(content)

        if self.html_path is not None:
            self.html_path.parent.mkdir(parents=True, exist_ok=True)
            self.html_path.write_text(self.target.html, encoding="utf-8")
            logger.debug("Wrote %s render to %s", state.value, self.html_path)
