"""CLI commands that run the triage pipeline."""

import asyncio
import sys
from pathlib import Path

import typer
from rich.console import Console

from ..ai.config import validate_model_string
from ..config import TriageSettings
from ..errors import NotAnIssuePage
from ..github_client.context import extract_issue_context
from ..pipeline.events import line_events
from ..pipeline.orchestrator import PipelineRun, RunState
from ..pipeline.session import TriageSession
from ..pipeline.watcher import PageWatcher
from ..render.sink import ConsoleRenderSink
from ..storage.credentials import CredentialStore, Credentials
from .credentials import ensure_credentials
from .options import (
    CREDENTIALS_PATH_OPTION,
    HTML_OPTION,
    MODEL_OPTION,
    TIMEOUT_OPTION,
    optional_path,
)

console = Console()


def _settings(
    model: str | None, timeout_ms: int | None, credentials_path: Path | None
) -> TriageSettings:
    try:
        settings = TriageSettings.from_env()
        if model:
            validate_model_string(model)
            settings.completion.model = model
        if timeout_ms is not None:
            if timeout_ms <= 0:
                raise ValueError("--timeout-ms must be positive")
            settings.request_timeout_ms = timeout_ms
        if credentials_path:
            settings.credentials_path = optional_path(credentials_path)
    except ValueError as e:
        console.print(f"❌ Configuration error: {e}", markup=False)
        raise typer.Exit(1)
    return settings


def _credentials(settings: TriageSettings) -> Credentials:
    try:
        return ensure_credentials(CredentialStore(settings.credentials_path))
    except ValueError as e:
        console.print(f"❌ {e}")
        raise typer.Exit(1)


async def run_once(
    location: str,
    credentials: Credentials,
    settings: TriageSettings,
    sink: ConsoleRenderSink,
) -> PipelineRun:
    """Run the pipeline once for a single location."""
    session = TriageSession.open(credentials, settings, sink)
    try:
        sink.create_target()
        sink.show_loading()
        return await session.orchestrator.run(location)
    finally:
        await session.close()


def suggest(
    url: str = typer.Argument(..., help="GitHub issue URL or /owner/repo/issues/N path"),
    html: Path | None = HTML_OPTION,
    model: str | None = MODEL_OPTION,
    timeout_ms: int | None = TIMEOUT_OPTION,
    credentials_path: Path | None = CREDENTIALS_PATH_OPTION,
) -> None:
    """Suggest triage questions for one issue.

    Examples:
        triage-helper suggest https://github.com/acme/widgets/issues/7
        triage-helper suggest /acme/widgets/issues/7 --html suggestion.html
    """
    context = extract_issue_context(url)
    if context is None:
        console.print(f"❌ {NotAnIssuePage(url)}")
        raise typer.Exit(1)

    settings = _settings(model, timeout_ms, credentials_path)
    credentials = _credentials(settings)
    sink = ConsoleRenderSink(console, html_path=optional_path(html))

    console.print(f"🔍 Triaging {context}")
    run = asyncio.run(run_once(url, credentials, settings, sink))

    if run.state != RunState.DONE:
        raise typer.Exit(1)
    if html:
        console.print(f"📄 HTML written to {html}")


def watch(
    html: Path | None = HTML_OPTION,
    model: str | None = MODEL_OPTION,
    timeout_ms: int | None = TIMEOUT_OPTION,
    credentials_path: Path | None = CREDENTIALS_PATH_OPTION,
) -> None:
    """Watch page events on stdin and keep the suggestion current.

    Each line is a location (full URL or path). A line reading 'redraw'
    reports that the host page dropped the suggestion box.

    Example:
        printf '%s\\n' /acme/widgets/issues/7 redraw | triage-helper watch
    """
    settings = _settings(model, timeout_ms, credentials_path)
    credentials = _credentials(settings)
    sink = ConsoleRenderSink(console, html_path=optional_path(html))

    watcher = PageWatcher(
        sink, lambda: TriageSession.open(credentials, settings, sink)
    )
    console.print("👀 Watching for issue pages (one location per line, Ctrl-D to stop)")
    try:
        asyncio.run(watcher.watch(line_events(sys.stdin)))
    except KeyboardInterrupt:
        console.print("Stopped")
