"""Standardized CLI option definitions shared by the commands."""

from pathlib import Path

import typer

HTML_OPTION = typer.Option(
    None, "--html", help="Also write the rendered suggestion as HTML to this file"
)

MODEL_OPTION = typer.Option(
    None,
    "--model",
    "-m",
    help="Completion model (e.g., 'openai:gpt-4o-mini'); overrides TRIAGE_MODEL",
)

TIMEOUT_OPTION = typer.Option(
    None,
    "--timeout-ms",
    help="Deadline for each GitHub request in milliseconds (default 5000)",
)

CREDENTIALS_PATH_OPTION = typer.Option(
    None,
    "--credentials",
    help="Credentials file (default ~/.config/github-triage-helper/credentials.json)",
)

VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Enable debug logging")

CREDENTIAL_NAME_ARGUMENT = typer.Argument(
    ..., help="Credential to act on: github_token or openai_api_key"
)


def optional_path(value: Path | None) -> Path | None:
    return value.expanduser() if value else None
