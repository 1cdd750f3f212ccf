"""Main CLI entry point."""

import logging

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from . import credentials
from .options import VERBOSE_OPTION
from .triage import suggest, watch

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="triage-helper",
    help="Suggest triage questions for GitHub issues using AI",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


@app.callback()
def main(verbose: bool = VERBOSE_OPTION) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


app.command(name="suggest", context_settings={"help_option_names": ["-h", "--help"]})(
    suggest
)
app.command(name="watch", context_settings={"help_option_names": ["-h", "--help"]})(
    watch
)
app.add_typer(credentials.app, name="credentials")


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def version() -> None:
    """Show version information."""
    from triage_helper import __version__

    console.print(f"GitHub Triage Helper v{__version__}")


if __name__ == "__main__":
    app()
