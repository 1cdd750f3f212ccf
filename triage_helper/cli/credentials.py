"""Administrative commands for the stored credentials."""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ..github_client.account import verify_github_token
from ..storage.credentials import (
    CREDENTIAL_ENV_VARS,
    CREDENTIAL_LABELS,
    GITHUB_TOKEN,
    CredentialStore,
    Credentials,
)
from .options import CREDENTIAL_NAME_ARGUMENT, CREDENTIALS_PATH_OPTION, optional_path

console = Console()
app = typer.Typer(
    help="Inspect, set, reset and verify the stored API credentials",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _store(path: Path | None) -> CredentialStore:
    return CredentialStore(optional_path(path))


def _check_name(name: str) -> None:
    if name not in CREDENTIAL_ENV_VARS:
        console.print(
            f"❌ Unknown credential '{name}'. "
            f"Use one of: {', '.join(CREDENTIAL_ENV_VARS)}"
        )
        raise typer.Exit(1)


def ensure_credentials(store: CredentialStore) -> Credentials:
    """Load credentials, prompting for and storing any that are missing."""
    for name in store.missing():
        value = typer.prompt(f"{CREDENTIAL_LABELS[name]}", hide_input=True)
        store.set(name, value.strip())
    return store.load()


@app.command()
def show(credentials_path: Path | None = CREDENTIALS_PATH_OPTION) -> None:
    """Show which credentials are available, masked."""
    store = _store(credentials_path)
    try:
        table = Table(title=f"Credentials ({store.path})")
        table.add_column("Name", style="cyan")
        table.add_column("Env fallback", style="magenta")
        table.add_column("Value", style="green")
        for name, env_var in CREDENTIAL_ENV_VARS.items():
            table.add_row(name, env_var, store.masked(name))
    except ValueError as e:
        console.print(f"❌ {e}")
        raise typer.Exit(1)
    console.print(table)


@app.command(name="set")
def set_credential(
    name: str = CREDENTIAL_NAME_ARGUMENT,
    credentials_path: Path | None = CREDENTIALS_PATH_OPTION,
) -> None:
    """Prompt for a credential and store it."""
    _check_name(name)
    store = _store(credentials_path)
    value = typer.prompt(CREDENTIAL_LABELS[name], hide_input=True)
    try:
        store.set(name, value.strip())
    except ValueError as e:
        console.print(f"❌ {e}")
        raise typer.Exit(1)
    console.print(f"✅ Stored {CREDENTIAL_LABELS[name]}")


@app.command()
def reset(
    name: str = CREDENTIAL_NAME_ARGUMENT,
    credentials_path: Path | None = CREDENTIALS_PATH_OPTION,
) -> None:
    """Clear a stored credential; it is asked for again on the next run."""
    _check_name(name)
    store = _store(credentials_path)
    try:
        removed = store.delete(name)
    except ValueError as e:
        console.print(f"❌ {e}")
        raise typer.Exit(1)
    if removed:
        console.print(f"✅ {CREDENTIAL_LABELS[name]} cleared")
    else:
        console.print(f"ℹ️  No stored {CREDENTIAL_LABELS[name]} to clear")


@app.command()
def verify(credentials_path: Path | None = CREDENTIALS_PATH_OPTION) -> None:
    """Check that the GitHub token authenticates."""
    store = _store(credentials_path)
    token = store.get(GITHUB_TOKEN)
    if not token:
        console.print(f"❌ No {CREDENTIAL_LABELS[GITHUB_TOKEN]} available")
        raise typer.Exit(1)
    try:
        login = verify_github_token(token)
    except ValueError as e:
        console.print(f"❌ {e}")
        raise typer.Exit(1)
    console.print(f"✅ GitHub token belongs to @{login}")
