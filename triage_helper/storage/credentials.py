"""Persistent storage for the two API credentials."""

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

GITHUB_TOKEN = "github_token"
OPENAI_API_KEY = "openai_api_key"

# Stored name -> environment variable consulted when nothing is stored
CREDENTIAL_ENV_VARS = {
    GITHUB_TOKEN: "GITHUB_TOKEN",
    OPENAI_API_KEY: "OPENAI_API_KEY",
}

CREDENTIAL_LABELS = {
    GITHUB_TOKEN: "GitHub API token",
    OPENAI_API_KEY: "OpenAI API key",
}

DEFAULT_CREDENTIALS_PATH = (
    Path.home() / ".config" / "github-triage-helper" / "credentials.json"
)


class Credentials(BaseModel):
    """The two secrets used for outbound authorization."""

    github_token: str = Field(..., description="GitHub personal access token")
    openai_api_key: str = Field(..., description="Completion API key")


class CredentialStore:
    """Stores credentials in a JSON file readable only by its owner."""

    def __init__(self, path: str | Path | None = None):
        """Initialize credential store.

        Args:
            path: Credentials file location
        """
        self.path = Path(path) if path else DEFAULT_CREDENTIALS_PATH

    def _check_name(self, name: str) -> None:
        if name not in CREDENTIAL_ENV_VARS:
            raise ValueError(
                f"Unknown credential '{name}'. "
                f"Expected one of: {', '.join(CREDENTIAL_ENV_VARS)}"
            )

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Credentials file {self.path} is corrupt: {e}")
        if not isinstance(data, dict):
            raise ValueError(f"Credentials file {self.path} is corrupt")
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        self.path.chmod(0o600)

    def get(self, name: str) -> str | None:
        """Get a stored credential, falling back to its environment variable."""
        self._check_name(name)
        value = self._read().get(name)
        if value:
            return value
        return os.getenv(CREDENTIAL_ENV_VARS[name]) or None

    def set(self, name: str, value: str) -> None:
        """Store a credential."""
        self._check_name(name)
        if not value:
            raise ValueError(f"Refusing to store an empty {CREDENTIAL_LABELS[name]}")
        data = self._read()
        data[name] = value
        self._write(data)
        logger.info("Stored %s in %s", CREDENTIAL_LABELS[name], self.path)

    def delete(self, name: str) -> bool:
        """Delete a stored credential.

        Returns:
            True if a stored value was removed
        """
        self._check_name(name)
        data = self._read()
        if name not in data:
            return False
        del data[name]
        self._write(data)
        logger.info("Cleared %s from %s", CREDENTIAL_LABELS[name], self.path)
        return True

    def missing(self) -> list[str]:
        """Names of credentials available neither in the file nor the environment."""
        return [name for name in CREDENTIAL_ENV_VARS if not self.get(name)]

    def load(self) -> Credentials:
        """Load both credentials.

        Raises:
            ValueError: If either credential is unavailable
        """
        missing = self.missing()
        if missing:
            raise ValueError(
                "Credentials required: "
                + ", ".join(
                    f"{CREDENTIAL_LABELS[n]} ({CREDENTIAL_ENV_VARS[n]})" for n in missing
                )
            )
        return Credentials(
            github_token=self.get(GITHUB_TOKEN) or "",
            openai_api_key=self.get(OPENAI_API_KEY) or "",
        )

    def masked(self, name: str) -> str:
        """Describe a credential without revealing it."""
        value = self.get(name)
        if not value:
            return "(not set)"
        if len(value) <= 8:
            return "*" * len(value)
        return f"{value[:4]}…{value[-4:]}"
