"""Runtime settings read from the environment."""

import os
from pathlib import Path

from pydantic import BaseModel, Field

from .ai.config import DEFAULT_COMPLETION_URL, DEFAULT_MODEL, CompletionSettings
from .github_client.aggregator import DEFAULT_API_URL
from .github_client.fetcher import DEFAULT_TIMEOUT_MS


def _env_number(name: str, default: float, cast: type) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be a number, got '{raw}'")


class TriageSettings(BaseModel):
    """Settings for one triage helper process."""

    github_api_url: str = Field(DEFAULT_API_URL, description="GitHub REST API root")
    request_timeout_ms: int = Field(
        DEFAULT_TIMEOUT_MS, gt=0, description="Deadline for each GitHub request"
    )
    credentials_path: Path | None = Field(
        None, description="Credentials file, default under ~/.config"
    )
    completion: CompletionSettings = Field(default_factory=CompletionSettings)

    @classmethod
    def from_env(cls) -> "TriageSettings":
        """Build settings from ``TRIAGE_*`` environment variables."""
        credentials_path = os.getenv("TRIAGE_CREDENTIALS_PATH")
        return cls(
            github_api_url=os.getenv("TRIAGE_GITHUB_API_URL", DEFAULT_API_URL),
            request_timeout_ms=int(
                _env_number("TRIAGE_REQUEST_TIMEOUT_MS", DEFAULT_TIMEOUT_MS, int)
            ),
            credentials_path=Path(credentials_path) if credentials_path else None,
            completion=CompletionSettings(
                endpoint=os.getenv("TRIAGE_COMPLETION_URL", DEFAULT_COMPLETION_URL),
                model=os.getenv("TRIAGE_MODEL", DEFAULT_MODEL),
                temperature=_env_number("TRIAGE_TEMPERATURE", 0.2, float),
                max_tokens=int(_env_number("TRIAGE_MAX_TOKENS", 400, int)),
            ),
        )
