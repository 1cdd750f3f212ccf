"""Credential storage."""

from .credentials import (
    GITHUB_TOKEN,
    OPENAI_API_KEY,
    CredentialStore,
    Credentials,
)

__all__ = ["GITHUB_TOKEN", "OPENAI_API_KEY", "CredentialStore", "Credentials"]
