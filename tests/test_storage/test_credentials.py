"""Tests for the credential store."""

import json
import os
import stat
from pathlib import Path
from unittest.mock import patch

import pytest

from triage_helper.storage.credentials import (
    GITHUB_TOKEN,
    OPENAI_API_KEY,
    CredentialStore,
    Credentials,
)


@pytest.fixture
def store(tmp_path: Path) -> CredentialStore:
    return CredentialStore(tmp_path / "config" / "credentials.json")


class TestCredentialStore:
    """Test CredentialStore class."""

    @patch.dict(os.environ, {}, clear=True)
    def test_empty_store(self, store: CredentialStore) -> None:
        """Test that nothing is available before anything is stored."""
        assert store.get(GITHUB_TOKEN) is None
        assert store.missing() == [GITHUB_TOKEN, OPENAI_API_KEY]

    @patch.dict(os.environ, {}, clear=True)
    def test_set_and_get(self, store: CredentialStore) -> None:
        """Test storing and reading back a credential."""
        store.set(GITHUB_TOKEN, "ghp_secret")

        assert store.get(GITHUB_TOKEN) == "ghp_secret"
        assert store.missing() == [OPENAI_API_KEY]
        assert json.loads(store.path.read_text()) == {GITHUB_TOKEN: "ghp_secret"}

    def test_file_is_private(self, store: CredentialStore) -> None:
        """Test that the credentials file is readable by its owner only."""
        store.set(OPENAI_API_KEY, "sk-secret")

        mode = stat.S_IMODE(store.path.stat().st_mode)
        assert mode == 0o600

    @patch.dict(os.environ, {"GITHUB_TOKEN": "env_token"}, clear=True)
    def test_env_fallback(self, store: CredentialStore) -> None:
        """Test that environment variables fill in for missing values."""
        assert store.get(GITHUB_TOKEN) == "env_token"

        store.set(GITHUB_TOKEN, "stored_token")
        assert store.get(GITHUB_TOKEN) == "stored_token"

    @patch.dict(os.environ, {}, clear=True)
    def test_delete(self, store: CredentialStore) -> None:
        """Test clearing a stored credential."""
        store.set(GITHUB_TOKEN, "ghp_secret")
        store.set(OPENAI_API_KEY, "sk-secret")

        assert store.delete(GITHUB_TOKEN)
        assert not store.delete(GITHUB_TOKEN)
        assert store.get(GITHUB_TOKEN) is None
        assert store.get(OPENAI_API_KEY) == "sk-secret"

    @patch.dict(os.environ, {}, clear=True)
    def test_load(self, store: CredentialStore) -> None:
        """Test loading both credentials."""
        store.set(GITHUB_TOKEN, "ghp_secret")
        store.set(OPENAI_API_KEY, "sk-secret")

        assert store.load() == Credentials(
            github_token="ghp_secret", openai_api_key="sk-secret"
        )

    @patch.dict(os.environ, {}, clear=True)
    def test_load_missing(self, store: CredentialStore) -> None:
        """Test that load names what is missing."""
        store.set(GITHUB_TOKEN, "ghp_secret")

        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            store.load()

    def test_unknown_name(self, store: CredentialStore) -> None:
        """Test that only the two known credentials are accepted."""
        with pytest.raises(ValueError, match="Unknown credential"):
            store.set("password", "x")
        with pytest.raises(ValueError, match="Unknown credential"):
            store.get("password")

    def test_empty_value_rejected(self, store: CredentialStore) -> None:
        """Test that empty values are not stored."""
        with pytest.raises(ValueError, match="empty"):
            store.set(GITHUB_TOKEN, "")

    def test_corrupt_file(self, store: CredentialStore) -> None:
        """Test that a corrupt file is reported."""
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{not json")

        with pytest.raises(ValueError, match="corrupt"):
            store.get(GITHUB_TOKEN)

    @patch.dict(os.environ, {}, clear=True)
    def test_masked(self, store: CredentialStore) -> None:
        """Test that masked output never reveals the secret."""
        assert store.masked(GITHUB_TOKEN) == "(not set)"

        store.set(GITHUB_TOKEN, "ghp_1234567890abcdef")
        masked = store.masked(GITHUB_TOKEN)
        assert masked.startswith("ghp_")
        assert masked.endswith("cdef")
        assert "567890" not in masked

        store.set(OPENAI_API_KEY, "short")
        assert store.masked(OPENAI_API_KEY) == "*****"
