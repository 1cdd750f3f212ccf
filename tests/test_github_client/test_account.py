"""Tests for GitHub token verification."""

from unittest.mock import Mock, patch

import pytest
from github.GithubException import BadCredentialsException, GithubException

from triage_helper.github_client.account import verify_github_token


class TestVerifyGithubToken:
    """Test verify_github_token."""

    @patch("triage_helper.github_client.account.Github")
    def test_returns_login(self, mock_github_class: Mock) -> None:
        """Test that a valid token yields the account login."""
        mock_github = Mock()
        mock_github.get_user.return_value.login = "alice"
        mock_github_class.return_value = mock_github

        assert verify_github_token("good_token") == "alice"
        mock_github.close.assert_called_once()

    @patch("triage_helper.github_client.account.Github")
    def test_bad_credentials(self, mock_github_class: Mock) -> None:
        """Test that a rejected token raises ValueError."""
        mock_github = Mock()
        mock_github.get_user.side_effect = BadCredentialsException(
            401, {"message": "Bad credentials"}, None
        )
        mock_github_class.return_value = mock_github

        with pytest.raises(ValueError, match="bad credentials"):
            verify_github_token("bad_token")
        mock_github.close.assert_called_once()

    @patch("triage_helper.github_client.account.Github")
    def test_other_api_error(self, mock_github_class: Mock) -> None:
        """Test that other API errors raise ValueError with the status."""
        mock_github = Mock()
        mock_github.get_user.side_effect = GithubException(
            503, {"message": "Unavailable"}, None
        )
        mock_github_class.return_value = mock_github

        with pytest.raises(ValueError, match="503"):
            verify_github_token("token")
