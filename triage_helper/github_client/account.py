"""GitHub token verification using PyGitHub."""

from github import Auth, Github
from github.GithubException import BadCredentialsException, GithubException


def verify_github_token(token: str) -> str:
    """Check that a token authenticates against GitHub.

    Args:
        token: GitHub personal access token

    Returns:
        Login of the account the token belongs to

    Raises:
        ValueError: If GitHub rejects the token or cannot be reached
    """
    github = Github(auth=Auth.Token(token))
    try:
        return str(github.get_user().login)
    except BadCredentialsException:
        raise ValueError("GitHub rejected the token (bad credentials)")
    except GithubException as e:
        raise ValueError(f"GitHub API error {e.status} while verifying token")
    finally:
        github.close()
