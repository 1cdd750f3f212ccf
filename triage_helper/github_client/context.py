"""Derive the issue identity from a page location."""

import re
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field

ISSUE_PATH_PATTERN = re.compile(r"^/([^/]+)/([^/]+)/issues/(\d+)(?:/.*)?$")

# The host application loads notification links twice; the referrer variant
# is the duplicate.
DUPLICATE_LOAD_PATTERN = re.compile(r"/issues/\d+\?notification_referrer_id=")


class IssueContext(BaseModel):
    """Identifies one issue, and with it one pipeline run."""

    model_config = ConfigDict(frozen=True)

    owner: str = Field(..., description="Repository owner (user or organization)")
    repo: str = Field(..., description="Repository name")
    issue_number: int = Field(..., description="Issue number within the repository")

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    def __str__(self) -> str:
        return f"{self.slug}#{self.issue_number}"


def extract_issue_context(location: str) -> IssueContext | None:
    """Match ``/<owner>/<repo>/issues/<number>`` against a location.

    Args:
        location: Full URL or bare path; query and fragment are ignored

    Returns:
        IssueContext, or None when the location does not name an issue
    """
    path = urlsplit(location).path
    match = ISSUE_PATH_PATTERN.match(path)
    if not match:
        return None

    owner, repo, number = match.groups()
    return IssueContext(owner=owner, repo=repo, issue_number=int(number))


def is_duplicate_load(location: str) -> bool:
    """Check for the notification referrer variant of an issue URL."""
    return DUPLICATE_LOAD_PATTERN.search(location) is not None
