"""GitHub client package for API interaction."""

from .aggregator import DataAggregator, decode_readme
from .context import IssueContext, extract_issue_context, is_duplicate_load
from .fetcher import ResourceFetcher, github_headers
from .models import (
    Aggregate,
    CommentEntry,
    GitHubComment,
    GitHubIssue,
    GitHubReadme,
    GitHubUser,
    Suggestion,
)

__all__ = [
    "Aggregate",
    "CommentEntry",
    "DataAggregator",
    "GitHubComment",
    "GitHubIssue",
    "GitHubReadme",
    "GitHubUser",
    "IssueContext",
    "ResourceFetcher",
    "Suggestion",
    "decode_readme",
    "extract_issue_context",
    "github_headers",
    "is_duplicate_load",
]
