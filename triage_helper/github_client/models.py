"""Pydantic models for GitHub data structures and pipeline data.

The GitHub models map to the subset of GitHub's REST API v3 responses the
pipeline reads. Unknown fields are ignored.
API Reference: https://docs.github.com/en/rest/issues
"""

from pydantic import BaseModel, ConfigDict, Field

from .context import IssueContext

GHOST_LOGIN = "ghost"


class GitHubUser(BaseModel):
    """GitHub user model representing a user account.

    API Reference: https://docs.github.com/en/rest/users/users
    """

    login: str = Field(..., description="GitHub username/login (string)")


class GitHubIssue(BaseModel):
    """GitHub issue model.

    API Reference: https://docs.github.com/en/rest/issues/issues
    """

    user: GitHubUser | None = Field(
        None, description="Creator of the issue, null for deleted accounts"
    )
    title: str = Field(..., description="Short description/title of the issue")
    body: str | None = Field(None, description="Issue description in markdown")

    @property
    def author(self) -> str:
        return self.user.login if self.user else GHOST_LOGIN


class GitHubComment(BaseModel):
    """GitHub issue comment model.

    API Reference: https://docs.github.com/en/rest/issues/comments
    """

    user: GitHubUser | None = Field(
        None, description="Comment author, null for deleted accounts"
    )
    body: str | None = Field(None, description="Text content of the comment")

    @property
    def author(self) -> str:
        return self.user.login if self.user else GHOST_LOGIN


class GitHubReadme(BaseModel):
    """Repository readme as returned by the contents API.

    API Reference: https://docs.github.com/en/rest/repos/contents#get-a-repository-readme
    """

    content: str | None = Field(None, description="Base64 encoded file content")
    encoding: str | None = Field(None, description="Content encoding, 'base64'")


class CommentEntry(BaseModel):
    """One comment attributed to its author."""

    model_config = ConfigDict(frozen=True)

    author: str
    body: str


class Aggregate(BaseModel):
    """Readme, issue and comments combined for a single issue."""

    model_config = ConfigDict(frozen=True)

    context: IssueContext = Field(..., description="Issue the material belongs to")
    readme_text: str = Field("", description="Decoded repository readme")
    issue_author: str = Field(..., description="Login of the issue author")
    issue_title: str = Field(..., description="Issue title")
    issue_body: str = Field("", description="Issue description")
    comments: tuple[CommentEntry, ...] = Field(
        default_factory=tuple, description="Comments in creation order"
    )


class Suggestion(BaseModel):
    """Markdown returned by the completion endpoint."""

    model_config = ConfigDict(frozen=True)

    text: str
