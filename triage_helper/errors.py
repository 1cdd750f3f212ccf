"""Failure taxonomy shared by the fetcher, the completion client and the pipeline."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FailureKind(str, Enum):
    """Why a network-bound step failed."""

    NETWORK = "network"
    HTTP_STATUS = "http_status"
    PARSE = "parse"
    TIMEOUT = "timeout"


class TriageError(Exception):
    """Base class for all triage helper errors."""


class NotAnIssuePage(TriageError):
    """The location does not name an issue. Expected, not an error."""

    def __init__(self, location: str):
        super().__init__(f"Not an issue page: {location}")
        self.location = location


class RenderTargetMissing(TriageError):
    """The render sink has no anchor to attach to."""


class RunCancelled(TriageError):
    """A superseded run reached a resumption point."""


class ResourceFailure(TriageError):
    """A fetch or completion request failed."""

    def __init__(
        self,
        kind: FailureKind,
        detail: str,
        url: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(detail)
        self.kind = kind
        self.detail = detail
        self.url = url
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"ResourceFailure({self.kind.value!r}, {self.detail!r})"


class Success(BaseModel):
    """A fetch that returned a parsed JSON payload."""

    model_config = ConfigDict(frozen=True)

    payload: Any = Field(..., description="Decoded JSON body of the response")


class Failure(BaseModel):
    """A fetch that failed, normalized to one of the failure kinds."""

    model_config = ConfigDict(frozen=True)

    kind: FailureKind = Field(..., description="Failure category")
    detail: str = Field(..., description="Human readable description")
    url: str | None = Field(None, description="Requested URL")
    status_code: int | None = Field(None, description="HTTP status, if any")
    timeout_ms: int | None = Field(None, description="Deadline that elapsed")

    def to_error(self) -> ResourceFailure:
        return ResourceFailure(
            self.kind, self.detail, url=self.url, status_code=self.status_code
        )


ResourceResult = Success | Failure
