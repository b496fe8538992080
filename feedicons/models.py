"""Data models for favicon resolution"""

import base64
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class FetchFailure(str, Enum):
    """Reasons a single guarded fetch can fail."""

    INVALID_URL = "invalid_url"
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    BAD_STATUS = "bad_status"
    CONTENT_TYPE_REJECTED = "content_type_rejected"
    EMPTY_BODY = "empty_body"


class FetchResult(BaseModel):
    """Outcome of one guarded icon fetch: either a payload or a failure reason."""

    url: str
    content: bytes = b""
    content_type: str = ""
    failure: Optional[FetchFailure] = None
    truncated: bool = Field(
        default=False, description="Whether the body was cut at the size ceiling"
    )

    @classmethod
    def failed(cls, url: str, failure: FetchFailure) -> "FetchResult":
        """Build a failed result for the given URL."""
        return cls(url=url, failure=failure)

    @property
    def ok(self) -> bool:
        """Return True if the fetch produced a payload."""
        return self.failure is None

    def to_data_url(self) -> str:
        """Encode the payload as an embeddable `data:` URL."""
        encoded = base64.b64encode(self.content).decode("ascii")
        return f"data:{self.content_type};base64,{encoded}"


class ResolutionState(str, Enum):
    """States a domain goes through while its favicon is resolved."""

    START = "start"
    HTML_DISCOVERY = "html_discovery"
    CANDIDATE_CASCADE = "candidate_cascade"
    RESOLVED = "resolved"
    EXHAUSTED = "exhausted"


class DomainResolution(BaseModel):
    """Result of resolving the favicon of a domain."""

    domain: str
    state: ResolutionState = ResolutionState.START
    icon_url: Optional[str] = None
    data_url: Optional[str] = None
    attempts: int = 0

    @property
    def resolved(self) -> bool:
        """Return True if a favicon was found."""
        return self.state is ResolutionState.RESOLVED
