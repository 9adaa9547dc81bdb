"""Scrape request, result and retry models."""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_CITATION_TITLE = "Untitled"


class Citation(BaseModel):
    """A grounding source returned by the backend."""

    uri: str
    title: str = DEFAULT_CITATION_TITLE

    @field_validator("title", mode="before")
    @classmethod
    def default_title(cls, value: Optional[str]) -> str:
        return value or DEFAULT_CITATION_TITLE


class ScrapeRequest(BaseModel):
    """A single grounded query with its site filters."""

    query: str = Field(..., min_length=1, description="Free-text question")
    include_sites: List[str] = Field(default_factory=list)
    exclude_sites: List[str] = Field(default_factory=list)


class ScrapeResult(BaseModel):
    """Answer text plus deduplicated citations in first-seen order."""

    text: str
    sources: List[Citation] = Field(default_factory=list)


class GroundedAnswer(BaseModel):
    """Raw provider response before citation normalization."""

    text: str = ""
    citations: List[Citation] = Field(default_factory=list)


class RetryPolicy(BaseModel):
    """Bounded exponential backoff for overload failures."""

    max_attempts: int = Field(default=3, ge=1)
    initial_delay_ms: int = Field(default=1000, ge=0)
    multiplier: int = Field(default=2, ge=1)


class AttemptStatus(str, Enum):
    """Outcome of one backend attempt."""

    OK = "ok"
    RETRYABLE = "retryable"
    FATAL = "fatal"


class ErrorKind(str, Enum):
    """Classification of a failed backend call."""

    AUTH = "auth"
    OVERLOAD = "overload"
    UPSTREAM = "upstream"


class AttemptOutcome(BaseModel):
    """Result of one attempt, consumed by the orchestrator's retry loop."""

    status: AttemptStatus
    result: Optional[ScrapeResult] = None
    error_kind: Optional[ErrorKind] = None
    error_message: str = ""

    @classmethod
    def ok(cls, result: ScrapeResult) -> "AttemptOutcome":
        return cls(status=AttemptStatus.OK, result=result)

    @classmethod
    def failed(cls, kind: ErrorKind, message: str) -> "AttemptOutcome":
        status = AttemptStatus.RETRYABLE if kind == ErrorKind.OVERLOAD else AttemptStatus.FATAL
        return cls(status=status, error_kind=kind, error_message=message)
