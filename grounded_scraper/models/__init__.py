"""Data models for the application."""
from .command import (
    CommandResult,
    LineStyle,
    OutputLine,
    ParsedCommand,
    ResultKind,
)
from .scrape import (
    AttemptOutcome,
    AttemptStatus,
    Citation,
    ErrorKind,
    GroundedAnswer,
    RetryPolicy,
    ScrapeRequest,
    ScrapeResult,
)
from .state import AddSitesResult, SessionState, SiteList

__all__ = [
    "AddSitesResult",
    "AttemptOutcome",
    "AttemptStatus",
    "Citation",
    "CommandResult",
    "ErrorKind",
    "GroundedAnswer",
    "LineStyle",
    "OutputLine",
    "ParsedCommand",
    "ResultKind",
    "RetryPolicy",
    "ScrapeRequest",
    "ScrapeResult",
    "SessionState",
    "SiteList",
]
