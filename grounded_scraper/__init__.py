"""Grounded scraper: site-scoped questions answered by grounded web search."""
from .config import Settings, settings
from .exceptions import (
    AuthError,
    OverloadError,
    PersistenceError,
    ScraperError,
    UpstreamError,
)
from .models import Citation, CommandResult, ScrapeResult, SessionState, SiteList
from .services import (
    CommandDispatcher,
    JsonFileStateStore,
    RequestOrchestrator,
    StateManager,
)

__version__ = "1.0.0"

__all__ = [
    "Settings",
    "settings",
    "AuthError",
    "OverloadError",
    "PersistenceError",
    "ScraperError",
    "UpstreamError",
    "Citation",
    "CommandResult",
    "ScrapeResult",
    "SessionState",
    "SiteList",
    "CommandDispatcher",
    "JsonFileStateStore",
    "RequestOrchestrator",
    "StateManager",
]
