"""Custom exceptions for the grounded scraper."""


class ScraperError(Exception):
    """Base exception for grounded scraper errors."""

    pass


class AuthError(ScraperError):
    """Raised when the backend rejects the configured credential."""

    pass


class OverloadError(ScraperError):
    """Raised when the backend stays overloaded after every retry."""

    pass


class UpstreamError(ScraperError):
    """Raised for any other backend or network failure."""

    pass


class PersistenceError(ScraperError):
    """Raised when session state cannot be loaded or saved."""

    pass
