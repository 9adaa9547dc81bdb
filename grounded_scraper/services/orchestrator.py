"""Request orchestrator for site-scoped grounded queries."""
import asyncio
from typing import Any, Awaitable, Callable, List, Optional, Sequence

from ..config import settings
from ..exceptions import AuthError, OverloadError, UpstreamError
from ..models import (
    AttemptOutcome,
    AttemptStatus,
    Citation,
    ErrorKind,
    RetryPolicy,
    ScrapeRequest,
    ScrapeResult,
)
from ..utils.logger import logger
from .search_provider import GroundedSearchProvider, get_search_provider

NOT_FOUND_MESSAGE = (
    "The requested information could not be found on the provided websites "
    "within the last 48 hours."
)

SYSTEM_INSTRUCTION = f"""You are a specialized news extraction assistant. Your task is to answer the user's query based ONLY on the information returned by a site-restricted web search.

**Your instructions are**:
1.  **Strict Source Adherence**: Provide an answer synthesized exclusively from the search results. DO NOT use any other information or websites.
2.  **Recency Requirement**: Prioritize information published within the last 48 hours.
3.  **Mandatory Citation**: You MUST cite the specific article title and URL for all pieces of information in your answer.
4.  **Failure Condition**: If the search results do not contain a relevant answer from the last 48 hours, you MUST respond with the exact phrase: "{NOT_FOUND_MESSAGE}" Do not apologize or add extra text."""

AUTH_ERROR_MESSAGE = (
    "The provided API key is not valid. Please check your environment configuration."
)
OVERLOAD_ERROR_MESSAGE = "The model is currently overloaded. Please try again later."
UPSTREAM_ERROR_MESSAGE = "Failed to fetch data from the search API"

ProgressCallback = Callable[[str, Any], None]
SleepFunc = Callable[[float], Awaitable[Any]]


def build_scoped_query(
    query: str, include_sites: Sequence[str], exclude_sites: Sequence[str]
) -> str:
    """Append site inclusion and exclusion operators to a query.

    >>> build_scoped_query("X", ["a.com", "b.com"], ["c.com"])
    'X site:a.com OR site:b.com -site:c.com'
    """
    site_clause = " OR ".join(f"site:{site.strip()}" for site in include_sites)
    exclude_clause = " ".join(f"-site:{site.strip()}" for site in exclude_sites)
    return f"{query} {site_clause} {exclude_clause}".strip()


def dedupe_citations(citations: Sequence[Citation]) -> List[Citation]:
    """Drop citations without a URI and keep the first one seen per URI."""
    seen = set()
    sources = []
    for citation in citations:
        if not citation.uri or citation.uri in seen:
            continue
        seen.add(citation.uri)
        sources.append(citation)
    return sources


def default_retry_policy() -> RetryPolicy:
    return RetryPolicy(
        max_attempts=settings.max_retries,
        initial_delay_ms=settings.initial_retry_delay_ms,
        multiplier=settings.retry_backoff_multiplier,
    )


class RequestOrchestrator:
    """Submits scoped queries and retries overload failures with backoff."""

    def __init__(
        self,
        provider: Optional[GroundedSearchProvider] = None,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Optional[SleepFunc] = None,
    ):
        """Initialize the orchestrator.

        Args:
            provider: Grounded search provider. Defaults to the Claude provider
            retry_policy: Backoff policy. Defaults to the configured policy
            sleep: Coroutine used to wait between attempts, in seconds
        """
        self.provider = provider or get_search_provider()
        self.retry_policy = retry_policy or default_retry_policy()
        self._sleep = sleep or asyncio.sleep

    async def scrape(
        self,
        query: str,
        include_sites: Sequence[str],
        exclude_sites: Sequence[str],
        progress_callback: Optional[ProgressCallback] = None,
    ) -> ScrapeResult:
        """Answer a query restricted to the given sites.

        Args:
            query: Free-text question
            include_sites: Sites the search is restricted to (may be empty)
            exclude_sites: Sites the search suppresses
            progress_callback: Optional callback(event_type, data), receives
                "retry" events before each backoff sleep

        Returns:
            Answer text with deduplicated sources

        Raises:
            AuthError: The credential was rejected
            OverloadError: The backend stayed overloaded on every attempt
            UpstreamError: Any other backend failure
        """
        request = ScrapeRequest(
            query=query,
            include_sites=list(include_sites),
            exclude_sites=list(exclude_sites),
        )
        scoped_query = build_scoped_query(
            request.query, request.include_sites, request.exclude_sites
        )
        logger.info(f"[SCRAPE] Scoped query: {scoped_query}")

        policy = self.retry_policy
        delay_ms = policy.initial_delay_ms
        outcome = None

        for attempt in range(policy.max_attempts):
            outcome = await self._attempt(scoped_query)

            if outcome.status == AttemptStatus.OK:
                return outcome.result

            if outcome.status == AttemptStatus.RETRYABLE and attempt < policy.max_attempts - 1:
                logger.info(
                    f"[SCRAPE] Model is overloaded. Retrying in {delay_ms / 1000:g}s... "
                    f"({attempt + 1}/{policy.max_attempts})"
                )
                self._send_progress(
                    progress_callback,
                    "retry",
                    {
                        "attempt": attempt + 1,
                        "max_attempts": policy.max_attempts,
                        "delay_ms": delay_ms,
                    },
                )
                await self._sleep(delay_ms / 1000)
                delay_ms *= policy.multiplier
                continue

            break

        raise self._to_exception(outcome)

    async def _attempt(self, scoped_query: str) -> AttemptOutcome:
        """Run one backend call and classify the outcome."""
        try:
            answer = await self.provider.generate_grounded_answer(
                scoped_query, SYSTEM_INSTRUCTION
            )
        except Exception as e:
            kind = self.provider.classify_error(e)
            logger.error(f"[LLM] {self.provider.get_name()} failed ({kind.value}): {e}")
            return AttemptOutcome.failed(kind, str(e))

        return AttemptOutcome.ok(
            ScrapeResult(text=answer.text, sources=dedupe_citations(answer.citations))
        )

    @staticmethod
    def _to_exception(outcome: AttemptOutcome) -> Exception:
        if outcome.error_kind == ErrorKind.AUTH:
            return AuthError(AUTH_ERROR_MESSAGE)
        if outcome.error_kind == ErrorKind.OVERLOAD:
            return OverloadError(OVERLOAD_ERROR_MESSAGE)
        return UpstreamError(f"{UPSTREAM_ERROR_MESSAGE}: {outcome.error_message}")

    @staticmethod
    def _send_progress(
        callback: Optional[ProgressCallback], event_type: str, data: Any
    ) -> None:
        if callback:
            callback(event_type, data)
