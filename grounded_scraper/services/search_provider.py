"""Grounded search provider abstraction for Claude with web search."""
from abc import ABC, abstractmethod
from typing import Any, List, Optional

import anthropic

from ..config import settings
from ..exceptions import UpstreamError
from ..models import Citation, ErrorKind, GroundedAnswer
from ..utils.logger import logger

OVERLOAD_STATUS_CODES = {503, 529}
INVALID_KEY_MARKERS = ("invalid x-api-key", "api key not valid")
SEARCH_BLOCK_TYPES = ("server_tool_use", "web_search_tool_result")
MAX_CONTINUATIONS = 3


class GroundedSearchProvider(ABC):
    """Abstract base class for search-grounded answering backends."""

    @abstractmethod
    async def generate_grounded_answer(
        self, query: str, system_instruction: str
    ) -> GroundedAnswer:
        """Answer a query from live search results.

        Args:
            query: Scoped search query
            system_instruction: Fixed instruction constraining the answer

        Returns:
            Answer text with the citations the backend grounded it on
        """
        pass

    @abstractmethod
    def classify_error(self, error: Exception) -> ErrorKind:
        """Map a backend exception onto an ErrorKind."""
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Return provider name for logging."""
        pass


class ClaudeSearchProvider(GroundedSearchProvider):
    """Claude Messages API with the server-side web_search tool."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        max_searches: Optional[int] = None,
        client: Optional[anthropic.AsyncAnthropic] = None,
    ):
        """Initialize Claude search provider.

        Args:
            api_key: Anthropic API key. Defaults to settings.anthropic_api_key
            model: Model name to use. Defaults to settings.search_model
            max_tokens: Maximum tokens to generate
            max_searches: Maximum web searches per request
            client: Pre-built client, mainly for tests
        """
        self.model = model or settings.search_model
        self.max_tokens = max_tokens or settings.max_tokens
        self.max_searches = max_searches or settings.web_search_max_uses
        # SDK-level retries are disabled; the orchestrator owns the retry policy
        self.client = client or anthropic.AsyncAnthropic(
            api_key=api_key or settings.anthropic_api_key,
            max_retries=0,
        )

    async def generate_grounded_answer(
        self, query: str, system_instruction: str
    ) -> GroundedAnswer:
        logger.info(f"[LLM] Calling Claude {self.model} with web search...")
        content: List[Any] = []

        # A paused turn is resumed by sending its content back as the assistant turn
        for _ in range(MAX_CONTINUATIONS + 1):
            messages = [{"role": "user", "content": query}]
            if content:
                messages.append({"role": "assistant", "content": content})

            message = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=system_instruction,
                messages=messages,
                tools=[
                    {
                        "type": "web_search_20250305",
                        "name": "web_search",
                        "max_uses": self.max_searches,
                    }
                ],
            )
            content = content + list(getattr(message, "content", None) or [])
            stop_reason = getattr(message, "stop_reason", None)

            if stop_reason == "pause_turn":
                logger.info(f"[LLM] Claude {self.model} paused a long-running turn, continuing")
                continue
            if stop_reason == "max_tokens":
                raise UpstreamError(f"Answer truncated after {self.max_tokens} tokens")

            logger.info(f"[LLM] Claude {self.model} responded")
            return self._parse_content(content)

        raise UpstreamError(
            f"Search turn still paused after {MAX_CONTINUATIONS} continuations"
        )

    def _parse_message(self, message: Any) -> GroundedAnswer:
        return self._parse_content(getattr(message, "content", None) or [])

    def _parse_content(self, blocks: List[Any]) -> GroundedAnswer:
        """Collect answer text and grounding citations from content blocks.

        Only text written after the last search step is the answer; narration
        before a search is discarded. Citations come from web_search_tool_result
        blocks and from the citations attached to text blocks, in block order.
        Entries without a URL are dropped here; deduplication is left to the
        caller.
        """
        text_parts: List[str] = []
        citations: List[Citation] = []

        for block in blocks:
            block_type = getattr(block, "type", None)

            if block_type == "text":
                text_parts.append(getattr(block, "text", "") or "")
                for citation in getattr(block, "citations", None) or []:
                    self._append_citation(citations, citation)

            elif block_type in SEARCH_BLOCK_TYPES:
                text_parts = []
                results = getattr(block, "content", None)
                # An error result is a single object, not a list
                if block_type == "web_search_tool_result" and isinstance(results, list):
                    for result in results:
                        self._append_citation(citations, result)

        return GroundedAnswer(text="".join(text_parts), citations=citations)

    @staticmethod
    def _append_citation(citations: List[Citation], source: Any) -> None:
        url = getattr(source, "url", None)
        if not url:
            return
        citations.append(Citation(uri=url, title=getattr(source, "title", None)))

    def classify_error(self, error: Exception) -> ErrorKind:
        if isinstance(error, anthropic.AuthenticationError):
            return ErrorKind.AUTH
        if isinstance(error, anthropic.APIStatusError):
            if error.status_code in OVERLOAD_STATUS_CODES:
                return ErrorKind.OVERLOAD
        message = str(error).lower()
        if any(marker in message for marker in INVALID_KEY_MARKERS):
            return ErrorKind.AUTH
        return ErrorKind.UPSTREAM

    def get_name(self) -> str:
        return f"Claude ({self.model})"


def get_search_provider(api_key: Optional[str] = None) -> GroundedSearchProvider:
    """Get the grounded search provider.

    Args:
        api_key: Optional credential override

    Returns:
        Provider instance
    """
    return ClaudeSearchProvider(api_key=api_key)
