"""Services for the application."""
from .dispatcher import CommandDispatcher, parse_command
from .orchestrator import RequestOrchestrator, build_scoped_query, dedupe_citations
from .search_provider import ClaudeSearchProvider, GroundedSearchProvider, get_search_provider
from .state_manager import StateManager
from .state_store import JsonFileStateStore, MemoryStateStore, StateStore

__all__ = [
    "CommandDispatcher",
    "parse_command",
    "RequestOrchestrator",
    "build_scoped_query",
    "dedupe_citations",
    "ClaudeSearchProvider",
    "GroundedSearchProvider",
    "get_search_provider",
    "StateManager",
    "JsonFileStateStore",
    "MemoryStateStore",
    "StateStore",
]
