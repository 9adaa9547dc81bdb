"""Shared fixtures for grounded scraper tests."""
import shutil
import tempfile
from pathlib import Path
from typing import List
from unittest.mock import Mock

import anthropic
import httpx
import pytest

from grounded_scraper.models import Citation, GroundedAnswer, SessionState
from grounded_scraper.services import (
    ClaudeSearchProvider,
    CommandDispatcher,
    MemoryStateStore,
    RequestOrchestrator,
    StateManager,
)

API_URL = "https://api.anthropic.com/v1/messages"


def make_status_error(status_code: int, message: str = "backend error") -> anthropic.APIStatusError:
    """Build a real SDK status error for a given HTTP status."""
    request = httpx.Request("POST", API_URL)
    response = httpx.Response(status_code, request=request)
    error_cls = anthropic.AuthenticationError if status_code == 401 else anthropic.APIStatusError
    return error_cls(message, response=response, body=None)


class FakeProvider(ClaudeSearchProvider):
    """Claude provider whose backend call replays scripted outcomes."""

    def __init__(self, outcomes: List):
        super().__init__(api_key="test-key", client=Mock())
        self.outcomes = list(outcomes)
        self.queries: List[str] = []
        self.system_instructions: List[str] = []

    async def generate_grounded_answer(self, query, system_instruction):
        self.queries.append(query)
        self.system_instructions.append(system_instruction)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class SleepRecorder:
    """Async sleep stand-in that records requested delays in seconds."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)

    @property
    def delays_ms(self) -> List[int]:
        return [round(d * 1000) for d in self.delays]


@pytest.fixture
def temp_state_dir():
    """Create a temporary directory for state files."""
    temp_dir = Path(tempfile.mkdtemp())
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()


@pytest.fixture
def answer():
    """A successful grounded answer with one repeated citation."""
    return GroundedAnswer(
        text="Answer text",
        citations=[
            Citation(uri="https://a.com/1", title="A1"),
            Citation(uri="https://b.com/1", title="B"),
            Citation(uri="https://a.com/1", title="A2"),
        ],
    )


@pytest.fixture
def provider_factory():
    return FakeProvider


@pytest.fixture
def memory_store():
    return MemoryStateStore()


@pytest.fixture
def state_manager(memory_store):
    return StateManager(store=memory_store, state=SessionState())


@pytest.fixture
def make_dispatcher(state_manager, sleep_recorder):
    """Build a dispatcher whose orchestrator replays the given outcomes."""

    def _make(outcomes=None):
        provider = FakeProvider(outcomes or [])
        orchestrator = RequestOrchestrator(provider=provider, sleep=sleep_recorder)
        return CommandDispatcher(state_manager, orchestrator), provider

    return _make
