"""Tests for the Gradio browser interpreter helpers."""
import asyncio

import gradio as gr
import pytest

from grounded_scraper.config import settings
from grounded_scraper.frontend.app import (
    EXCLUDED_SITES_KEY,
    EXIT_UNAVAILABLE,
    MORNING_QUERY_KEY,
    PROCESSING_MARKDOWN,
    SITES_KEY,
    build_demo,
    render_markdown,
    run_command,
    state_from_browser,
)
from grounded_scraper.models import (
    Citation,
    CommandResult,
    LineStyle,
    ResultKind,
    ScrapeResult,
)
from grounded_scraper.services import RequestOrchestrator

from conftest import FakeProvider


class SlowProvider(FakeProvider):
    """Provider that keeps the request outstanding for a moment."""

    async def generate_grounded_answer(self, query, system_instruction):
        await asyncio.sleep(0.05)
        return await super().generate_grounded_answer(query, system_instruction)


async def collect(generator):
    return [item async for item in generator]


class TestStateFromBrowser:
    """Tests for rebuilding state from browser storage values."""

    def test_values_are_used(self):
        """Test browser values are used."""
        state = state_from_browser(["a.com"], ["b.com"], "Q")
        assert state.sites == ["a.com"]
        assert state.excluded_sites == ["b.com"]
        assert state.morning_query == "Q"

    def test_missing_values_fall_back_to_defaults(self):
        """Test missing values fall back to defaults."""
        state = state_from_browser(None, "not-a-list", "")
        assert state.sites == []
        assert state.excluded_sites == []
        assert state.morning_query == settings.default_morning_query


class TestRenderMarkdown:
    """Tests for Markdown rendering of command results."""

    def test_scrape_result(self):
        """Test scrape result."""
        result = CommandResult(
            command="scrape q",
            kind=ResultKind.SCRAPE,
            title='Query: "q"',
            scrape=ScrapeResult(text="Answer", sources=[Citation(uri="https://a.com", title="A")]),
        )
        markdown = render_markdown(result)
        assert '**Query: "q"**' in markdown
        assert "Answer" in markdown
        assert "[https://a.com](https://a.com)" in markdown

    def test_error_line_is_bold(self):
        """Test error line is bold."""
        result = CommandResult(command="x").add_line("Error: nope", LineStyle.ERROR)
        assert render_markdown(result) == "**Error: nope**"

    def test_exit_is_unavailable(self):
        """Test exit is unavailable."""
        assert render_markdown(CommandResult(command="exit", kind=ResultKind.EXIT)) == EXIT_UNAVAILABLE

    def test_help_lists_commands(self):
        """Test help lists commands."""
        markdown = render_markdown(CommandResult(command="help", kind=ResultKind.HELP))
        assert "`scrape-morning`" in markdown


class TestRunCommand:
    """Tests for the browser command handler."""

    @pytest.mark.asyncio
    async def test_add_site_updates_browser_values(self):
        """Test add site updates browser values."""
        outputs = await collect(
            run_command("add-site a.com", [], [], [], "Q", orchestrator=RequestOrchestrator(provider=FakeProvider([])))
        )

        assert len(outputs) == 1
        line, transcript, markdown, sites, excluded, morning = outputs[0]
        assert line == ""
        assert sites == ["a.com"]
        assert excluded == []
        assert morning == "Q"
        assert transcript == [{"command": "add-site a.com", "output": "Priority sites added: a.com"}]
        assert "`> add-site a.com`" in markdown

    @pytest.mark.asyncio
    async def test_scrape_shows_processing_then_result(self, answer):
        """Test scrape shows processing then result."""
        orchestrator = RequestOrchestrator(provider=SlowProvider([answer]))

        outputs = await collect(run_command("scrape news", [], ["a.com"], [], "Q", orchestrator=orchestrator))

        assert len(outputs) == 2
        assert outputs[0][1][-1]["output"] == PROCESSING_MARKDOWN
        assert "Answer text" in outputs[1][1][-1]["output"]
        assert PROCESSING_MARKDOWN not in outputs[1][2]

    @pytest.mark.asyncio
    async def test_scrape_without_sites_skips_processing(self):
        """Test scrape without sites skips processing."""
        provider = FakeProvider([])
        outputs = await collect(
            run_command("scrape news", [], [], [], "Q", orchestrator=RequestOrchestrator(provider=provider))
        )

        assert len(outputs) == 1
        assert outputs[0][1][-1]["output"].startswith("**Error: No priority sites")
        assert provider.queries == []

    @pytest.mark.asyncio
    async def test_clear_empties_transcript(self):
        """Test clear empties transcript."""
        history = [{"command": "help", "output": "..."}]
        outputs = await collect(
            run_command("clear", history, ["a.com"], [], "Q", orchestrator=RequestOrchestrator(provider=FakeProvider([])))
        )

        assert outputs[-1][1] == []
        assert outputs[-1][3] == ["a.com"]

    @pytest.mark.asyncio
    async def test_blank_input_changes_nothing(self):
        """Test blank input changes nothing."""
        outputs = await collect(run_command("  ", [], ["a.com"], [], "Q"))
        assert outputs == [("", [], "", ["a.com"], [], "Q")]


class TestBuildDemo:
    """Tests for the Gradio page layout."""

    def test_browser_state_keys_and_defaults(self):
        """Test that each session value is stored under its own browser key."""
        demo = build_demo()
        stores = {
            block.storage_key: block
            for block in demo.blocks.values()
            if isinstance(block, gr.BrowserState)
        }

        assert set(stores) == {SITES_KEY, EXCLUDED_SITES_KEY, MORNING_QUERY_KEY}
        assert SITES_KEY == "scraper-sites"
        assert EXCLUDED_SITES_KEY == "scraper-excluded-sites"
        assert MORNING_QUERY_KEY == "scraper-morning-query"
        assert stores[SITES_KEY].default_value == []
        assert stores[EXCLUDED_SITES_KEY].default_value == []
        assert stores[MORNING_QUERY_KEY].default_value == settings.default_morning_query

    def test_submit_and_button_share_wiring(self):
        """Test that both triggers read and write the three stored values."""
        demo = build_demo()
        keys = [SITES_KEY, EXCLUDED_SITES_KEY, MORNING_QUERY_KEY]

        handlers = [handler for handler in demo.fns.values() if handler.outputs]

        assert len(handlers) == 2
        for handler in handlers:
            assert len(handler.inputs) == 5
            assert len(handler.outputs) == 6
            assert [block.storage_key for block in handler.inputs[2:]] == keys
            assert [block.storage_key for block in handler.outputs[3:]] == keys
