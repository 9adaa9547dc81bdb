"""Gradio browser interpreter for grounded, site-scoped queries.

Session state lives in browser storage under three independent keys, so each
visitor keeps their own site lists between page loads.
"""
import asyncio
from typing import Dict, List, Optional, Tuple

import gradio as gr

from ..cli.render import BANNER, WELCOME_LINES
from ..config import settings
from ..models import CommandResult, LineStyle, ResultKind, SessionState
from ..services import (
    CommandDispatcher,
    MemoryStateStore,
    RequestOrchestrator,
    StateManager,
    messages,
)
from ..utils.logger import logger

SITES_KEY = "scraper-sites"
EXCLUDED_SITES_KEY = "scraper-excluded-sites"
MORNING_QUERY_KEY = "scraper-morning-query"

PROCESSING_MARKDOWN = "_Processing..._"
EXIT_UNAVAILABLE = "The exit command is not available in the browser. Close the tab instead."
MISSING_KEY_WARNING = (
    "**ANTHROPIC_API_KEY is not set.** Site management works, "
    "but scrape commands will fail until a key is configured."
)

TranscriptEntry = Dict[str, str]

_orchestrator: Optional[RequestOrchestrator] = None


def get_orchestrator() -> RequestOrchestrator:
    """Lazily build the shared orchestrator."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = RequestOrchestrator()
    return _orchestrator


def state_from_browser(
    sites: Optional[List[str]],
    excluded_sites: Optional[List[str]],
    morning_query: Optional[str],
) -> SessionState:
    """Rebuild SessionState from the three browser-storage values."""
    state = SessionState()
    if isinstance(sites, list):
        state.sites = [str(site) for site in sites]
    if isinstance(excluded_sites, list):
        state.excluded_sites = [str(site) for site in excluded_sites]
    if isinstance(morning_query, str) and morning_query:
        state.morning_query = morning_query
    return state


def render_help_markdown() -> str:
    lines = ["**Available Commands:**"]
    for section, commands in messages.HELP_SECTIONS:
        lines.append(f"\n**-- {section} --**\n")
        for usage, description in commands:
            lines.append(f"- `{usage}` - {description}")
    return "\n".join(lines)


def render_markdown(result: CommandResult) -> str:
    """Render a command result as Markdown for the transcript."""
    if result.kind == ResultKind.HELP:
        return render_help_markdown()

    if result.kind == ResultKind.EXIT:
        return EXIT_UNAVAILABLE

    if result.kind == ResultKind.SITE_LIST:
        items = "\n".join(f"- {site}" for site in result.sites)
        return f"**{result.title}**\n\n{items}"

    if result.kind == ResultKind.SCRAPE and result.scrape is not None:
        parts = [f"**{result.title}**", result.scrape.text]
        if result.scrape.sources:
            sources = "\n".join(
                f"- **{source.title}**  \n  [{source.uri}]({source.uri})"
                for source in result.scrape.sources
            )
            parts.append(f"**Sources:**\n\n{sources}")
        return "\n\n".join(parts)

    rendered = []
    for line in result.lines:
        if line.style == LineStyle.ERROR:
            rendered.append(f"**{line.text}**")
        else:
            rendered.append(line.text)
    return "  \n".join(rendered)


def render_transcript(transcript: List[TranscriptEntry]) -> str:
    """Render the command history, newest last."""
    blocks = []
    for entry in transcript:
        blocks.append(f"`> {entry['command']}`\n\n{entry['output']}")
    return "\n\n---\n\n".join(blocks)


async def run_command(
    line: str,
    transcript: Optional[List[TranscriptEntry]],
    sites: Optional[List[str]],
    excluded_sites: Optional[List[str]],
    morning_query: Optional[str],
    orchestrator: Optional[RequestOrchestrator] = None,
):
    """Dispatch one command, yielding (input, transcript, markdown, sites, excluded, morning).

    A processing entry is yielded only while the orchestrator call is
    outstanding.
    """
    transcript = list(transcript or [])
    state = state_from_browser(sites, excluded_sites, morning_query)

    if not line or not line.strip():
        yield _outputs("", transcript, state)
        return

    manager = StateManager(MemoryStateStore(state), state)
    dispatcher = CommandDispatcher(manager, orchestrator or get_orchestrator())

    started = asyncio.Event()

    def on_progress(event_type: str, data) -> None:
        if event_type == "scrape_started":
            started.set()

    task = asyncio.create_task(dispatcher.dispatch(line, progress_callback=on_progress))
    waiter = asyncio.create_task(started.wait())
    await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    waiter.cancel()

    if started.is_set() and not task.done():
        pending = transcript + [{"command": line, "output": PROCESSING_MARKDOWN}]
        yield _outputs("", pending, manager.state)

    result = await task

    if result.kind == ResultKind.CLEAR:
        transcript = []
    elif result.kind != ResultKind.NOOP:
        transcript.append({"command": line, "output": render_markdown(result)})

    yield _outputs("", transcript, manager.state)


def _outputs(
    line: str, transcript: List[TranscriptEntry], state: SessionState
) -> Tuple[str, List[TranscriptEntry], str, List[str], List[str], str]:
    return (
        line,
        transcript,
        render_transcript(transcript),
        list(state.sites),
        list(state.excluded_sites),
        state.morning_query,
    )


def build_demo() -> gr.Blocks:
    """Build the Gradio interface."""
    with gr.Blocks(title="Grounded Scraper") as demo:
        gr.HTML(f"<pre style='color: #4ade80;'>{BANNER}</pre>")
        gr.Markdown(
            "  \n".join(WELCOME_LINES)
            + "  \nType `help` to see a list of available commands."
        )
        if not settings.has_api_key:
            gr.Markdown(MISSING_KEY_WARNING)

        # Browser-persisted session state
        sites_store = gr.BrowserState(
            [], storage_key=SITES_KEY, secret=settings.browser_state_secret
        )
        excluded_store = gr.BrowserState(
            [], storage_key=EXCLUDED_SITES_KEY, secret=settings.browser_state_secret
        )
        morning_store = gr.BrowserState(
            settings.default_morning_query,
            storage_key=MORNING_QUERY_KEY,
            secret=settings.browser_state_secret,
        )
        transcript_state = gr.State([])

        transcript_view = gr.Markdown(elem_classes="transcript")

        with gr.Row():
            command_input = gr.Textbox(
                label="Command",
                placeholder="Type a command, e.g. add-site example.com",
                scale=6,
                autofocus=True,
            )
            run_btn = gr.Button("Run", variant="primary", scale=1)

        inputs = [command_input, transcript_state, sites_store, excluded_store, morning_store]
        outputs = [
            command_input,
            transcript_state,
            transcript_view,
            sites_store,
            excluded_store,
            morning_store,
        ]

        command_input.submit(fn=run_command, inputs=inputs, outputs=outputs)
        run_btn.click(fn=run_command, inputs=inputs, outputs=outputs)

    return demo


def main():
    """Launch the browser interpreter."""
    if not settings.has_api_key:
        logger.error("ANTHROPIC_API_KEY environment variable not set; scrape commands will fail")

    demo = build_demo()
    demo.queue()
    demo.launch(
        server_port=settings.gradio_server_port,
        server_name=settings.gradio_server_name,
        share=False,
    )


if __name__ == "__main__":
    main()
