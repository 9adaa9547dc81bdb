"""Interactive terminal interpreter for grounded, site-scoped queries.

Examples:

    # Start the interpreter (reads ANTHROPIC_API_KEY from the environment or .env)
    grounded-scraper

    # Or run the module directly
    python -m grounded_scraper.cli.interpreter
"""
import asyncio
from typing import Any, Callable, Optional

import typer
from rich.console import Console
from rich.status import Status

from ..config import settings
from ..models import ResultKind
from ..services import (
    CommandDispatcher,
    JsonFileStateStore,
    RequestOrchestrator,
    StateManager,
)
from ..utils.logger import logger
from .render import render_result, show_welcome

app = typer.Typer(add_completion=False)
console = Console()

PROMPT = "[green]>[/green] "
PROCESSING_TEXT = "Scraping the web with grounded search..."
GOODBYE = "Exiting Scraper CLI. Goodbye!"


class TerminalInterpreter:
    """Read-dispatch-render loop over a CommandDispatcher."""

    def __init__(
        self,
        dispatcher: CommandDispatcher,
        console: Console,
        read_line: Optional[Callable[[], str]] = None,
    ):
        """Initialize the interpreter.

        Args:
            dispatcher: Command dispatcher bound to the session state
            console: Rich console used for all output
            read_line: Input function; defaults to prompting on the console
        """
        self.dispatcher = dispatcher
        self.console = console
        self.read_line = read_line or (lambda: self.console.input(PROMPT))
        self._status: Optional[Status] = None

    def on_progress(self, event_type: str, data: Any) -> None:
        """Drive the spinner and retry notices from dispatcher events."""
        if event_type == "scrape_started":
            self._status = self.console.status(
                f"[yellow]{PROCESSING_TEXT}[/yellow]", spinner="line"
            )
            self._status.start()
        elif event_type == "scrape_finished":
            if self._status is not None:
                self._status.stop()
                self._status = None
        elif event_type == "retry":
            self.console.print(
                f"[yellow]Model is overloaded. Retrying in {data['delay_ms'] / 1000:g}s... "
                f"({data['attempt']}/{data['max_attempts']})[/yellow]"
            )

    async def run_command(self, line: str) -> bool:
        """Dispatch and render one line.

        Returns:
            True when the interpreter should exit
        """
        result = await self.dispatcher.dispatch(line, progress_callback=self.on_progress)

        if result.kind == ResultKind.EXIT:
            return True
        if result.kind == ResultKind.NOOP:
            return False

        if result.kind == ResultKind.CLEAR:
            self.console.clear()
            show_welcome(self.console)
        else:
            render_result(self.console, result)
        self.console.print()
        return False

    async def run(self) -> None:
        """Process input lines until exit, EOF or interrupt."""
        show_welcome(self.console)

        while True:
            try:
                line = self.read_line()
            except (EOFError, KeyboardInterrupt):
                self.console.print()
                break

            if await self.run_command(line):
                break

        self.console.print(f"[yellow]{GOODBYE}[/yellow]")


def build_dispatcher() -> CommandDispatcher:
    """Wire the file-backed state and the default orchestrator."""
    state_manager = StateManager.load(JsonFileStateStore())
    logger.info(f"[STATE] Loaded state from {settings.state_path}")
    return CommandDispatcher(state_manager, RequestOrchestrator())


@app.command()
def main():
    """
    Start the interactive grounded scraper.

    Type 'help' at the prompt for the list of commands.
    """
    if not settings.has_api_key:
        console.print("[bold red]ERROR: ANTHROPIC_API_KEY environment variable not set.[/bold red]")
        console.print("Please set your Anthropic API key and restart the application.")
        raise typer.Exit(1)

    console.clear()
    interpreter = TerminalInterpreter(build_dispatcher(), console)
    asyncio.run(interpreter.run())


if __name__ == "__main__":
    app()
