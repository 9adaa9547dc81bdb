"""Rich rendering for the terminal interpreter."""
from rich.console import Console, Group
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from ..models import CommandResult, LineStyle, ResultKind, ScrapeResult
from ..services import messages

BANNER = r"""
   ____                           _          _   ____
  / ___|_ __ ___  _   _ _ __   __| | ___  __| | / ___|  ___ _ __ __ _ _ __   ___ _ __
 | |  _| '__/ _ \| | | | '_ \ / _` |/ _ \/ _` | \___ \ / __| '__/ _` | '_ \ / _ \ '__|
 | |_| | | | (_) | |_| | | | | (_| |  __/ (_| |  ___) | (__| | | (_| | |_) |  __/ |
  \____|_|  \___/ \__,_|_| |_|\__,_|\___|\__,_| |____/ \___|_|  \__,_| .__/ \___|_|
                                                                     |_|
"""

WELCOME_LINES = [
    "Welcome to the Grounded Scraper CLI.",
    "This tool uses web search grounding to scrape and verify information.",
]

LINE_STYLES = {
    LineStyle.INFO: "",
    LineStyle.SUCCESS: "green",
    LineStyle.WARNING: "yellow",
    LineStyle.ERROR: "red",
}


def show_welcome(console: Console) -> None:
    """Print the banner and the welcome text."""
    console.print(Text(BANNER, style="green"))
    for line in WELCOME_LINES:
        console.print(line)
    console.print("Type [yellow]help[/yellow] to see a list of available commands.")
    console.print()


def show_help(console: Console) -> None:
    """Print the command reference grouped by section."""
    console.print("[bold yellow]Available Commands:[/bold yellow]")
    for section, commands in messages.HELP_SECTIONS:
        console.print(f"\n[bold yellow]-- {section} --[/bold yellow]")
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("Command", style="cyan", no_wrap=True, min_width=30)
        table.add_column("Description", style="white")
        for usage, description in commands:
            table.add_row(usage, f"- {description}")
        console.print(table)


def create_result_panel(title: str, result: ScrapeResult) -> Panel:
    """Box the answer text and its sources."""
    parts = [
        Text(title, style="bold yellow"),
        Rule(style="cyan"),
        Text(""),
        Text(result.text),
    ]

    if result.sources:
        parts.append(Text(""))
        parts.append(Text("SOURCES:", style="bold dark_orange"))
        for source in result.sources:
            parts.append(Text(""))
            parts.append(Text(f"  {source.title}", style="white"))
            parts.append(Text(f"  {source.uri}", style="underline cyan"))

    return Panel(Group(*parts), border_style="cyan")


def render_result(console: Console, result: CommandResult) -> None:
    """Print a dispatched command's output.

    CLEAR and EXIT are handled by the interpreter loop.
    """
    if result.kind == ResultKind.HELP:
        show_help(console)
        return

    if result.kind == ResultKind.SITE_LIST:
        console.print(Text(result.title or "", style="bold"))
        for site in result.sites:
            console.print(Text(f"- {site}"))
        return

    if result.kind == ResultKind.SCRAPE and result.scrape is not None:
        console.print(create_result_panel(result.title or "", result.scrape))
        return

    for line in result.lines:
        console.print(Text(line.text, style=LINE_STYLES[line.style]))
