"""Render-ready command output models."""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .scrape import ScrapeResult


class ResultKind(str, Enum):
    """What the presentation layer should do with a command result."""

    MESSAGE = "message"
    HELP = "help"
    SITE_LIST = "site_list"
    SCRAPE = "scrape"
    CLEAR = "clear"
    EXIT = "exit"
    NOOP = "noop"


class LineStyle(str, Enum):
    """Semantic style of an output line."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class OutputLine(BaseModel):
    """A single line of command output."""

    text: str
    style: LineStyle = LineStyle.INFO


class ParsedCommand(BaseModel):
    """An input line split into a lower-cased verb and its arguments."""

    raw: str
    name: str = ""  # verb as typed
    verb: str = ""
    args: List[str] = Field(default_factory=list)
    arg_text: str = ""  # everything after the verb, spacing kept


class CommandResult(BaseModel):
    """Output of a dispatched command."""

    command: str
    kind: ResultKind = ResultKind.MESSAGE
    lines: List[OutputLine] = Field(default_factory=list)
    title: Optional[str] = None
    sites: List[str] = Field(default_factory=list)
    scrape: Optional[ScrapeResult] = None

    def add_line(self, text: str, style: LineStyle = LineStyle.INFO) -> "CommandResult":
        self.lines.append(OutputLine(text=text, style=style))
        return self

    @property
    def is_error(self) -> bool:
        return any(line.style == LineStyle.ERROR for line in self.lines)
