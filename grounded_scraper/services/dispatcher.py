"""Command dispatcher: maps one input line onto state changes or a scrape."""
from typing import Any, Awaitable, Callable, Dict, Optional

from ..exceptions import ScraperError
from ..models import (
    CommandResult,
    LineStyle,
    ParsedCommand,
    ResultKind,
    SiteList,
)
from ..utils.logger import logger
from . import messages
from .orchestrator import ProgressCallback, RequestOrchestrator
from .state_manager import StateManager


def parse_command(line: str) -> ParsedCommand:
    """Split a line into a lower-cased verb, its args and the literal text after it."""
    tokens = line.split()
    if not tokens:
        return ParsedCommand(raw=line)
    rest = line.strip()[len(tokens[0]):].strip()
    return ParsedCommand(
        raw=line,
        name=tokens[0],
        verb=tokens[0].lower(),
        args=tokens[1:],
        arg_text=rest,
    )


class CommandDispatcher:
    """Interprets commands against a StateManager and a RequestOrchestrator."""

    def __init__(self, state_manager: StateManager, orchestrator: RequestOrchestrator):
        """Initialize the dispatcher.

        Args:
            state_manager: Owner of the session state
            orchestrator: Runs grounded queries for scrape commands
        """
        self.state_manager = state_manager
        self.orchestrator = orchestrator
        self._handlers: Dict[str, Callable[..., Awaitable[CommandResult]]] = {
            "help": self._help,
            "add-site": self._add_sites,
            "list-sites": self._list_sites,
            "remove-site": self._remove_site,
            "clear-sites": self._clear_sites,
            "add-exclude": self._add_sites,
            "list-excludes": self._list_sites,
            "remove-exclude": self._remove_site,
            "clear-excludes": self._clear_sites,
            "set-morning-query": self._set_morning_query,
            "scrape": self._scrape,
            "scrape-morning": self._scrape,
            "clear": self._clear,
            "exit": self._exit,
        }

    @property
    def state(self):
        return self.state_manager.state

    async def dispatch(
        self, line: str, progress_callback: Optional[ProgressCallback] = None
    ) -> CommandResult:
        """Run one command line.

        Args:
            line: Raw user input
            progress_callback: Optional callback(event_type, data); receives
                "scrape_started" and "scrape_finished" around backend calls,
                plus the orchestrator's "retry" events

        Returns:
            Render-ready result; backend errors are folded into an error line
        """
        command = parse_command(line)
        if not command.verb:
            return CommandResult(command=line, kind=ResultKind.NOOP)

        handler = self._handlers.get(command.verb)
        if handler is None:
            return CommandResult(command=line).add_line(
                messages.COMMAND_NOT_FOUND.format(verb=command.name)
            )

        return await handler(command, progress_callback)

    @staticmethod
    def _target(command: ParsedCommand) -> SiteList:
        return SiteList.EXCLUDED if "exclude" in command.verb else SiteList.PRIORITY

    async def _help(self, command: ParsedCommand, _progress=None) -> CommandResult:
        return CommandResult(command=command.raw, kind=ResultKind.HELP)

    async def _add_sites(self, command: ParsedCommand, _progress=None) -> CommandResult:
        result = CommandResult(command=command.raw)
        if not command.args:
            return result.add_line(messages.USAGE[command.verb])

        target = self._target(command)
        added = self.state_manager.add_sites(command.args, target)
        if target == SiteList.EXCLUDED:
            added_msg, dup_msg = messages.EXCLUDED_ADDED, messages.EXCLUDED_DUPLICATES
        else:
            added_msg, dup_msg = messages.PRIORITY_ADDED, messages.PRIORITY_DUPLICATES

        if added.added:
            result.add_line(added_msg.format(sites=", ".join(added.added)), LineStyle.SUCCESS)
        if added.duplicates:
            result.add_line(dup_msg.format(sites=", ".join(added.duplicates)), LineStyle.WARNING)
        return result

    async def _list_sites(self, command: ParsedCommand, _progress=None) -> CommandResult:
        target = self._target(command)
        sites = list(self.state.get_list(target))
        if target == SiteList.EXCLUDED:
            title, empty = messages.EXCLUDED_LIST_TITLE, messages.EXCLUDED_LIST_EMPTY
        else:
            title, empty = messages.PRIORITY_LIST_TITLE, messages.PRIORITY_LIST_EMPTY

        if not sites:
            return CommandResult(command=command.raw).add_line(empty)
        return CommandResult(
            command=command.raw, kind=ResultKind.SITE_LIST, title=title, sites=sites
        )

    async def _remove_site(self, command: ParsedCommand, _progress=None) -> CommandResult:
        result = CommandResult(command=command.raw)
        if not command.args:
            return result.add_line(messages.USAGE[command.verb])

        target = self._target(command)
        site = command.args[0]
        if target == SiteList.EXCLUDED:
            removed_msg, missing_msg = messages.EXCLUDED_REMOVED, messages.EXCLUDED_NOT_FOUND
        else:
            removed_msg, missing_msg = messages.PRIORITY_REMOVED, messages.PRIORITY_NOT_FOUND

        if self.state_manager.remove_site(site, target):
            return result.add_line(removed_msg.format(site=site))
        return result.add_line(missing_msg.format(site=site))

    async def _clear_sites(self, command: ParsedCommand, _progress=None) -> CommandResult:
        result = CommandResult(command=command.raw)
        target = self._target(command)
        if target == SiteList.EXCLUDED:
            cleared_msg, empty_msg = messages.EXCLUDED_CLEARED, messages.EXCLUDED_ALREADY_EMPTY
        else:
            cleared_msg, empty_msg = messages.PRIORITY_CLEARED, messages.PRIORITY_ALREADY_EMPTY

        if self.state_manager.clear_sites(target):
            return result.add_line(cleared_msg, LineStyle.SUCCESS)
        return result.add_line(empty_msg)

    async def _set_morning_query(self, command: ParsedCommand, _progress=None) -> CommandResult:
        result = CommandResult(command=command.raw)
        query = command.arg_text
        if not query:
            return result.add_line(messages.USAGE[command.verb])

        self.state_manager.set_morning_query(query)
        return result.add_line(messages.MORNING_QUERY_SET.format(query=query))

    async def _scrape(
        self, command: ParsedCommand, progress: Optional[ProgressCallback] = None
    ) -> CommandResult:
        result = CommandResult(command=command.raw)
        if not self.state.sites:
            return result.add_line(messages.NO_PRIORITY_SITES, LineStyle.ERROR)

        is_morning = command.verb == "scrape-morning"
        query = self.state.morning_query if is_morning else command.arg_text
        if not query:
            return result.add_line(messages.USAGE["scrape"])

        self._send_progress(progress, "scrape_started", {"query": query})
        try:
            scrape = await self.orchestrator.scrape(
                query,
                list(self.state.sites),
                list(self.state.excluded_sites),
                progress_callback=progress,
            )
        except ScraperError as e:
            logger.info(f"[SCRAPE] Command '{command.verb}' failed: {e}")
            return result.add_line(f"{messages.ERROR_PREFIX}{e}", LineStyle.ERROR)
        finally:
            self._send_progress(progress, "scrape_finished", {"query": query})

        title_template = messages.MORNING_TITLE if is_morning else messages.QUERY_TITLE
        result.kind = ResultKind.SCRAPE
        result.title = title_template.format(query=query)
        result.scrape = scrape
        return result

    async def _clear(self, command: ParsedCommand, _progress=None) -> CommandResult:
        return CommandResult(command=command.raw, kind=ResultKind.CLEAR)

    async def _exit(self, command: ParsedCommand, _progress=None) -> CommandResult:
        return CommandResult(command=command.raw, kind=ResultKind.EXIT)

    @staticmethod
    def _send_progress(callback: Optional[ProgressCallback], event_type: str, data: Any) -> None:
        if callback:
            callback(event_type, data)
