"""State manager: session state mutations with persist-after-write."""
from typing import Iterable

from ..exceptions import PersistenceError
from ..models import AddSitesResult, SessionState, SiteList
from ..utils.logger import logger
from .state_store import StateStore


class StateManager:
    """Owns the in-memory SessionState and persists it after every mutation.

    The in-memory state stays authoritative for the session; failed saves
    are logged and otherwise ignored.
    """

    def __init__(self, store: StateStore, state: SessionState):
        """Initialize the state manager.

        Args:
            store: Backend the state is persisted to
            state: Current in-memory state
        """
        self.store = store
        self.state = state

    @classmethod
    def load(cls, store: StateStore) -> "StateManager":
        """Load state from a store, falling back to defaults on bad data."""
        try:
            state = store.load()
        except PersistenceError as e:
            logger.error(f"[STATE] Error loading state, using defaults: {e}")
            state = SessionState()
        return cls(store=store, state=state)

    def add_sites(
        self, sites: Iterable[str], target: SiteList = SiteList.PRIORITY
    ) -> AddSitesResult:
        """Append sites not already present in the target list.

        Args:
            sites: Sites to add (case-sensitive exact match)
            target: Which list to add to

        Returns:
            Partition of the requested sites into added and duplicates
        """
        current = self.state.get_list(target)
        result = AddSitesResult()
        for site in sites:
            if site in current or site in result.added:
                result.duplicates.append(site)
            else:
                result.added.append(site)

        if result.added:
            current.extend(result.added)
            self._persist()
        return result

    def remove_site(self, site: str, target: SiteList = SiteList.PRIORITY) -> bool:
        """Remove a site from the target list.

        Returns:
            True if the site was present
        """
        current = self.state.get_list(target)
        if site not in current:
            return False

        current[:] = [s for s in current if s != site]
        self._persist()
        return True

    def clear_sites(self, target: SiteList = SiteList.PRIORITY) -> bool:
        """Empty the target list.

        Returns:
            True if the list had entries
        """
        current = self.state.get_list(target)
        if not current:
            return False

        current.clear()
        self._persist()
        return True

    def set_morning_query(self, text: str) -> bool:
        """Replace the morning query when text is non-empty."""
        if not text:
            return False

        self.state.morning_query = text
        self._persist()
        return True

    def _persist(self) -> None:
        try:
            self.store.save(self.state)
        except PersistenceError as e:
            logger.error(f"[STATE] Error saving state: {e}")
