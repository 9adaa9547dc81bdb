"""Storage backends for session state."""
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..config import settings
from ..exceptions import PersistenceError
from ..models import SessionState


class StateStore(ABC):
    """Loads and saves SessionState as a whole."""

    @abstractmethod
    def load(self) -> SessionState:
        """Load persisted state, or defaults when nothing is stored.

        Raises:
            PersistenceError: Stored data exists but cannot be parsed
        """
        pass

    @abstractmethod
    def save(self, state: SessionState) -> None:
        """Persist state, replacing whatever was stored.

        Raises:
            PersistenceError: The write failed
        """
        pass


class JsonFileStateStore(StateStore):
    """Keeps the state as a single JSON object in one file."""

    def __init__(self, path: Optional[Path] = None):
        """Initialize the file store.

        Args:
            path: State file location. Defaults to settings.state_path
        """
        self.path = Path(path) if path is not None else settings.state_path

    def load(self) -> SessionState:
        if not self.path.exists():
            return SessionState()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise PersistenceError(
                    f"Expected a JSON object in {self.path}, got {type(data).__name__}"
                )
            return SessionState.model_validate(data)
        except PersistenceError:
            raise
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise PersistenceError(f"Failed to load state from {self.path}: {e}") from e

    def save(self, state: SessionState) -> None:
        try:
            if self.path.parent and not self.path.parent.exists():
                self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(state.to_storage(), f, indent=2)
        except (OSError, TypeError) as e:
            raise PersistenceError(f"Failed to save state to {self.path}: {e}") from e


class MemoryStateStore(StateStore):
    """Keeps a detached copy of the state in memory."""

    def __init__(self, state: Optional[SessionState] = None):
        self._state = state.model_copy(deep=True) if state is not None else None
        self.save_count = 0

    def load(self) -> SessionState:
        if self._state is None:
            return SessionState()
        return self._state.model_copy(deep=True)

    def save(self, state: SessionState) -> None:
        self._state = state.model_copy(deep=True)
        self.save_count += 1
