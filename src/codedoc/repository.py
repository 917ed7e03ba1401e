"""Active-repository context passed explicitly to the indexer and searcher.

Holds the currently selected repository path for one session and notifies
subscribers when a different repository is selected.
"""

import logging
from collections.abc import Callable
from pathlib import Path

logger = logging.getLogger(__name__)

RepoSelectedCallback = Callable[[Path], object]


class RepositoryContext:
    """Selected repository for one session. Not shared between sessions."""

    def __init__(self, active_path: Path | str | None = None):
        self._active_path = self._normalize(active_path)
        self._subscribers: list[RepoSelectedCallback] = []

    @staticmethod
    def _normalize(path: Path | str | None) -> Path | None:
        if path is None or not str(path).strip():
            return None
        return Path(path).expanduser().resolve()

    @property
    def active_path(self) -> Path | None:
        return self._active_path

    def get_active_path(self) -> Path | None:
        """Path ingestion falls back to when none is given, or None."""
        return self._active_path

    def subscribe(self, callback: RepoSelectedCallback) -> None:
        """Call callback(path) every time select() changes the active repository."""
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: RepoSelectedCallback) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def select(self, path: Path | str) -> Path:
        """Set the active repository and notify subscribers in subscription order.

        Re-selecting the current path does not notify. Subscriber exceptions
        propagate to the caller of select().
        """
        resolved = self._normalize(path)
        if resolved is None:
            raise ValueError("Repository path must not be empty")
        if resolved == self._active_path:
            logger.debug("RepositoryContext: %s already selected", resolved)
            return resolved
        self._active_path = resolved
        logger.info("RepositoryContext: selected %s (%d subscribers)", resolved, len(self._subscribers))
        for callback in list(self._subscribers):
            callback(resolved)
        return resolved
