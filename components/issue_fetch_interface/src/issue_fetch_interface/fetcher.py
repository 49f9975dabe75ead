"""Core fetcher and configuration loader contracts."""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType

from issue_fetch_interface.settings import ConnectionSettings

__all__ = ["ConfigLoader", "IssueFetcher"]


class ConfigLoader(ABC):
    """Supplies connection settings."""

    @abstractmethod
    def load(self) -> ConnectionSettings:
        """Load the connection settings.

        Notes on usage: Implementations decide where the settings come from. Tests can
        substitute any loader returning fixed settings.

        Returns:
            A fully populated ConnectionSettings instance

        Raises:
            ConfigBootstrapError: If the settings cannot be read or created

        """
        raise NotImplementedError


class IssueFetcher(ABC):
    """Retrieves one textual representation of an issue."""

    def __init__(self, settings: ConnectionSettings) -> None:
        self._settings = settings

    @property
    def settings(self) -> ConnectionSettings:
        """Return settings."""
        return self._settings

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def open(self) -> None:
        """Acquire whatever the fetcher needs before fetch() can be called.

        The default does nothing. Implementations holding a session validate it here.

        Raises:
            RemoteConnectionError: If the remote cannot be reached
            AuthenticationError: If the credentials are rejected

        """

    def close(self) -> None:
        """Release held resources. Must be safe to call more than once."""

    def __enter__(self) -> IssueFetcher:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Fetch
    # ------------------------------------------------------------------
    @abstractmethod
    def fetch(self, issue_key: str) -> str:
        """Fetch an issue.

        Args:
            issue_key: The issue key (e.g. 'PROJ-1')

        Returns:
            The text payload to persist

        Raises:
            FetchError: A subclass describing what went wrong

        """
        raise NotImplementedError

    @abstractmethod
    def artifact_name(self, issue_key: str) -> str:
        """Return the file name the fetched payload is saved under."""
        raise NotImplementedError
