"""Outcome of a single fetch run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from issue_fetch_interface.errors import FetchError


class FetchState(str, Enum):
    IDLE = "idle"
    SESSION_ESTABLISHING = "session_establishing"
    SUMMARY_FETCHING = "summary_fetching"
    SUMMARY_SAVED = "summary_saved"
    XML_FETCHING = "xml_fetching"
    XML_SAVED = "xml_saved"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class FetchOutcome:
    """
    Returned to the caller instead of printing. The caller decides how to render it.

    history records every state visited, in order, starting with IDLE.
    """

    issue_key: str
    state: FetchState = FetchState.IDLE
    history: list[FetchState] = field(default_factory=lambda: [FetchState.IDLE])
    saved: list[Path] = field(default_factory=list)
    error: FetchError | None = None

    def advance(self, state: FetchState) -> None:
        """Move to the next state."""
        if self.state in (FetchState.DONE, FetchState.ABORTED):
            raise RuntimeError(f"Outcome for {self.issue_key} already finished in state {self.state.value}")
        self.state = state
        self.history.append(state)

    def abort(self, error: FetchError) -> None:
        """Record the error and move to ABORTED."""
        self.advance(FetchState.ABORTED)
        self.error = error

    @property
    def succeeded(self) -> bool:
        return self.state is FetchState.DONE

    @property
    def partial(self) -> bool:
        """Return True when the run aborted after at least one artifact was written."""
        return self.state is FetchState.ABORTED and bool(self.saved)
