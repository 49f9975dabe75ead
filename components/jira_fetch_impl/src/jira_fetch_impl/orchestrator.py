"""
Fetch orchestration
-------------------
One run fetches a single issue in two steps:

1. the summary, through a validated REST session, saved as '<key>.txt'
2. the XML export, saved as '<key>_details.xml'

A failed summary step aborts the run before the export is attempted. A failed
export also aborts, but the summary file written in step 1 is kept and reported
in the outcome. Both fetchers are closed whatever happens.
"""
from __future__ import annotations

import logging

from issue_fetch_interface.errors import FetchError
from issue_fetch_interface.fetcher import ConfigLoader, IssueFetcher
from issue_fetch_interface.outcome import FetchOutcome, FetchState
from issue_fetch_interface.settings import ConnectionSettings

from jira_fetch_impl.jira_summary import JiraSummaryFetcher
from jira_fetch_impl.jira_xml import JiraXmlExporter
from jira_fetch_impl.result_writer import ResultWriter

logger = logging.getLogger(__name__)


class FetchOrchestrator:
    """
    Args:
        settings:        Connection settings shared by both fetchers
        summary_fetcher: Fetcher for the summary step. Defaults to JiraSummaryFetcher
        xml_fetcher:     Fetcher for the export step. Defaults to JiraXmlExporter
        writer:          Where payloads are saved. Defaults to the working directory
    """

    def __init__(
        self,
        settings: ConnectionSettings,
        *,
        summary_fetcher: IssueFetcher | None = None,
        xml_fetcher: IssueFetcher | None = None,
        writer: ResultWriter | None = None,
    ) -> None:
        self._settings = settings
        self._summary = summary_fetcher or JiraSummaryFetcher(settings)
        self._xml = xml_fetcher or JiraXmlExporter(settings)
        self._writer = writer or ResultWriter()

    @classmethod
    def from_loader(
        cls,
        loader: ConfigLoader,
        *,
        summary_fetcher: IssueFetcher | None = None,
        xml_fetcher: IssueFetcher | None = None,
        writer: ResultWriter | None = None,
    ) -> FetchOrchestrator:
        """Load settings once and build an orchestrator around them.

        Raises:
            ConfigBootstrapError: If the settings cannot be loaded. Nothing else can run without them.
        """
        return cls(
            loader.load(),
            summary_fetcher=summary_fetcher,
            xml_fetcher=xml_fetcher,
            writer=writer,
        )

    @property
    def settings(self) -> ConnectionSettings:
        """Return settings."""
        return self._settings

    def run(self, issue_key: str) -> FetchOutcome:
        """Fetch and save both representations of ``issue_key``.

        Returns:
            A FetchOutcome. Remote and file errors are reported in ``outcome.error``
            rather than raised.

        Raises:
            ValueError: If ``issue_key`` is empty.
        """
        if not issue_key or not issue_key.strip():
            raise ValueError("Issue key must not be empty")

        outcome = FetchOutcome(issue_key)
        try:
            outcome.advance(FetchState.SESSION_ESTABLISHING)
            try:
                self._summary.open()
            except FetchError as exc:
                logger.error("Could not open a Jira session for %s [%s]: %s", issue_key, exc.kind, exc)
                outcome.abort(exc)
                return outcome

            try:
                self._fetch_and_save(
                    self._summary, issue_key, outcome, FetchState.SUMMARY_FETCHING, FetchState.SUMMARY_SAVED
                )
            except FetchError as exc:
                logger.error("Summary of %s failed [%s], skipping XML export: %s", issue_key, exc.kind, exc)
                outcome.abort(exc)
                return outcome

            try:
                self._fetch_and_save(
                    self._xml, issue_key, outcome, FetchState.XML_FETCHING, FetchState.XML_SAVED
                )
            except FetchError as exc:
                logger.warning(
                    "XML export of %s failed [%s], keeping %s: %s",
                    issue_key, exc.kind, [str(p) for p in outcome.saved], exc,
                )
                outcome.abort(exc)
                return outcome

            outcome.advance(FetchState.DONE)
            logger.info("Fetched %s into %s", issue_key, [str(p) for p in outcome.saved])
            return outcome
        finally:
            self._release()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _fetch_and_save(
        self,
        fetcher: IssueFetcher,
        issue_key: str,
        outcome: FetchOutcome,
        fetching: FetchState,
        saved: FetchState,
    ) -> None:
        outcome.advance(fetching)
        fetcher.open()
        content = fetcher.fetch(issue_key)
        outcome.saved.append(self._writer.save(fetcher.artifact_name(issue_key), content))
        outcome.advance(saved)

    def _release(self) -> None:
        try:
            self._summary.close()
        finally:
            self._xml.close()
