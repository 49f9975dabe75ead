"""
Summary fetcher
---------------
Reads an issue's summary through the Jira REST API using basic authentication
(username + API token). A session is opened and validated against the
'/myself' endpoint before the issue is looked up.
"""
from __future__ import annotations

import logging
from typing import Any

import requests
from requests.auth import HTTPBasicAuth

from issue_fetch_interface.errors import (
    AuthenticationError,
    NotFoundError,
    RemoteConnectionError,
    UnknownRemoteError,
)
from issue_fetch_interface.fetcher import IssueFetcher
from issue_fetch_interface.settings import ConnectionSettings

logger = logging.getLogger(__name__)

SUMMARY_LABEL = "Задача"
DEFAULT_TIMEOUT = 30  # seconds

_AUTH_FAILED = (
    "Failed to connect to Jira. Authentication failed. "
    "Please check the username and API token."
)


def format_summary(summary: str, label: str = SUMMARY_LABEL) -> str:
    return f"{label}: {summary}"


class JiraSummaryFetcher(IssueFetcher):
    """
    Args:
        settings: Connection settings for the Jira instance
        label:    Prefix written in front of the summary text
        timeout:  Seconds to wait for each request before giving up
    """

    _API_PREFIX = "/rest/api/2"

    def __init__(
        self,
        settings: ConnectionSettings,
        *,
        label: str = SUMMARY_LABEL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(settings)
        self._label = label
        self._timeout = timeout
        self._session: requests.Session | None = None

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def open(self) -> None:
        """Open the session and check it works before any lookup is made."""
        if self._session is not None:
            return
        session = requests.Session()
        #bytes, otherwise requests encodes the pair as latin-1 and fails on non-latin names
        session.auth = HTTPBasicAuth(
            self.settings.username.encode("utf-8"), self.settings.api_token.encode("utf-8")
        )
        session.headers.update({"Accept": "application/json"})
        self._session = session
        try:
            self._validate_session()
        except Exception:
            self.close()
            raise
        logger.info("Connected to Jira at %s as %s", self.settings.root_url, self.settings.username)

    def close(self) -> None:
        if self._session is None:
            return
        self._session.close()
        self._session = None
        logger.debug("Closed Jira session for %s", self.settings.root_url)

    def _validate_session(self) -> None:
        try:
            response = self._request("/myself")
        except requests.RequestException as exc:
            raise RemoteConnectionError(
                f"Failed to connect to Jira at {self.settings.root_url}: {exc}. "
                "Please check the connection configuration file settings."
            ) from exc
        if response.status_code == 401:
            raise AuthenticationError(_AUTH_FAILED)
        if not response.ok:
            raise RemoteConnectionError(
                f"Failed to connect to Jira at {self.settings.root_url} "
                f"(HTTP {response.status_code}). Please check the connection configuration file settings."
            )

    # ------------------------------------------------------------------
    # Internal HTTP helpers
    # ------------------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self.settings.root_url}{self._API_PREFIX}{path}"

    def _request(self, path: str, params: dict | None = None) -> requests.Response:
        if self._session is None:
            raise RemoteConnectionError("Jira session is not open")
        return self._session.get(self._url(path), params=params, timeout=self._timeout)

    def _get(self, path: str, params: dict | None = None) -> Any:
        try:
            response = self._request(path, params)
        except requests.RequestException as exc:
            raise RemoteConnectionError(f"Error attempting to connect to Jira or retrieve data: {exc}") from exc
        self._raise_for_status(response)
        try:
            return response.json()
        except ValueError as exc:
            raise UnknownRemoteError(f"Error retrieving data: response is not JSON ({exc})") from exc

    @staticmethod
    def _raise_for_status(response: requests.Response) -> None:
        if response.status_code == 401:
            raise AuthenticationError(_AUTH_FAILED)
        if response.status_code == 404:
            raise NotFoundError(f"Issue not found: {response.url}")
        if not response.ok:
            raise UnknownRemoteError(f"Error retrieving data: {_error_detail(response)}")

    # ------------------------------------------------------------------
    # IssueFetcher contract
    # ------------------------------------------------------------------

    def fetch(self, issue_key: str) -> str:
        """Return '<label>: <summary>' for the issue."""
        data = self._get(f"/issue/{issue_key}", params={"fields": "summary"})
        fields = data.get("fields") or {}
        summary = fields.get("summary") or ""
        logger.info("Fetched summary of %s", issue_key)
        return format_summary(summary, self._label)

    def artifact_name(self, issue_key: str) -> str:
        return f"{issue_key}.txt"


def _error_detail(response: requests.Response) -> str:
    """Return Jira's error messages when the body carries them, else the raw body."""
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}: {response.text}"
    messages: list[str] = []
    if isinstance(body, dict):
        messages.extend(str(m) for m in body.get("errorMessages") or [])
        messages.extend(f"{k}: {v}" for k, v in (body.get("errors") or {}).items())
    if not messages:
        return f"HTTP {response.status_code}: {body}"
    return f"HTTP {response.status_code}: {'; '.join(messages)}"
