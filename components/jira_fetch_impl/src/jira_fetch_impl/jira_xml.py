"""
XML exporter
------------
Downloads the XML view of an issue from the 'issueviews' export endpoint:

    GET {base_url}/si/jira.issueviews:issue-xml/{key}/{key}.xml

The request carries its own basic Authorization header and does not share the
REST session. The body is returned untouched.
"""
from __future__ import annotations

import base64
import logging

import requests

from issue_fetch_interface.errors import HttpStatusError, NetworkError
from issue_fetch_interface.fetcher import IssueFetcher
from issue_fetch_interface.settings import ConnectionSettings

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30  # seconds


def export_url(settings: ConnectionSettings, issue_key: str) -> str:
    return f"{settings.root_url}/si/jira.issueviews:issue-xml/{issue_key}/{issue_key}.xml"


def basic_auth_header(username: str, api_token: str) -> str:
    """Return the value of a basic Authorization header for the credential pair."""
    token = base64.b64encode(f"{username}:{api_token}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


class JiraXmlExporter(IssueFetcher):
    """
    Args:
        settings: Connection settings for the Jira instance
        timeout:  Seconds to wait for the export before giving up
    """

    def __init__(self, settings: ConnectionSettings, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        super().__init__(settings)
        self._timeout = timeout

    def fetch(self, issue_key: str) -> str:
        """Return the issue's XML export as text.

        Raises:
            HttpStatusError: If the endpoint answers with anything other than 200.
            NetworkError: If the request fails at the transport level.
        """
        url = export_url(self.settings, issue_key)
        headers = {"Authorization": basic_auth_header(self.settings.username, self.settings.api_token)}
        try:
            response = requests.get(url, headers=headers, timeout=self._timeout)
        except requests.RequestException as exc:
            raise NetworkError(f"Error retrieving XML data: {exc}") from exc

        if response.status_code != 200:
            raise HttpStatusError(
                response.status_code,
                f"Error retrieving XML data: HTTP {response.status_code}",
            )

        #requests assumes latin-1 for text/* without a charset, jira serves utf-8
        if "charset" not in response.headers.get("Content-Type", "").lower():
            response.encoding = "utf-8"
        logger.info("Fetched XML export of %s", issue_key)
        return response.text

    def artifact_name(self, issue_key: str) -> str:
        return f"{issue_key}_details.xml"
