"""Unit tests for JiraSummaryFetcher.

The requests session is replaced with a MagicMock so no HTTP call leaves the test.
"""

from unittest.mock import MagicMock

import pytest
import requests

from issue_fetch_interface.errors import (
    AuthenticationError,
    NotFoundError,
    RemoteConnectionError,
    UnknownRemoteError,
)
from issue_fetch_interface.settings import ConnectionSettings
from jira_fetch_impl import jira_summary
from jira_fetch_impl.jira_summary import JiraSummaryFetcher
from jira_fetch_impl.jira_xml import basic_auth_header
from jira_fetch_impl.orchestrator import FetchOrchestrator
from jira_fetch_impl.result_writer import ResultWriter


def _response(status_code, payload=None, text=""):
    """Build a mock response. json() raises when no payload is given."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.url = "https://test.atlassian.net/rest/api/2/issue/TEST-1"
    response.text = text
    if payload is None:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def settings():
    return ConnectionSettings("https://test.atlassian.net/", "test@example.com", "dummy_token")


@pytest.fixture
def session(monkeypatch):
    """Replaces requests.Session so open() picks up a mock."""
    mock_session = MagicMock()
    monkeypatch.setattr(jira_summary.requests, "Session", MagicMock(return_value=mock_session))
    return mock_session


@pytest.fixture
def fetcher(settings):
    """Returns a fetcher whose session is already 'open' and mocked."""
    fetcher = JiraSummaryFetcher(settings)
    fetcher._session = MagicMock()
    return fetcher


#--------------------------- open / close --------------------------

def test_open_validates_session_against_myself(settings, session):
    session.get.return_value = _response(200, {"name": "test"})

    fetcher = JiraSummaryFetcher(settings, timeout=5)
    fetcher.open()

    # Assert: one pre-flight call to the identity endpoint, trailing slash removed
    session.get.assert_called_once_with(
        "https://test.atlassian.net/rest/api/2/myself", params=None, timeout=5
    )
    # Assert: basic auth carries the configured credentials
    assert session.auth.username == b"test@example.com"
    assert session.auth.password == b"dummy_token"


def test_open_unreachable_raises_connection_error_and_closes(settings, session):
    session.get.side_effect = requests.ConnectionError("Name or service not known")

    fetcher = JiraSummaryFetcher(settings)
    with pytest.raises(RemoteConnectionError) as exc_info:
        fetcher.open()

    assert "Name or service not known" in str(exc_info.value)
    session.close.assert_called_once()


def test_open_rejected_credentials_raises_authentication_error(settings, session):
    session.get.return_value = _response(401)

    fetcher = JiraSummaryFetcher(settings)
    with pytest.raises(AuthenticationError):
        fetcher.open()

    session.close.assert_called_once()


def test_open_server_error_raises_connection_error(settings, session):
    session.get.return_value = _response(503)

    with pytest.raises(RemoteConnectionError):
        JiraSummaryFetcher(settings).open()


def test_close_is_safe_to_call_twice(fetcher):
    mock_session = fetcher._session

    fetcher.close()
    fetcher.close()

    mock_session.close.assert_called_once()


def test_context_manager_closes_session(settings, session):
    session.get.return_value = _response(200, {"name": "test"})

    with JiraSummaryFetcher(settings):
        pass

    session.close.assert_called_once()


def test_fetch_without_open_raises_connection_error(settings):
    with pytest.raises(RemoteConnectionError):
        JiraSummaryFetcher(settings).fetch("TEST-1")


#--------------------------- fetch --------------------------

def test_fetch_returns_labelled_summary(fetcher):
    fetcher._session.get.return_value = _response(200, {"key": "KAN-1", "fields": {"summary": "Sample issue"}})

    result = fetcher.fetch("KAN-1")

    assert result == "Задача: Sample issue"
    fetcher._session.get.assert_called_once_with(
        "https://test.atlassian.net/rest/api/2/issue/KAN-1",
        params={"fields": "summary"},
        timeout=jira_summary.DEFAULT_TIMEOUT,
    )


def test_fetch_uses_custom_label(settings):
    fetcher = JiraSummaryFetcher(settings, label="Issue")
    fetcher._session = MagicMock()
    fetcher._session.get.return_value = _response(200, {"fields": {"summary": "Sample issue"}})

    assert fetcher.fetch("KAN-1") == "Issue: Sample issue"


def test_fetch_401_raises_authentication_not_unknown(fetcher):
    # 401 must be reclassified, not reported as a generic remote error
    fetcher._session.get.return_value = _response(401, {"errorMessages": ["Unauthorized"]})

    with pytest.raises(AuthenticationError) as exc_info:
        fetcher.fetch("KAN-1")

    assert not isinstance(exc_info.value, UnknownRemoteError)
    assert "username and API token" in str(exc_info.value)


def test_fetch_404_raises_not_found(fetcher):
    fetcher._session.get.return_value = _response(404, {"errorMessages": ["Issue does not exist"]})

    with pytest.raises(NotFoundError):
        fetcher.fetch("FAKE-999")


def test_fetch_other_error_carries_remote_message(fetcher):
    fetcher._session.get.return_value = _response(500, {"errorMessages": ["Internal failure"]})

    with pytest.raises(UnknownRemoteError) as exc_info:
        fetcher.fetch("KAN-1")

    assert "Internal failure" in str(exc_info.value)
    assert exc_info.value.kind == "remote"


def test_fetch_other_error_without_json_uses_body(fetcher):
    fetcher._session.get.return_value = _response(502, text="Bad Gateway")

    with pytest.raises(UnknownRemoteError) as exc_info:
        fetcher.fetch("KAN-1")

    assert "Bad Gateway" in str(exc_info.value)


def test_fetch_transport_failure_raises_connection_error(fetcher):
    fetcher._session.get.side_effect = requests.Timeout("read timed out")

    with pytest.raises(RemoteConnectionError):
        fetcher.fetch("KAN-1")


def test_fetch_non_json_success_raises_unknown_remote(fetcher):
    fetcher._session.get.return_value = _response(200, text="<html>login</html>")

    with pytest.raises(UnknownRemoteError):
        fetcher.fetch("KAN-1")


def test_artifact_name():
    fetcher = JiraSummaryFetcher(ConnectionSettings("https://x", "u", "t"))

    assert fetcher.artifact_name("KAN-1") == "KAN-1.txt"


#--------------------------- non-latin credentials --------------------------

def _adapter_response(request, status_code, body):
    response = requests.Response()
    response.status_code = status_code
    response._content = body.encode("utf-8")
    response.headers["Content-Type"] = "application/json;charset=UTF-8"
    response.encoding = "utf-8"
    response.url = request.url
    response.request = request
    return response


@pytest.fixture
def sent_requests(monkeypatch):
    """Stubs the transport adapter of a real Session and records what was sent."""
    sent = []

    def fake_send(adapter, request, **kwargs):
        sent.append(request)
        if request.url.endswith("/myself"):
            return _adapter_response(request, 200, '{"name": "user"}')
        return _adapter_response(request, 200, '{"key": "KAN-1", "fields": {"summary": "Пример"}}')

    monkeypatch.setattr(requests.adapters.HTTPAdapter, "send", fake_send)
    return sent


def test_cyrillic_username_is_sent_as_utf8_basic_auth(sent_requests):
    settings = ConnectionSettings("https://test.atlassian.net", "Пользователь", "токен")

    with JiraSummaryFetcher(settings) as fetcher:
        result = fetcher.fetch("KAN-1")

    assert result == "Задача: Пример"
    assert len(sent_requests) == 2

    # Assert: the REST session and the XML export build the same header
    for request in sent_requests:
        assert request.headers["Authorization"] == basic_auth_header("Пользователь", "токен")


def test_orchestrator_with_cyrillic_username_returns_outcome(sent_requests, tmp_path):
    xml_fetcher = MagicMock()
    xml_fetcher.fetch.return_value = "<issue/>"
    xml_fetcher.artifact_name.return_value = "KAN-1_details.xml"
    settings = ConnectionSettings("https://test.atlassian.net", "Пользователь", "tok")

    outcome = FetchOrchestrator(
        settings, xml_fetcher=xml_fetcher, writer=ResultWriter(tmp_path)
    ).run("KAN-1")

    assert outcome.succeeded
    assert (tmp_path / "KAN-1.txt").read_text(encoding="utf-8") == "Задача: Пример"
