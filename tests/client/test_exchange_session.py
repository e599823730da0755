"""Unit tests for ExchangeSession.

The httpx client is mocked; responses are real httpx.Response objects.
"""

import json
import logging
from unittest.mock import MagicMock

import httpx
import pytest

from auth_explorer.client import ExchangeSession
from auth_explorer.config import ExplorerConfig
from auth_explorer.constants import USERNAME_PASSWORD_AUTHENTICATOR_URN
from auth_explorer.exceptions import TransportError
from auth_explorer.exchange import mutators
from auth_explorer.exchange.vocabulary import StepKind
from auth_explorer.telemetry.wire_logger import REDACTED, ExchangeWireLogger

START_URL = "https://idp.example.com/authn"

LOGIN_RESOURCE = {
    "meta": {"resourceType": "login", "location": "https://idp.example.com/authn/login"},
    USERNAME_PASSWORD_AUTHENTICATOR_URN: {"username": "", "password": ""},
}

DONE_RESOURCE = {
    "meta": {"resourceType": "login", "location": "https://idp.example.com/authn/login"},
    "continue_redirect_uri": "https://app.example.com/cb#access_token=t",
}


@pytest.fixture
def mock_client() -> MagicMock:
    """httpx.Client stand-in; tests set request.return_value."""
    return MagicMock(spec=httpx.Client)


@pytest.fixture
def mock_logger() -> MagicMock:
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def session(mock_client: MagicMock, mock_logger: MagicMock) -> ExchangeSession:
    return ExchangeSession(
        ExplorerConfig(),
        url=START_URL,
        http_client=mock_client,
        wire_logger=ExchangeWireLogger(mock_logger),
    )


def _logged_events(mock_logger: MagicMock) -> list[dict]:
    return [call.args[0] for call in mock_logger.debug.call_args_list]


class TestInitialState:
    """Tests for a fresh session."""

    def test_starts_initial_with_url(self, session: ExchangeSession) -> None:
        """A new session has no body and an INITIAL state at the start URL."""
        assert session.body is None
        assert session.state.step is StepKind.INITIAL
        assert session.state.request_url == START_URL
        assert session.body_text() == ""

    def test_start_url_from_config(self, mock_client: MagicMock) -> None:
        """Without an explicit URL the configured start_url is used."""
        config = ExplorerConfig(start_url=START_URL)

        session = ExchangeSession(config, http_client=mock_client)

        assert session.url == START_URL

    def test_does_not_close_injected_client(self, mock_client: MagicMock) -> None:
        """Clients passed in are left open."""
        with ExchangeSession(url=START_URL, http_client=mock_client):
            pass

        mock_client.close.assert_not_called()


class TestGet:
    """Tests for ExchangeSession.get."""

    def test_get_interprets_resource(self, session: ExchangeSession, mock_client: MagicMock) -> None:
        """A successful GET updates body, state and target URL."""
        # Arrange
        mock_client.request.return_value = httpx.Response(200, json=LOGIN_RESOURCE)

        # Act
        result = session.get()

        # Assert
        assert result.status_code == 200
        assert not result.redirect_required
        assert session.body == LOGIN_RESOURCE
        assert session.state.step is StepKind.LOGIN
        assert session.url == "https://idp.example.com/authn/login"

    def test_get_sends_accept_header(self, session: ExchangeSession, mock_client: MagicMock) -> None:
        """GET asks for JSON and carries no body."""
        # Arrange
        mock_client.request.return_value = httpx.Response(200, json=LOGIN_RESOURCE)

        # Act
        session.get()

        # Assert
        args, kwargs = mock_client.request.call_args
        assert args == ("GET", START_URL)
        assert kwargs["headers"] == {"Accept": "application/json"}
        assert kwargs["content"] is None

    def test_continue_redirect_short_circuits(self, session: ExchangeSession, mock_client: MagicMock) -> None:
        """GET of the known continue redirect URI is not fetched."""
        # Arrange
        mock_client.request.return_value = httpx.Response(200, json=DONE_RESOURCE)
        session.get()
        session.url = DONE_RESOURCE["continue_redirect_uri"]
        mock_client.request.reset_mock()

        # Act
        result = session.get()

        # Assert
        assert result.redirect_required
        assert result.redirect_url == DONE_RESOURCE["continue_redirect_uri"]
        assert result.status_code is None
        assert session.terminated
        mock_client.request.assert_not_called()


class TestPut:
    """Tests for ExchangeSession.put."""

    def test_put_sends_body(self, session: ExchangeSession, mock_client: MagicMock) -> None:
        """PUT carries the mutated body as JSON to the current target."""
        # Arrange
        mock_client.request.return_value = httpx.Response(200, json=LOGIN_RESOURCE)
        session.get()
        session.apply(mutators.set_username_password, "alice", "pw")
        mock_client.request.return_value = httpx.Response(200, json=DONE_RESOURCE)

        # Act
        result = session.put()

        # Assert
        args, kwargs = mock_client.request.call_args
        assert args == ("PUT", "https://idp.example.com/authn/login")
        assert kwargs["headers"]["Content-Type"] == "application/json"
        assert json.loads(kwargs["content"])[USERNAME_PASSWORD_AUTHENTICATOR_URN] == {
            "username": "alice",
            "password": "pw",
        }
        assert result.state.step is StepKind.CONTINUE_REDIRECT

    def test_put_without_body_sends_empty_object(
        self, session: ExchangeSession, mock_client: MagicMock
    ) -> None:
        """PUT before any GET sends {}."""
        mock_client.request.return_value = httpx.Response(200, json=LOGIN_RESOURCE)

        session.put()

        assert mock_client.request.call_args.kwargs["content"] == "{}"


class TestTransportFailures:
    """Failures raise TransportError and keep the previous state."""

    def test_http_error_status(self, session: ExchangeSession, mock_client: MagicMock) -> None:
        """A non-2xx response raises with the status code and provider detail."""
        # Arrange
        mock_client.request.return_value = httpx.Response(200, json=LOGIN_RESOURCE)
        session.get()
        previous = session.state
        mock_client.request.return_value = httpx.Response(400, json={"detail": "Invalid credentials"})

        # Act
        with pytest.raises(TransportError) as exc_info:
            session.put()

        # Assert
        assert exc_info.value.status_code == 400
        assert "Invalid credentials" in str(exc_info.value)
        assert session.state is previous
        assert session.body == LOGIN_RESOURCE

    def test_network_error(self, session: ExchangeSession, mock_client: MagicMock) -> None:
        """httpx errors become TransportError."""
        # Arrange
        mock_client.request.side_effect = httpx.ConnectError("connection refused")
        previous = session.state

        # Act
        with pytest.raises(TransportError) as exc_info:
            session.get()

        # Assert
        assert exc_info.value.url == START_URL
        assert exc_info.value.status_code is None
        assert session.state is previous

    def test_non_json_response(self, session: ExchangeSession, mock_client: MagicMock) -> None:
        """A response that is not JSON raises TransportError."""
        mock_client.request.return_value = httpx.Response(200, text="<html></html>")

        with pytest.raises(TransportError, match="not JSON"):
            session.get()

    def test_json_array_response(self, session: ExchangeSession, mock_client: MagicMock) -> None:
        """A JSON array is not a resource."""
        mock_client.request.return_value = httpx.Response(200, json=[1, 2])

        with pytest.raises(TransportError, match="JSON object"):
            session.get()

    def test_no_url(self, mock_client: MagicMock) -> None:
        """Sending without a target raises TransportError."""
        session = ExchangeSession(http_client=mock_client)

        with pytest.raises(TransportError, match="No request URL"):
            session.get()

        mock_client.request.assert_not_called()

    def test_failure_is_wire_logged(
        self, session: ExchangeSession, mock_client: MagicMock, mock_logger: MagicMock
    ) -> None:
        """An exchange_error event records the failure."""
        mock_client.request.return_value = httpx.Response(503)

        with pytest.raises(TransportError):
            session.get()

        # Assert
        error_events = [e for e in _logged_events(mock_logger) if e["event"] == "exchange_error"]
        assert len(error_events) == 1
        assert error_events[0]["status_code"] == 503
        assert error_events[0]["error_type"] == "TransportError"


class TestBodyUpdates:
    """Tests for apply, edit and set_body."""

    def test_apply_without_body_is_no_op(self, session: ExchangeSession) -> None:
        """Mutators are not applied before a resource has been received."""
        state = session.apply(mutators.set_consent_approval, True)

        assert state is session.state
        assert session.body is None

    def test_apply_reinterprets(self, session: ExchangeSession) -> None:
        """Removing an authenticator updates the state."""
        # Arrange
        session.set_body(LOGIN_RESOURCE)

        # Act
        state = session.apply(mutators.remove_authenticator, USERNAME_PASSWORD_AUTHENTICATOR_URN)

        # Assert
        assert state.authenticators == frozenset()
        assert USERNAME_PASSWORD_AUTHENTICATOR_URN in LOGIN_RESOURCE

    def test_apply_logs_redacted_payload(self, session: ExchangeSession, mock_logger: MagicMock) -> None:
        """body_mutation events never contain the password."""
        # Arrange
        session.set_body(LOGIN_RESOURCE)

        # Act
        session.apply(mutators.set_username_password, "alice", "hunter2")

        # Assert
        event = _logged_events(mock_logger)[-1]
        assert event["event"] == "body_mutation"
        assert event["mutator"] == "set_username_password"
        assert event["changed"] is True
        assert "hunter2" not in event["payload"]
        assert REDACTED in event["payload"]

    def test_edit_valid_text(self, session: ExchangeSession) -> None:
        """Edited JSON replaces the body."""
        state = session.edit(json.dumps({"meta": {"resourceType": "secondFactor"}}))

        assert state.step is StepKind.SECOND_FACTOR

    def test_edit_malformed_text_keeps_state(self, session: ExchangeSession) -> None:
        """Malformed JSON leaves body and state unchanged."""
        # Arrange
        session.set_body(LOGIN_RESOURCE)
        previous = session.state

        # Act
        state = session.edit('{"meta": ')

        # Assert
        assert state is previous
        assert session.body == LOGIN_RESOURCE

    def test_authenticators_view(self, session: ExchangeSession) -> None:
        """authenticators() describes the current body."""
        session.set_body(LOGIN_RESOURCE)

        assert [view.info.urn for view in session.authenticators()] == [USERNAME_PASSWORD_AUTHENTICATOR_URN]
