"""Unit tests for CLI commands.

Tests CLI behavior using Click's CliRunner for isolated, fast testing.
Tests use the AAA pattern (Arrange-Act-Assert) for clarity.
"""

import json
from pathlib import Path
from typing import Generator
from unittest.mock import MagicMock, patch

import httpx
import pytest
from click.testing import CliRunner

from auth_explorer.cli import cli
from auth_explorer.constants import (
    CONSENT_HANDLER_SCHEMA_URN,
    TOTP_AUTHENTICATOR_URN,
    USERNAME_PASSWORD_AUTHENTICATOR_URN,
)

LOGIN_RESOURCE = {
    "meta": {"resourceType": "login", "location": "https://idp.example.com/login"},
    USERNAME_PASSWORD_AUTHENTICATOR_URN: {
        "username": "",
        "password": "",
        "passwordRecovery": {"$ref": "https://idp.example.com/recover"},
    },
}


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


@pytest.fixture
def workdir(runner: CliRunner) -> Generator[Path, None, None]:
    """Isolated filesystem holding a login resource and a config file."""
    with runner.isolated_filesystem() as tmpdir:
        path = Path(tmpdir)
        (path / "login.json").write_text(json.dumps(LOGIN_RESOURCE))
        (path / "config.json").write_text(json.dumps({"logging": {"log_dir": str(path / "logs")}}))
        yield path


class TestVersion:
    """Tests for --version flag."""

    def test_version_flag_shows_version(self, runner: CliRunner) -> None:
        """Given --version flag, returns version string."""
        # Act
        result = runner.invoke(cli, ["--version"])

        # Assert
        assert result.exit_code == 0
        assert "auth-explorer" in result.output

    def test_short_version_flag(self, runner: CliRunner) -> None:
        """Given -v flag, returns version string."""
        result = runner.invoke(cli, ["-v"])

        assert result.exit_code == 0
        assert "auth-explorer" in result.output


class TestHelp:
    """Tests for help output."""

    def test_root_help_shows_commands(self, runner: CliRunner) -> None:
        """Given --help, shows available commands."""
        # Act
        result = runner.invoke(cli, ["--help"])

        # Assert
        assert result.exit_code == 0
        for command in ("interpret", "mutate", "explore", "oauth-url", "config"):
            assert command in result.output
        assert "Quick Start" in result.output

    def test_no_command_shows_help(self, runner: CliRunner) -> None:
        """Invoking without a command prints help."""
        result = runner.invoke(cli, [])

        assert result.exit_code == 0
        assert "Commands" in result.output

    def test_mutate_help_lists_actions(self, runner: CliRunner) -> None:
        """mutate -h lists every action."""
        result = runner.invoke(cli, ["mutate", "-h"])

        assert result.exit_code == 0
        for action in ("username-password", "totp", "email-request", "toggle-scope", "register"):
            assert action in result.output


class TestInterpret:
    """Tests for the interpret command."""

    def test_text_output(self, runner: CliRunner, workdir: Path) -> None:
        """Shows step, authenticator and links."""
        # Act
        result = runner.invoke(cli, ["interpret", "login.json"])

        # Assert
        assert result.exit_code == 0
        assert "Login" in result.output
        assert "Username Password" in result.output
        assert "Password Recovery" in result.output

    def test_json_output(self, runner: CliRunner, workdir: Path) -> None:
        """--json prints the state as JSON."""
        # Act
        result = runner.invoke(cli, ["interpret", "login.json", "--json"])

        # Assert
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["step"] == "login"
        assert data["request_url"] == "https://idp.example.com/login"
        assert data["authenticators"] == [USERNAME_PASSWORD_AUTHENTICATOR_URN]
        assert data["authenticator_details"][0]["name"] == "Username Password"

    def test_empty_file_is_initial(self, runner: CliRunner, workdir: Path) -> None:
        """An empty resource file gives the INITIAL step."""
        (workdir / "empty.json").write_text("")

        result = runner.invoke(cli, ["interpret", "empty.json", "--json", "--url", "https://idp/start"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["step"] == "initial"
        assert data["request_url"] == "https://idp/start"

    def test_malformed_file(self, runner: CliRunner, workdir: Path) -> None:
        """Malformed JSON fails with a readable error."""
        (workdir / "bad.json").write_text("{oops")

        result = runner.invoke(cli, ["interpret", "bad.json"])

        assert result.exit_code == 1
        assert "not valid JSON" in result.output


class TestMutate:
    """Tests for the mutate command group."""

    def test_username_password(self, runner: CliRunner, workdir: Path) -> None:
        """Credentials are written into the new body."""
        # Act
        result = runner.invoke(
            cli,
            ["mutate", "username-password", "login.json", "--username", "alice", "--password", "pw", "-o", "next.json"],
        )

        # Assert
        assert result.exit_code == 0
        body = json.loads((workdir / "next.json").read_text())
        assert body[USERNAME_PASSWORD_AUTHENTICATOR_URN]["username"] == "alice"
        assert body[USERNAME_PASSWORD_AUTHENTICATOR_URN]["password"] == "pw"

    def test_prints_to_stdout_without_output(self, runner: CliRunner, workdir: Path) -> None:
        """Without --output the body is printed."""
        result = runner.invoke(cli, ["mutate", "approve", "login.json"])

        assert result.exit_code == 0
        assert json.loads(result.output)["approved"] is True

    def test_missing_authenticator_warns(self, runner: CliRunner, workdir: Path) -> None:
        """A mutator whose authenticator is absent warns and leaves the body unchanged."""
        # Act
        result = runner.invoke(cli, ["mutate", "totp", "login.json", "--code", "123456", "-o", "next.json"])

        # Assert
        assert result.exit_code == 0
        assert "not offered" in result.output
        assert json.loads((workdir / "next.json").read_text()) == LOGIN_RESOURCE

    def test_toggle_scope_round_trip(self, runner: CliRunner, workdir: Path) -> None:
        """Granting then withdrawing a scope restores the file contents."""
        # Arrange
        consent = {"schemas": [CONSENT_HANDLER_SCHEMA_URN], "scopes": ["read"], "approved": False}
        (workdir / "consent.json").write_text(json.dumps(consent))

        # Act
        runner.invoke(cli, ["mutate", "toggle-scope", "consent.json", "email", "-o", "granted.json"])
        result = runner.invoke(cli, ["mutate", "toggle-scope", "granted.json", "email", "--withdraw", "-o", "back.json"])

        # Assert
        assert result.exit_code == 0
        assert json.loads((workdir / "granted.json").read_text())["optionalScopes"] == ["email"]
        assert json.loads((workdir / "back.json").read_text()) == consent

    def test_remove_authenticator(self, runner: CliRunner, workdir: Path) -> None:
        """remove-authenticator drops the URN key."""
        result = runner.invoke(
            cli,
            ["mutate", "remove-authenticator", "login.json", USERNAME_PASSWORD_AUTHENTICATOR_URN, "-o", "next.json"],
        )

        assert result.exit_code == 0
        assert USERNAME_PASSWORD_AUTHENTICATOR_URN not in json.loads((workdir / "next.json").read_text())

    def test_lookup_rejects_non_object(self, runner: CliRunner, workdir: Path) -> None:
        """--parameters must be a JSON object."""
        result = runner.invoke(cli, ["mutate", "lookup", "login.json", "--parameters", "[1]"])

        assert result.exit_code == 2
        assert "JSON object" in result.output

    def test_email_request_defaults(self, runner: CliRunner, workdir: Path) -> None:
        """email-request uses default subject and text."""
        # Arrange
        from auth_explorer.constants import EMAIL_DELIVERED_CODE_AUTHENTICATOR_URN

        (workdir / "mfa.json").write_text(json.dumps({EMAIL_DELIVERED_CODE_AUTHENTICATOR_URN: {}}))

        # Act
        result = runner.invoke(cli, ["mutate", "email-request", "mfa.json", "-o", "next.json"])

        # Assert
        assert result.exit_code == 0
        value = json.loads((workdir / "next.json").read_text())[EMAIL_DELIVERED_CODE_AUTHENTICATOR_URN]
        assert set(value) == {"messageSubject", "messageText"}


class TestOAuthCommands:
    """Tests for oauth-url and parse-redirect."""

    def test_oauth_url(self, runner: CliRunner) -> None:
        """Prints an authorization URL."""
        result = runner.invoke(
            cli,
            [
                "oauth-url",
                "https://idp.example.com/authorize",
                "--client-id",
                "demo",
                "--redirect-uri",
                "https://app.example.com/cb",
                "--scope",
                "openid",
                "--scope",
                "email",
                "--state",
                "xyz",
            ],
        )

        # Assert
        assert result.exit_code == 0
        assert result.output.startswith("https://idp.example.com/authorize?")
        assert "client_id=demo" in result.output
        assert "scope=openid+email" in result.output
        assert "state=xyz" in result.output

    def test_oauth_url_rejects_bad_endpoint(self, runner: CliRunner) -> None:
        """A non-HTTP endpoint is rejected."""
        result = runner.invoke(
            cli,
            ["oauth-url", "ftp://idp", "--client-id", "demo", "--redirect-uri", "https://app/cb"],
        )

        assert result.exit_code == 2

    def test_parse_redirect_json(self, runner: CliRunner) -> None:
        """Fragment parameters are listed."""
        result = runner.invoke(cli, ["parse-redirect", "https://app/cb#access_token=t&state=s", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.output) == {"access_token": "t", "state": "s"}


class TestConfigCommands:
    """Tests for config init/show/path."""

    def test_init_then_show(self, runner: CliRunner, workdir: Path) -> None:
        """config init writes a file that config show reads back."""
        # Arrange
        path = workdir / "new" / "config.json"

        # Act
        init_result = runner.invoke(
            cli,
            ["config", "init", "--config", str(path), "--start-url", "https://idp/start", "--timeout", "10"],
        )
        show_result = runner.invoke(cli, ["config", "show", "--config", str(path), "--json"])

        # Assert
        assert init_result.exit_code == 0
        assert show_result.exit_code == 0
        data = json.loads(show_result.output)
        assert data["start_url"] == "https://idp/start"
        assert data["http"]["timeout"] == 10
        assert data["_computed"]["config_file_exists"] is True

    def test_init_refuses_overwrite(self, runner: CliRunner, workdir: Path) -> None:
        """An existing config needs --force."""
        result = runner.invoke(cli, ["config", "init", "--config", str(workdir / "config.json")])

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_init_rejects_bad_url(self, runner: CliRunner, workdir: Path) -> None:
        """--start-url must be an HTTP URL."""
        result = runner.invoke(
            cli,
            ["config", "init", "--config", str(workdir / "x.json"), "--start-url", "idp.example.com"],
        )

        assert result.exit_code == 2

    def test_show_invalid_config(self, runner: CliRunner, workdir: Path) -> None:
        """An invalid config file is reported."""
        (workdir / "bad.json").write_text(json.dumps({"http": {"timeout": 0}}))

        result = runner.invoke(cli, ["config", "show", "--config", str(workdir / "bad.json")])

        assert result.exit_code == 1
        assert "timeout" in result.output

    def test_path(self, runner: CliRunner, workdir: Path) -> None:
        """config path prints the selected file."""
        result = runner.invoke(cli, ["config", "path", "--config", str(workdir / "config.json")])

        assert result.exit_code == 0
        assert str(workdir / "config.json") in result.output


class TestExplore:
    """Tests for the interactive explore loop with a mocked provider."""

    @pytest.fixture
    def mock_client(self) -> Generator[MagicMock, None, None]:
        client = MagicMock(spec=httpx.Client)
        with patch("auth_explorer.client.session.httpx.Client", return_value=client):
            yield client

    def test_quit_after_first_get(self, runner: CliRunner, workdir: Path, mock_client: MagicMock) -> None:
        """The first resource is fetched and shown before the menu."""
        # Arrange
        mock_client.request.return_value = httpx.Response(200, json=LOGIN_RESOURCE)

        # Act
        result = runner.invoke(
            cli,
            ["explore", "https://idp.example.com/start", "--config", "config.json"],
            input="q\n",
        )

        # Assert
        assert result.exit_code == 0
        assert "Username Password" in result.output
        mock_client.request.assert_called_once()
        mock_client.close.assert_called_once()

    def test_follow_continue_redirect_finishes(
        self, runner: CliRunner, workdir: Path, mock_client: MagicMock
    ) -> None:
        """Following the continue redirect ends the exchange without another request."""
        # Arrange
        done = {
            "meta": {"location": "https://idp.example.com/login"},
            "continue_redirect_uri": "https://app.example.com/cb#access_token=tok",
        }
        mock_client.request.return_value = httpx.Response(200, json=done)

        # Act
        with patch("auth_explorer.cli.commands.explore.webbrowser.open") as mock_open:
            result = runner.invoke(
                cli,
                ["explore", "https://idp.example.com/start", "--config", "config.json", "--no-browser"],
                input="l\n2\ng\n",
            )

        # Assert
        assert result.exit_code == 0
        assert "Exchange complete" in result.output
        assert "access_token" in result.output
        mock_open.assert_not_called()
        assert mock_client.request.call_count == 1

    def test_terminal_state_targets_redirect(
        self, runner: CliRunner, workdir: Path, mock_client: MagicMock
    ) -> None:
        """Once the exchange is complete, a plain GET finishes it."""
        # Arrange
        done = {"continue_redirect_uri": "https://app.example.com/cb?code=abc"}
        mock_client.request.return_value = httpx.Response(200, json=done)

        # Act
        with patch("auth_explorer.cli.commands.explore.webbrowser.open") as mock_open:
            result = runner.invoke(
                cli,
                ["explore", "https://idp.example.com/start", "--config", "config.json"],
                input="g\n",
            )

        # Assert
        assert result.exit_code == 0
        assert "code" in result.output
        mock_open.assert_called_once_with("https://app.example.com/cb?code=abc")
        assert mock_client.request.call_count == 1

    def test_request_failure_is_reported(self, runner: CliRunner, workdir: Path, mock_client: MagicMock) -> None:
        """A failed GET is shown and the loop continues."""
        mock_client.request.return_value = httpx.Response(500)

        result = runner.invoke(
            cli,
            ["explore", "https://idp.example.com/start", "--config", "config.json"],
            input="q\n",
        )

        assert result.exit_code == 0
        assert "Request failed" in result.output

    def test_fill_authenticator_and_put(self, runner: CliRunner, workdir: Path, mock_client: MagicMock) -> None:
        """Credentials typed at the prompt are sent with PUT."""
        # Arrange
        mock_client.request.return_value = httpx.Response(200, json=LOGIN_RESOURCE)

        # Act
        result = runner.invoke(
            cli,
            ["explore", "https://idp.example.com/start", "--config", "config.json"],
            input="a\n1\nn\nalice\nhunter2\np\nq\n",
        )

        # Assert
        assert result.exit_code == 0
        method, url = mock_client.request.call_args.args
        assert (method, url) == ("PUT", "https://idp.example.com/login")
        sent = json.loads(mock_client.request.call_args.kwargs["content"])
        assert sent[USERNAME_PASSWORD_AUTHENTICATOR_URN]["username"] == "alice"
        assert sent[USERNAME_PASSWORD_AUTHENTICATOR_URN]["password"] == "hunter2"
        assert TOTP_AUTHENTICATOR_URN not in sent
