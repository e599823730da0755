"""Explore command for auth-explorer CLI.

Runs an interactive exchange against an identity provider: GET a resource,
inspect the interpreted state, build the next body, PUT it back, and
repeat until the provider hands out a continue redirect.
"""

from __future__ import annotations

__all__ = ["explore"]

import webbrowser
from pathlib import Path
from typing import Callable

import click

from auth_explorer.client import ExchangeResult, ExchangeSession
from auth_explorer.constants import OPTIONAL_SCOPES_KEY
from auth_explorer.exceptions import TransportError
from auth_explorer.exchange import mutators
from auth_explorer.exchange.oauth import parse_params_from_url
from auth_explorer.utils.cli import configure_logging, load_config_or_exit
from auth_explorer.utils.validation import is_valid_http_url

from ..display import echo_state
from ..prompts import prompt_authenticator, prompt_with_retry
from ..styling import style_dim, style_error, style_header, style_label, style_success, style_warning

# Action key -> menu label, in menu order
_ACTIONS: dict[str, str] = {
    "g": "GET the request URL",
    "p": "PUT the current body",
    "a": "Fill in an authenticator",
    "r": "Remove an authenticator",
    "c": "Approve or deny consent",
    "s": "Grant or withdraw an optional scope",
    "l": "Follow a link",
    "u": "Set the request URL",
    "e": "Edit the body",
    "b": "Show the body",
    "q": "Quit",
}


def _send(request: Callable[[], ExchangeResult]) -> ExchangeResult | None:
    """Run a GET or PUT, reporting failures instead of raising."""
    try:
        return request()
    except TransportError as e:
        click.echo(style_error(f"Request failed: {e}"), err=True)
        return None


def _finish(redirect_url: str, open_browser: bool) -> None:
    click.echo()
    click.echo(style_header("Exchange complete"))
    click.echo(f"  {style_label('Redirect')} {redirect_url}")
    params = parse_params_from_url(redirect_url)
    for key, value in params.items():
        click.echo(f"    {style_label(key)} {value}")
    if open_browser:
        try:
            webbrowser.open(redirect_url)
        except (OSError, webbrowser.Error) as e:
            click.echo(f"  (Could not open browser automatically: {e})")


def _pick(options: list[str], prompt_text: str) -> int | None:
    """Show numbered options and return the chosen index (None to cancel)."""
    if not options:
        click.echo(style_dim("  Nothing to choose from."))
        return None
    for number, option in enumerate(options, start=1):
        click.echo(f"  {number}. {option}")
    choice: int = click.prompt(prompt_text, type=click.IntRange(0, len(options)), default=0)
    return choice - 1 if choice else None


def _fill_authenticator(session: ExchangeSession) -> None:
    views = session.authenticators()
    index = _pick([view.info.name for view in views], "Authenticator (0 to cancel)")
    if index is None:
        return
    call = prompt_authenticator(views[index])
    if call is not None:
        session.apply(call.mutator, *call.args)


def _remove_authenticator(session: ExchangeSession) -> None:
    views = session.authenticators()
    index = _pick([f"{view.info.name} ({view.info.urn})" for view in views], "Remove (0 to cancel)")
    if index is not None:
        session.apply(mutators.remove_authenticator, views[index].info.urn)


def _toggle_scope(session: ExchangeSession) -> None:
    body = session.body or {}
    granted = body.get(OPTIONAL_SCOPES_KEY)
    if isinstance(granted, list) and granted:
        click.echo(f"  {style_label('Granted optional scopes')} {', '.join(map(str, granted))}")
    scope = prompt_with_retry("Scope name")
    approve = click.confirm(f"Grant {scope}?", default=True)
    session.apply(mutators.toggle_optional_scope, scope, approve)


def _follow_link(session: ExchangeSession) -> None:
    links = session.state.auth_urls
    index = _pick([f"{link.name}: {link.url}" for link in links], "Link (0 to cancel)")
    if index is not None:
        session.url = links[index].url


def _edit_body(session: ExchangeSession) -> None:
    text = click.edit(session.body_text() or "{}\n", extension=".json")
    if text is None:
        click.echo(style_dim("  Body not changed."))
        return
    previous = session.state
    # edit() hands back the same state object when the text is rejected
    if session.edit(text) is previous:
        click.echo(style_warning("  Body is not a JSON object, kept the previous one."))


@click.command()
@click.argument("url", required=False)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="AUTH_EXPLORER_CONFIG",
    help="Config file (default: OS app directory)",
)
@click.option("--no-browser", is_flag=True, help="Print the final redirect without opening it")
def explore(url: str | None, config_path: Path | None, no_browser: bool) -> None:
    """Walk through an exchange interactively, starting at URL.

    URL defaults to start_url from the config file.
    """
    if url is not None and not is_valid_http_url(url):
        raise click.BadParameter("must start with http:// or https://", param_hint="URL")

    config = load_config_or_exit(config_path)
    wire_logger = configure_logging(config)

    with ExchangeSession(config, url=url, wire_logger=wire_logger) as session:
        if session.url:
            _send(session.get)

        while True:
            click.echo()
            echo_state(session.state, session.authenticators())

            redirect_uri = session.state.continue_redirect_uri
            if session.terminated and redirect_uri is not None and session.url != redirect_uri:
                session.url = redirect_uri
                click.echo(style_dim("Request URL set to the continue redirect URI; GET to finish."))

            for key, label in _ACTIONS.items():
                click.echo(f"  {style_label(key)} {label}")
            default = "g" if session.body is None or session.terminated else "p"
            action = click.prompt(
                "Action",
                type=click.Choice(list(_ACTIONS)),
                default=default,
                show_choices=False,
            )

            if action == "q":
                break

            if action == "g":
                if not session.url:
                    click.echo(style_error("Set a request URL first."), err=True)
                    continue
                result = _send(session.get)
                if result is not None and result.redirect_url is not None:
                    _finish(result.redirect_url, open_browser=not no_browser)
                    break
            elif action == "p":
                result = _send(session.put)
                if result is not None:
                    click.echo(style_success(f"HTTP {result.status_code}"))
            elif action == "a":
                _fill_authenticator(session)
            elif action == "r":
                _remove_authenticator(session)
            elif action == "c":
                approve = click.confirm("Approve the request?", default=True)
                session.apply(mutators.set_consent_approval, approve)
            elif action == "s":
                _toggle_scope(session)
            elif action == "l":
                _follow_link(session)
            elif action == "u":
                new_url = prompt_with_retry("Request URL")
                if is_valid_http_url(new_url):
                    session.url = new_url
                else:
                    click.echo(style_error("URL must start with http:// or https://"), err=True)
            elif action == "e":
                _edit_body(session)
            elif action == "b":
                click.echo(session.body_text() or style_dim("(no body)"))
