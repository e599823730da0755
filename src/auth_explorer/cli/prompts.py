"""Interactive prompt helpers for CLI commands.

Provides reusable prompt utilities for gathering user input, and the
per-authenticator credential prompts used by the explore loop.
"""

from __future__ import annotations

__all__ = [
    "MutatorCall",
    "prompt_authenticator",
    "prompt_json_object",
    "prompt_optional",
    "prompt_with_retry",
]

import json
from dataclasses import dataclass, field
from typing import Any, Callable

import click

from auth_explorer.exchange import mutators
from auth_explorer.exchange.state import AuthenticatorView
from auth_explorer.exchange.vocabulary import AuthenticatorKind

from .styling import style_dim, style_error, style_header


@dataclass
class MutatorCall:
    """A mutator and the values to call it with (after the body)."""

    mutator: Callable[..., dict[str, Any]]
    args: tuple[Any, ...] = field(default_factory=tuple)


def prompt_with_retry(prompt_text: str, *, hide_input: bool = False) -> str:
    """Prompt for a required value, retrying if empty.

    Args:
        prompt_text: Text to show in prompt.
        hide_input: Do not echo what the user types.

    Returns:
        Non-empty string value from user.
    """
    while True:
        value: str = click.prompt(
            prompt_text,
            type=str,
            default="",
            show_default=False,
            hide_input=hide_input,
        )
        if value.strip():
            return value.strip()
        click.echo("  This field is required.")


def prompt_optional(prompt_text: str, default: str = "") -> str:
    """Prompt for an optional value with default.

    Args:
        prompt_text: Text to show in prompt.
        default: Default value if user presses enter.

    Returns:
        String value from user or default.
    """
    value: str = click.prompt(prompt_text, type=str, default=default, show_default=True)
    return value.strip()


def prompt_json_object(prompt_text: str) -> dict[str, Any]:
    """Prompt until the user enters a JSON object."""
    while True:
        raw = prompt_with_retry(prompt_text)
        try:
            value = json.loads(raw)
        except json.JSONDecodeError as e:
            click.echo(style_error(f"  Not valid JSON: {e}"))
            continue
        if isinstance(value, dict):
            return value
        click.echo(style_error("  Must be a JSON object."))


def _prompt_code_delivery(
    request: Callable[[], MutatorCall],
    submit: Callable[..., dict[str, Any]],
) -> MutatorCall:
    click.echo("  1. Request a code")
    click.echo("  2. Submit a code I received")
    choice = click.prompt("Select an option", type=click.IntRange(1, 2), default=1)
    if choice == 1:
        return request()
    return MutatorCall(submit, (prompt_with_retry("Verification code"),))


def prompt_authenticator(view: AuthenticatorView) -> MutatorCall | None:
    """Ask for the values one authenticator needs.

    Args:
        view: Authenticator offered by the current resource.

    Returns:
        The mutator call to apply, or None when the authenticator has no
        fields the explorer knows how to fill in.
    """
    click.echo()
    click.echo(style_header(view.info.name))
    click.echo(style_dim(f"  {view.info.description}"))

    kind = view.info.kind

    if kind is AuthenticatorKind.USERNAME_PASSWORD:
        if click.confirm("Set a new password (password change)?", default=False):
            new_password = click.prompt("New password", hide_input=True, confirmation_prompt=True)
            return MutatorCall(mutators.set_new_password, (new_password,))
        username = prompt_optional("Username", default=view.username or "")
        password = prompt_with_retry("Password", hide_input=True)
        return MutatorCall(mutators.set_username_password, (username, password))

    if kind is AuthenticatorKind.TOTP:
        return MutatorCall(mutators.set_totp, (prompt_with_retry("One-time password"),))

    if kind is AuthenticatorKind.EMAIL_DELIVERED_CODE:
        return _prompt_code_delivery(
            lambda: MutatorCall(
                mutators.request_email_code,
                (
                    prompt_optional("Message subject", "Your verification code"),
                    prompt_optional("Message text", "Your verification code is %code%."),
                ),
            ),
            mutators.submit_email_code,
        )

    if kind is AuthenticatorKind.TELEPHONY_DELIVERED_CODE:
        return _prompt_code_delivery(
            lambda: MutatorCall(
                mutators.request_telephony_code,
                (
                    prompt_optional("Message", "Your verification code is %code%."),
                    prompt_optional("Language", "en-US"),
                ),
            ),
            mutators.submit_telephony_code,
        )

    if kind is AuthenticatorKind.ACCOUNT_LOOKUP:
        if view.lookup_parameters:
            click.echo(f"  Lookup parameters: {', '.join(map(str, view.lookup_parameters))}")
        return MutatorCall(
            mutators.set_lookup_parameters,
            (prompt_json_object('Lookup parameters as JSON (e.g. {"mail": "a@example.com"})'),),
        )

    if kind is AuthenticatorKind.RECAPTCHA:
        if view.recaptcha_key:
            click.echo(f"  Site key: {view.recaptcha_key}")
        return MutatorCall(mutators.set_recaptcha_response, (prompt_with_retry("reCAPTCHA response token"),))

    if kind is AuthenticatorKind.REGISTRATION:
        if view.registrable_attributes:
            click.echo(f"  Registrable attributes: {json.dumps(view.registrable_attributes)}")
        return MutatorCall(mutators.register, (prompt_json_object("Attribute values as JSON"),))

    click.echo(style_dim("  No fields to fill in here. Follow a link or edit the body instead."))
    return None
