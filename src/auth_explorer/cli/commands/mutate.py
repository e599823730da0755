"""Mutate command group for auth-explorer CLI.

Applies one body mutator to a saved resource and prints the resulting
request body, ready to be sent with PUT.

Commands:
    mutate username-password      - Set username and password
    mutate new-password           - Set a replacement password
    mutate totp                   - Set a one-time password
    mutate email-request          - Ask for an emailed code
    mutate email-verify           - Submit an emailed code
    mutate telephony-request      - Ask for a code by SMS/voice
    mutate telephony-verify       - Submit a code received by SMS/voice
    mutate lookup                 - Set account lookup parameters
    mutate recaptcha              - Set the reCAPTCHA response
    mutate register               - Set registration attributes
    mutate remove-authenticator   - Drop an authenticator
    mutate approve                - Approve or deny consent
    mutate toggle-scope           - Grant or withdraw an optional scope
"""

from __future__ import annotations

__all__ = ["mutate"]

import json
from pathlib import Path
from typing import Any, Callable

import click

from auth_explorer.constants import (
    ACCOUNT_LOOKUP_AUTHENTICATOR_URN,
    EMAIL_DELIVERED_CODE_AUTHENTICATOR_URN,
    RECAPTCHA_AUTHENTICATOR_URN,
    REGISTRATION_AUTHENTICATOR_URN,
    TELEPHONY_DELIVERED_CODE_AUTHENTICATOR_URN,
    TOTP_AUTHENTICATOR_URN,
    USERNAME_PASSWORD_AUTHENTICATOR_URN,
)
from auth_explorer.exchange import mutators
from auth_explorer.exchange.vocabulary import authenticator_info
from auth_explorer.utils.cli import read_resource_file

from ..styling import style_success, style_warning

_resource_argument = click.argument(
    "resource_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
_output_option = click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Write the new body here instead of stdout",
)


def _parse_json_object(value: str, option_name: str) -> dict[str, Any]:
    try:
        data = json.loads(value)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint=option_name) from e
    if not isinstance(data, dict):
        raise click.BadParameter("must be a JSON object", param_hint=option_name)
    return data


def _run(
    resource_file: Path,
    output: Path | None,
    mutator: Callable[..., dict[str, Any]],
    *args: Any,
    required_urn: str | None = None,
) -> None:
    """Apply a mutator to the file's body and write the result."""
    body = read_resource_file(resource_file) or {}

    if required_urn is not None and required_urn not in body:
        name = authenticator_info(required_urn).name
        click.echo(style_warning(f"{name} authenticator not offered; body unchanged"), err=True)

    new_body = mutator(body, *args)
    text = json.dumps(new_body, indent=2)

    if output is None:
        click.echo(text)
        return

    output.write_text(text + "\n", encoding="utf-8")
    click.echo(style_success(f"Wrote {output}"), err=True)


@click.group()
def mutate() -> None:
    """Build the next request body from a saved resource."""
    pass


@mutate.command("username-password")
@_resource_argument
@click.option("--username", prompt=True)
@click.option("--password", prompt=True, hide_input=True)
@_output_option
def username_password(resource_file: Path, username: str, password: str, output: Path | None) -> None:
    """Set username and password."""
    _run(
        resource_file,
        output,
        mutators.set_username_password,
        username,
        password,
        required_urn=USERNAME_PASSWORD_AUTHENTICATOR_URN,
    )


@mutate.command("new-password")
@_resource_argument
@click.option("--new-password", prompt=True, hide_input=True, confirmation_prompt=True)
@_output_option
def new_password(resource_file: Path, new_password: str, output: Path | None) -> None:
    """Set a replacement password."""
    _run(
        resource_file,
        output,
        mutators.set_new_password,
        new_password,
        required_urn=USERNAME_PASSWORD_AUTHENTICATOR_URN,
    )


@mutate.command("totp")
@_resource_argument
@click.option("--code", prompt="One-time password")
@_output_option
def totp(resource_file: Path, code: str, output: Path | None) -> None:
    """Set a time-based one-time password."""
    _run(resource_file, output, mutators.set_totp, code, required_urn=TOTP_AUTHENTICATOR_URN)


@mutate.command("email-request")
@_resource_argument
@click.option("--subject", default="Your verification code", show_default=True)
@click.option("--text", "message_text", default="Your verification code is %code%.", show_default=True)
@_output_option
def email_request(resource_file: Path, subject: str, message_text: str, output: Path | None) -> None:
    """Ask the provider to email a verification code."""
    _run(
        resource_file,
        output,
        mutators.request_email_code,
        subject,
        message_text,
        required_urn=EMAIL_DELIVERED_CODE_AUTHENTICATOR_URN,
    )


@mutate.command("email-verify")
@_resource_argument
@click.option("--code", prompt="Verification code")
@_output_option
def email_verify(resource_file: Path, code: str, output: Path | None) -> None:
    """Submit an emailed verification code."""
    _run(
        resource_file,
        output,
        mutators.submit_email_code,
        code,
        required_urn=EMAIL_DELIVERED_CODE_AUTHENTICATOR_URN,
    )


@mutate.command("telephony-request")
@_resource_argument
@click.option("--message", default="Your verification code is %code%.", show_default=True)
@click.option("--language", default="en-US", show_default=True)
@_output_option
def telephony_request(resource_file: Path, message: str, language: str, output: Path | None) -> None:
    """Ask the provider to deliver a code by SMS or voice."""
    _run(
        resource_file,
        output,
        mutators.request_telephony_code,
        message,
        language,
        required_urn=TELEPHONY_DELIVERED_CODE_AUTHENTICATOR_URN,
    )


@mutate.command("telephony-verify")
@_resource_argument
@click.option("--code", prompt="Verification code")
@_output_option
def telephony_verify(resource_file: Path, code: str, output: Path | None) -> None:
    """Submit a code received by SMS or voice."""
    _run(
        resource_file,
        output,
        mutators.submit_telephony_code,
        code,
        required_urn=TELEPHONY_DELIVERED_CODE_AUTHENTICATOR_URN,
    )


@mutate.command("lookup")
@_resource_argument
@click.option("--parameters", required=True, help='JSON object, e.g. \'{"mail": "a@example.com"}\'')
@_output_option
def lookup(resource_file: Path, parameters: str, output: Path | None) -> None:
    """Set account lookup parameters."""
    _run(
        resource_file,
        output,
        mutators.set_lookup_parameters,
        _parse_json_object(parameters, "--parameters"),
        required_urn=ACCOUNT_LOOKUP_AUTHENTICATOR_URN,
    )


@mutate.command("recaptcha")
@_resource_argument
@click.option("--response", "recaptcha_response", required=True, help="reCAPTCHA response token")
@_output_option
def recaptcha(resource_file: Path, recaptcha_response: str, output: Path | None) -> None:
    """Set the reCAPTCHA response token."""
    _run(
        resource_file,
        output,
        mutators.set_recaptcha_response,
        recaptcha_response,
        required_urn=RECAPTCHA_AUTHENTICATOR_URN,
    )


@mutate.command("register")
@_resource_argument
@click.option("--attributes", required=True, help="JSON object of attribute values")
@_output_option
def register(resource_file: Path, attributes: str, output: Path | None) -> None:
    """Set registration attribute values."""
    _run(
        resource_file,
        output,
        mutators.register,
        _parse_json_object(attributes, "--attributes"),
        required_urn=REGISTRATION_AUTHENTICATOR_URN,
    )


@mutate.command("remove-authenticator")
@_resource_argument
@click.argument("urn")
@_output_option
def remove_authenticator(resource_file: Path, urn: str, output: Path | None) -> None:
    """Drop the authenticator URN from the body."""
    _run(resource_file, output, mutators.remove_authenticator, urn, required_urn=urn)


@mutate.command("approve")
@_resource_argument
@click.option("--deny", is_flag=True, help="Deny instead of approve")
@_output_option
def approve(resource_file: Path, deny: bool, output: Path | None) -> None:
    """Approve (or deny) the consent request."""
    _run(resource_file, output, mutators.set_consent_approval, not deny)


@mutate.command("toggle-scope")
@_resource_argument
@click.argument("scope")
@click.option("--withdraw", is_flag=True, help="Withdraw instead of grant")
@_output_option
def toggle_scope(resource_file: Path, scope: str, withdraw: bool, output: Path | None) -> None:
    """Grant (or withdraw) the optional SCOPE."""
    _run(resource_file, output, mutators.toggle_optional_scope, scope, not withdraw)
