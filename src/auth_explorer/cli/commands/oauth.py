"""oauth-url command for auth-explorer CLI.

Builds the authorization request that starts an exchange, and decodes the
redirect the provider sends at the end of it.
"""

from __future__ import annotations

__all__ = ["oauth_url", "parse_redirect"]

import json

import click

from auth_explorer.exchange.oauth import build_authorization_url, parse_params_from_url
from auth_explorer.utils.validation import is_valid_http_url

from ..styling import style_label


@click.command("oauth-url")
@click.argument("endpoint")
@click.option("--client-id", required=True, help="OAuth client identifier")
@click.option("--redirect-uri", required=True, help="Redirect URI registered for the client")
@click.option("--scope", "scopes", multiple=True, default=("openid",), show_default=True)
@click.option("--response-type", default="token", show_default=True)
@click.option("--state", help="State value (random when omitted)")
@click.option("--nonce", help="Nonce (random for id_token response types)")
@click.option("--prompt", help="OIDC prompt value, e.g. login or consent")
def oauth_url(
    endpoint: str,
    client_id: str,
    redirect_uri: str,
    scopes: tuple[str, ...],
    response_type: str,
    state: str | None,
    nonce: str | None,
    prompt: str | None,
) -> None:
    """Print an authorization URL for ENDPOINT."""
    if not is_valid_http_url(endpoint):
        raise click.BadParameter("must start with http:// or https://", param_hint="ENDPOINT")

    click.echo(
        build_authorization_url(
            endpoint,
            client_id,
            redirect_uri,
            list(scopes),
            response_type=response_type,
            state=state,
            nonce=nonce,
            prompt=prompt,
        )
    )


@click.command("parse-redirect")
@click.argument("url")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def parse_redirect(url: str, as_json: bool) -> None:
    """Show the response parameters carried by a redirect URL."""
    params = parse_params_from_url(url)
    if as_json:
        click.echo(json.dumps(params, indent=2))
        return
    if not params:
        click.echo("No parameters in URL.")
        return
    for key, value in params.items():
        click.echo(f"{style_label(key)} {value}")
