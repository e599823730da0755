"""Render exchange state for the terminal.

Text output uses the shared styling helpers; state_to_dict() gives the
same information as plain JSON for --json output.
"""

from __future__ import annotations

__all__ = [
    "echo_state",
    "state_to_dict",
]

from typing import Any

import click

from auth_explorer.exchange.state import AuthenticatorView, ExchangeState

from .styling import style_dim, style_header, style_label


def _scope_label(scope: Any) -> str:
    if isinstance(scope, dict):
        name = scope.get("name", "?")
        description = scope.get("description")
        granted = scope.get("consented", scope.get("granted"))
        parts = [str(name)]
        if isinstance(granted, bool):
            parts.append(
                click.style("granted", fg="green") if granted else click.style("not granted", fg="red")
            )
        if description:
            parts.append(style_dim(str(description)))
        return "  ".join(parts)
    return str(scope)


def state_to_dict(state: ExchangeState, authenticators: list[AuthenticatorView]) -> dict[str, Any]:
    """JSON-ready representation of the state and its authenticators."""
    data = state.model_dump(mode="json")
    data["authenticators"] = sorted(state.authenticators)
    data["description"] = state.description
    data["authenticator_details"] = [
        {
            "urn": view.info.urn,
            "kind": view.info.kind.name,
            "name": view.info.name,
            "description": view.info.description,
            "status": view.status,
        }
        for view in authenticators
    ]
    return data


def echo_state(state: ExchangeState, authenticators: list[AuthenticatorView]) -> None:
    """Print the state as labeled sections."""
    click.echo(style_header("Step"))
    click.echo(f"  {style_label(state.step.name.replace('_', ' ').title())} {state.description}")
    click.echo(f"  {style_label('Request URL')} {state.request_url or style_dim('(none)')}")
    click.echo()

    if state.username or state.formatted_name:
        click.echo(style_header("Identity"))
        if state.username:
            click.echo(f"  {style_label('Username')} {state.username}")
        if state.formatted_name:
            click.echo(f"  {style_label('Name')} {state.formatted_name}")
        click.echo()

    click.echo(style_header("Authenticators"))
    if not authenticators:
        click.echo(style_dim("  No authenticators offered."))
    for view in authenticators:
        status = f" [{view.status}]" if view.status else ""
        click.echo(f"  {click.style(view.info.name, bold=True)}{status}")
        click.echo(f"    {style_dim(view.info.urn)}")
        click.echo(f"    {view.info.description}")
    click.echo()

    if state.auth_urls:
        click.echo(style_header("Links"))
        for link in state.auth_urls:
            click.echo(f"  {style_label(link.name)} {link.url}")
            click.echo(f"    {style_dim(link.description)}")
        click.echo()

    if state.is_consent_request:
        click.echo(style_header("Consent"))
        click.echo(f"  {style_label('Approved')} {'yes' if state.approved else 'no'}")
        for scope in state.scopes:
            click.echo(f"  - {_scope_label(scope)}")
        click.echo()
