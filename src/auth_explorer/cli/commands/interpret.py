"""Interpret command for auth-explorer CLI.

Shows the exchange state derived from a saved resource without
contacting the identity provider.
"""

from __future__ import annotations

__all__ = ["interpret_cmd"]

import json
from pathlib import Path

import click

from auth_explorer.exchange.interpreter import describe_authenticators, interpret
from auth_explorer.utils.cli import read_resource_file

from ..display import echo_state, state_to_dict


@click.command("interpret")
@click.argument("resource_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--url", default="", help="URL the resource was fetched from")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def interpret_cmd(resource_file: Path, url: str, as_json: bool) -> None:
    """Show the exchange step, authenticators and links of RESOURCE_FILE."""
    body = read_resource_file(resource_file, allow_empty=True)
    state = interpret(body, url)
    views = describe_authenticators(body)

    if as_json:
        click.echo(json.dumps(state_to_dict(state, views), indent=2))
        return

    echo_state(state, views)
