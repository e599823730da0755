"""Main CLI entry point for auth-explorer.

Defines the CLI group and registers all subcommands.

Commands:
    config          - Configuration management (show, path, init)
    explore         - Walk through an exchange interactively
    interpret       - Interpret a saved resource
    mutate          - Build the next request body from a saved resource
    oauth-url       - Build an authorization request URL
    parse-redirect  - Show the parameters of a final redirect

Subcommand help:
    auth-explorer COMMAND -h         Show help for a specific command
"""

from __future__ import annotations

__all__ = ["cli", "main"]

import sys

import click

from auth_explorer import __version__

from .commands.config import config
from .commands.explore import explore
from .commands.interpret import interpret_cmd
from .commands.mutate import mutate
from .commands.oauth import oauth_url, parse_redirect


class ReorderedGroup(click.Group):
    """Custom group that shows commands before custom help text."""

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """Add extra help after commands section."""
        formatter.write(
            """
Quick Start (Interactive):
  auth-explorer oauth-url https://idp.example.com/oauth/authorize \\
    --client-id my-client --redirect-uri https://app.example.com/cb
  auth-explorer explore https://idp.example.com/authn/flow

Offline (saved resources):
  auth-explorer interpret resource.json
  auth-explorer mutate username-password resource.json \\
    --username alice -o next.json
  auth-explorer mutate approve consent.json
"""
        )


@click.group(
    cls=ReorderedGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.pass_context
def cli(ctx: click.Context, version: bool) -> None:
    """auth-explorer: Step through identity provider authentication exchanges."""
    if version:
        click.echo(f"auth-explorer {__version__}")
        sys.exit(0)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Register commands
cli.add_command(config)
cli.add_command(explore)
cli.add_command(interpret_cmd)
cli.add_command(mutate)
cli.add_command(oauth_url)
cli.add_command(parse_redirect)


def main() -> None:
    """CLI entry point."""
    cli()
