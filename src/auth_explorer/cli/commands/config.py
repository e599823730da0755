"""Config command group for auth-explorer CLI.

Provides configuration management subcommands.
"""

from __future__ import annotations

__all__ = ["config"]

import json
from pathlib import Path

import click
from pydantic import ValidationError

from auth_explorer.config import ExplorerConfig
from auth_explorer.utils.cli import load_config_or_exit
from auth_explorer.utils.file_helpers import get_config_path
from auth_explorer.utils.validation import is_valid_http_url

from ..styling import style_dim, style_error, style_header, style_success

_config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="AUTH_EXPLORER_CONFIG",
    help="Config file (default: OS app directory)",
)


@click.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command("path")
@_config_option
def config_path_cmd(config_path: Path | None) -> None:
    """Print the config file location."""
    path = config_path or get_config_path()
    click.echo(str(path))
    if not path.exists():
        click.echo(style_dim("(file does not exist, built-in defaults are used)"), err=True)


@config.command("show")
@_config_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def config_show(config_path: Path | None, as_json: bool) -> None:
    """Display current configuration.

    Values come from the config file when it exists, built-in defaults otherwise.
    """
    path = config_path or get_config_path()
    loaded_config = load_config_or_exit(path)

    if as_json:
        config_dict = loaded_config.model_dump(mode="json")
        config_dict["_computed"] = {
            "config_file": str(path),
            "config_file_exists": path.exists(),
            "log_files": {
                "system": str(loaded_config.logging.system_log_path),
            },
        }
        click.echo(json.dumps(config_dict, indent=2))
        return

    source = str(path) if path.exists() else "built-in defaults"
    click.echo(f"\nauth-explorer configuration ({source}):\n")

    click.echo(style_header("Exchange"))
    click.echo(f"  start_url: {loaded_config.start_url or '(not set)'}")
    click.echo()

    click.echo(style_header("HTTP"))
    click.echo(f"  timeout: {loaded_config.http.timeout}")
    click.echo(f"  verify_tls: {loaded_config.http.verify_tls}")
    click.echo()

    click.echo(style_header("Logging"))
    click.echo(f"  log_dir: {loaded_config.logging.log_dir}")
    click.echo(f"  log_level: {loaded_config.logging.log_level}")
    click.echo(f"  include_payloads: {loaded_config.logging.include_payloads}")
    click.echo(f"  system log: {loaded_config.logging.system_log_path}")


@config.command("init")
@_config_option
@click.option("--start-url", help="Resource to GET when explore is run without a URL")
@click.option("--timeout", type=int, help="HTTP timeout in seconds")
@click.option("--insecure", is_flag=True, help="Skip TLS certificate verification")
@click.option("--debug", is_flag=True, help="Enable the exchange wire log")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
def config_init(
    config_path: Path | None,
    start_url: str | None,
    timeout: int | None,
    insecure: bool,
    debug: bool,
    force: bool,
) -> None:
    """Write a config file."""
    path = config_path or get_config_path()
    if path.exists() and not force:
        click.echo(style_error(f"Config already exists: {path}"), err=True)
        click.echo("Use --force to overwrite.", err=True)
        raise SystemExit(1)

    if start_url is not None and not is_valid_http_url(start_url):
        raise click.BadParameter("must start with http:// or https://", param_hint="--start-url")

    http: dict[str, object] = {"verify_tls": not insecure}
    if timeout is not None:
        http["timeout"] = timeout
    data: dict[str, object] = {
        "start_url": start_url,
        "http": http,
        "logging": {"log_level": "DEBUG" if debug else "INFO"},
    }

    try:
        new_config = ExplorerConfig.model_validate(data)
    except ValidationError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e

    try:
        new_config.save_to_file(path)
    except OSError as e:
        raise click.ClickException(f"Cannot write {path}: {e}") from e

    click.echo(style_success(f"Configuration saved to {path}"))
