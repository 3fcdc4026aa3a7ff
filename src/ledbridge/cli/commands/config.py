"""Configuration commands."""

from pathlib import Path
from typing import Optional

import click

from ledbridge.exceptions import LedBridgeError, format_error_for_display
from ledbridge.models import AppConfig
from ledbridge.models.config import DEFAULT_CONFIG_PATH


def config_path_from(ctx: click.Context) -> Path:
    """Config file selected with the top-level --config option, or the default."""
    path: Optional[Path] = (ctx.obj or {}).get("config_path")
    return path or DEFAULT_CONFIG_PATH


def load_config(ctx: click.Context) -> AppConfig:
    """
    Load the effective configuration (defaults when the file is missing).

    Raises:
        ConfigFileInvalidError: If the file has invalid JSON syntax
        ConfigValidationError: If a value fails validation
    """
    return AppConfig.load_or_default(config_path_from(ctx))


def echo_error(error: Exception) -> None:
    """Print an error and its recovery hint to stderr."""
    message, hint = format_error_for_display(error)
    click.echo(f"Error: {message}", err=True)
    if hint:
        click.echo(hint, err=True)


@click.group()
def config():
    """Show or create the configuration file."""
    pass


@config.command(name="show")
@click.pass_context
def show(ctx):
    """Print the effective configuration as JSON."""
    try:
        app_config = load_config(ctx)
    except LedBridgeError as e:
        echo_error(e)
        ctx.exit(1)

    click.echo(app_config.model_dump_json(indent=2))


@config.command(name="path")
@click.pass_context
def path(ctx):
    """Print the configuration file path."""
    config_file = config_path_from(ctx)
    suffix = "" if config_file.exists() else " (not created yet, defaults in use)"
    click.echo(f"{config_file}{suffix}")


@config.command(name="init")
@click.option('--force', is_flag=True, help='Overwrite an existing file (a .bak copy is kept)')
@click.pass_context
def init(ctx, force: bool):
    """Write a configuration file with the default values."""
    config_file = config_path_from(ctx)
    if config_file.exists() and not force:
        click.echo(f"{config_file} already exists (use --force to overwrite)", err=True)
        ctx.exit(1)

    AppConfig().save(config_file)
    click.echo(f"Wrote default configuration to {config_file}")
