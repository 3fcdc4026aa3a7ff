"""Main CLI entry point."""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

import click

from ledbridge import __version__
from ledbridge.models.config import CONFIG_DIR

from .commands import config, load_config, ports, send_group

logger = logging.getLogger(__name__)

LOG_DIR = CONFIG_DIR / "logs"


def resolve_log_path(debug: bool, log_file: Optional[Path]) -> Path:
    """Log file used for the given flags."""
    if log_file:
        return log_file
    if debug:
        # Debug mode: log to current directory
        return Path.cwd() / "ledbridge-debug.log"
    return LOG_DIR / "ledbridge.log"


def setup_logging(verbose: int, debug: bool, log_file: Optional[Path], log_level: str) -> None:
    """
    Configure logging for the application.

    Args:
        verbose: Verbosity count (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        debug: If True, enable debug mode with file logging in the current directory
        log_file: Custom log file path (optional)
        log_level: Log level for file logging (DEBUG/INFO/WARNING/ERROR)
    """
    # Determine log level based on flags
    if debug:
        level = logging.DEBUG
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Override with explicit log level if provided
    if log_file:
        level = getattr(logging, log_level.upper())

    log_path = resolve_log_path(debug, log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Create rotating file handler (keeps last 5 files, max 10MB each)
    file_handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    # The gateway runs in a terminal, so device lines and errors also go to stderr
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logger.info(f"Logging configured: level={logging.getLevelName(level)}, file={log_path}")


@click.group()
@click.version_option(version=__version__, prog_name="ledbridge")
@click.option(
    '--config',
    '-c',
    'config_path',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Config file (default: ~/.ledbridge/config.json)'
)
@click.pass_context
def cli(ctx, config_path: Optional[Path]):
    """
    ledbridge - HTTP bridge to an Arduino LED strip controller.

    Runs a small JSON API that turns color and effect requests into the
    controller's serial line protocol (9600 baud, 8-N-1).

    \b
    Examples:
      # Start the gateway on the default port (3001)
      ledbridge serve --serial-port /dev/ttyACM0

      # Find the Arduino's serial port
      ledbridge ports

      # Send one command directly, without the gateway
      ledbridge send color 255 0 0 --brightness 128

      # Show the effective configuration
      ledbridge config show
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@cli.command()
@click.option(
    '--serial-port',
    '-p',
    type=str,
    default=None,
    help='Serial device of the Arduino (overrides config)'
)
@click.option('--host', type=str, default=None, help='Bind address (overrides config)')
@click.option('--http-port', type=int, default=None, help='HTTP port (overrides config)')
@click.option(
    '-v', '--verbose',
    count=True,
    help='Increase verbosity (-v: INFO, -vv: DEBUG)'
)
@click.option(
    '--debug',
    is_flag=True,
    help='Enable debug mode (DEBUG level, logs to ./ledbridge-debug.log)'
)
@click.option(
    '--log-file',
    type=click.Path(path_type=Path),
    default=None,
    help='Custom log file path'
)
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
    default='INFO',
    help='Log level for file logging (default: INFO)'
)
@click.pass_context
def serve(
    ctx,
    serial_port: Optional[str],
    host: Optional[str],
    http_port: Optional[int],
    verbose: int,
    debug: bool,
    log_file: Optional[Path],
    log_level: str
):
    """
    Run the HTTP gateway.

    The serial port is opened at startup. If the Arduino is missing the
    gateway still starts, reports connected=false on /api/status and can be
    told to retry with POST /api/reconnect.
    """
    # Lazy imports to keep 'ledbridge --help' fast
    import uvicorn

    from ledbridge.gateway import build_app

    setup_logging(verbose, debug, log_file, log_level)
    log_path = resolve_log_path(debug, log_file)

    try:
        app_config = load_config(ctx)

        overrides = {
            "serial_port": serial_port,
            "http_host": host,
            "http_port": http_port,
        }
        overrides = {k: v for k, v in overrides.items() if v is not None}
        if overrides:
            app_config = app_config.model_validate({**app_config.model_dump(), **overrides})

        logger.info(f"Starting gateway with serial port {app_config.serial_port}")
        click.echo(
            f"ledbridge listening on http://{app_config.http_host}:{app_config.http_port}"
            f"{app_config.api_prefix} (serial port: {app_config.serial_port})"
        )

        app = build_app(app_config)
        # log_config=None keeps uvicorn on the handlers configured above
        uvicorn.run(app, host=app_config.http_host, port=app_config.http_port, log_config=None)

    except KeyboardInterrupt:
        logger.info("Gateway interrupted by user")
        click.echo("\nShutting down...", err=True)
    except click.Abort:
        raise
    except Exception as e:
        from ledbridge.exceptions import format_error_for_display

        logger.exception("Error running gateway")

        user_message, recovery_hint = format_error_for_display(e)

        click.echo("\n" + "=" * 70, err=True)
        click.echo(f"ERROR: {user_message}", err=True)
        click.echo("=" * 70, err=True)

        if recovery_hint:
            click.echo(f"\n{recovery_hint}", err=True)

        click.echo(f"\nFor details, check the log file: {log_path}", err=True)
        sys.exit(1)


# Register utility commands
cli.add_command(ports)
cli.add_command(send_group)
cli.add_command(config)

if __name__ == "__main__":
    cli()
