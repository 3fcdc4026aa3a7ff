"""One-shot device commands, sent directly over the serial port."""

import time
from typing import Optional

import click

from ledbridge.device import SerialConnectionManager, open_serial_transport
from ledbridge.exceptions import LedBridgeError
from ledbridge.models import Command, QueryStatus, Reset, Save
from ledbridge.protocol import StatusLine, build_color_command, build_effect_command

from .config import echo_error, load_config


class _LinePrinter:
    """Connection observer echoing device lines to the terminal."""

    def on_status_line(self, line: StatusLine) -> None:
        click.echo(f"Device: {line.text}")


def _deliver(ctx: click.Context, build_command, listen: float = 0.0) -> None:
    """Open the port, send one command, optionally print replies, close."""
    options = ctx.obj or {}

    try:
        command: Command = build_command()
        app_config = load_config(ctx)
        port = options.get("serial_port") or app_config.serial_port

        manager = SerialConnectionManager(
            port, read_timeout=app_config.read_timeout, opener=open_serial_transport
        )
        manager.register_observer(_LinePrinter())

        with manager:
            # Most Arduino boards reset when the port opens and ignore input while booting
            settle = options.get("settle", 0.0)
            if settle > 0:
                time.sleep(settle)
            line = manager.send_command(command)
            click.echo(f"Sent to {port}: {line}")
            if listen > 0:
                time.sleep(listen)

    except LedBridgeError as e:
        echo_error(e)
        ctx.exit(1)


@click.group(name="send")
@click.option(
    '--serial-port',
    '-p',
    type=str,
    default=None,
    help='Serial device of the Arduino (overrides config)'
)
@click.option(
    '--settle',
    type=click.FloatRange(min=0),
    default=2.0,
    show_default=True,
    help='Seconds to wait after opening the port before sending'
)
@click.pass_context
def send_group(ctx, serial_port: Optional[str], settle: float):
    """
    Send a single command to the Arduino without running the gateway.

    The port must not be held by a running 'ledbridge serve'.
    """
    ctx.ensure_object(dict)
    ctx.obj["serial_port"] = serial_port
    ctx.obj["settle"] = settle


@send_group.command(name="color")
@click.argument('r', type=int)
@click.argument('g', type=int)
@click.argument('b', type=int)
@click.option('--brightness', '-b', type=int, default=None, help='Brightness 1-255 (default: 255)')
@click.pass_context
def send_color(ctx, r: int, g: int, b: int, brightness: Optional[int]):
    """Show a static color (each channel 0-255)."""
    _deliver(ctx, lambda: build_color_command(r, g, b, brightness))


@send_group.command(name="effect")
@click.argument('effect', type=int)
@click.option('--brightness', '-b', type=int, default=None, help='Brightness 1-255 (default: 255)')
@click.pass_context
def send_effect(ctx, effect: int, brightness: Optional[int]):
    """Run a built-in effect (0 Estático, 1 Rainbow, 2 Fade, 3 Color Cycle)."""
    _deliver(ctx, lambda: build_effect_command(effect, brightness))


@send_group.command(name="save")
@click.pass_context
def send_save(ctx):
    """Persist the current settings to the Arduino's EEPROM."""
    _deliver(ctx, Save)


@send_group.command(name="reset")
@click.pass_context
def send_reset(ctx):
    """Restore the Arduino's factory settings."""
    _deliver(ctx, Reset)


@send_group.command(name="status")
@click.option(
    '--listen',
    type=click.FloatRange(min=0),
    default=2.0,
    show_default=True,
    help='Seconds to print the device reply'
)
@click.pass_context
def send_status(ctx, listen: float):
    """Ask the Arduino to print its current settings."""
    _deliver(ctx, QueryStatus, listen=listen)
