"""Serial port listing."""

import click

from ledbridge.device import list_serial_ports


@click.command(name="ports")
def ports():
    """List serial ports (the Arduino is usually /dev/ttyUSB* or /dev/ttyACM*)."""
    found = list_serial_ports()

    if not found:
        click.echo("No serial ports found.")
        click.echo("\nNote: Check the USB cable; some boards need a CH340/FTDI driver.")
        return

    click.echo("Serial ports:\n")
    for port in found:
        click.echo(f"  {port.device}")
        if port.description and port.description != "n/a":
            click.echo(f"    Description: {port.description}")
        if port.hwid and port.hwid != "n/a":
            click.echo(f"    Hardware ID: {port.hwid}")
