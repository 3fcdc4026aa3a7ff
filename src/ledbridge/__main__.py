"""Allow `python -m ledbridge`."""

from ledbridge.cli.main import cli

if __name__ == "__main__":
    cli()
