"""
Veilleur CLI.

Usage:
    veilleur [--config CONFIG]
"""

import sys
from pathlib import Path

import click

from veilleur import __version__
from veilleur.config.settings import load_config
from veilleur.domain.exceptions import VeilleurError
from veilleur.main import ExitCode, VeilleurApp


@click.command()
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: first of ./config, $HOME/.bertzzie.com, "
    "/etc/bertzzie.com)",
)
@click.version_option(__version__, prog_name="veilleur")
def cli(config_file):
    """Veilleur - health check server with graceful shutdown."""
    try:
        settings = load_config(config_file)
        app = VeilleurApp(settings)
    except VeilleurError as e:
        click.echo(f"Fatal: {e}", err=True)
        sys.exit(ExitCode.FATAL)

    sys.exit(app.run())


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
