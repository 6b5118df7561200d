"""CLI entry point for DigitalMe."""

import sys
from pathlib import Path

import click

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from cli.commands import analyze, merge, refine, reset, serve, show
from cli.config import load_config_model
from cli.logging_config import setup_logging


@click.group()
@click.version_option(version="0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON")
def cli(verbose: bool, json_logs: bool):
    """DigitalMe - learn and apply your personal writing style."""
    try:
        config = load_config_model()
        level = config.logging.level
        log_file = config.paths.log_file
        file_level = config.logging.file_level
        json_mode = json_logs or config.logging.json_mode
    except ValueError:
        # Commands report the config error themselves
        level, log_file, file_level, json_mode = "WARNING", None, "DEBUG", json_logs
    setup_logging(
        json_mode=json_mode,
        level="DEBUG" if verbose else level,
        log_file=log_file,
        file_level=file_level,
    )


cli.add_command(merge)
cli.add_command(refine)
cli.add_command(show)
cli.add_command(reset)
cli.add_command(analyze)
cli.add_command(serve)


def main():
    cli()


if __name__ == "__main__":
    main()
