"""Main entry point for the issue-engagement CLI."""

import click

from .cli.score import score_command
from .cli.weights import weights_command
from .config.logging_config import setup_logging


@click.group()
@click.version_option(package_name="issue-engagement")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose):
    """Issue Engagement - Score GitHub issue activity and spot trending issues."""
    setup_logging(verbose)


main.add_command(score_command, name="score")
main.add_command(weights_command, name="weights")


if __name__ == "__main__":
    main()
