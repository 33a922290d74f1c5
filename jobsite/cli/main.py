"""
CLI for the Jobsite staffing and billing package.

Usage:
    jobsite run scenarios/kitchen_remodel.yaml
    jobsite quote --kind staff --rate 100 --days 2 --category technician

Commands:
    run       Replay a YAML scenario and print project summaries
    quote     Quote the cost of one task for an employee type
"""
import click
import logging

from jobsite import __version__
from jobsite.config import get_config
from .scenario_commands import register_commands

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Log at DEBUG level')
def cli(verbose: bool):
    """Jobsite staffing and billing CLI.

    Track projects, their tasks and the employees who staff them, and
    compute what each project bills.
    """
    config = get_config()
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.log_level,
        format=config.log_format,
    )


register_commands(cli)


if __name__ == '__main__':
    cli()
