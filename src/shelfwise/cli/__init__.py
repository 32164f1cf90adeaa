# ABOUTME: CLI package for Shelfwise, built on Click.
# ABOUTME: Defines the root command group, logging setup, and registers subcommands.

import logging

import click

from shelfwise.cli.commands import (
    duplicate_cmd,
    fix_cmd,
    health_cmd,
    lookup_cmd,
    parse_cmd,
    search_cmd,
)


@click.group()
@click.version_option(package_name="shelfwise")
@click.option(
    "-v", "--verbose", count=True, help="Show catalog warnings (-v) or debug output (-vv)."
)
def cli(verbose: int) -> None:
    """Shelfwise - book metadata lookup and library cleanup."""
    level = logging.ERROR
    if verbose == 1:
        level = logging.WARNING
    elif verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


cli.add_command(lookup_cmd.lookup)
cli.add_command(search_cmd.search)
cli.add_command(parse_cmd.genres)
cli.add_command(parse_cmd.series)
cli.add_command(duplicate_cmd.duplicate)
cli.add_command(health_cmd.health)
cli.add_command(fix_cmd.fix)
