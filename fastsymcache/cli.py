"""Command line front end: fetch one symbol file to disk."""

import logging
import sys

import click

from fastsymcache.archive import extract_symbol
from fastsymcache.download import SELECTION_POLICIES
from fastsymcache.errors import SymbolLookupError
from fastsymcache.logging import logger
from fastsymcache.lookup import search_symbol_file

EXIT_NOT_FOUND = 1
EXIT_ERROR = 2


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log every query.")
def cli(verbose):
    """Resolve debug symbols from local caches and symbol servers."""
    if verbose:
        logger.setLevel(logging.DEBUG)


@cli.command()
@click.argument("file_name")
@click.argument("debug_id")
@click.option(
    "-s",
    "--symbol-server",
    "symbol_servers",
    multiple=True,
    help="Symbol path entry, e.g. srv*~/symcache*https://symbols.mozilla.org. Repeatable.",
)
@click.option("-o", "--output", type=click.Path(dir_okay=False, writable=True), help="Where to write the file.")
@click.option(
    "--prefer",
    type=click.Choice(SELECTION_POLICIES),
    default=SELECTION_POLICIES[0],
    show_default=True,
    help="Which response wins when several servers have the file.",
)
def fetch(file_name, debug_id, symbol_servers, output, prefer):
    """Fetch FILE_NAME built with DEBUG_ID."""
    symbol_path = ";".join(symbol_servers) if symbol_servers else None

    try:
        content, file_name = search_symbol_file(file_name, debug_id, symbol_path, prefer=prefer)
        if content is not None:
            content = extract_symbol(content, file_name)
    except SymbolLookupError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ERROR)

    if content is None:
        click.echo(f"{file_name} ({debug_id}) not found", err=True)
        sys.exit(EXIT_NOT_FOUND)

    output = output or file_name
    with open(output, "wb") as handle:
        handle.write(content)
    click.echo(f"Wrote {len(content)} bytes to {output}")


def main():
    cli()
