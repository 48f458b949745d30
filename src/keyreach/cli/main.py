"""keyreach CLI: explore possession-based keyring permissions.

Entry point for the ``keyreach`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    demo  - Run the possession walkthrough against an in-memory store.
    mask  - Decode a permission mask and show it per class.

Usage::

    keyreach demo
    keyreach demo --format json --uid 1001
    keyreach mask
    keyreach mask "possessor=alswrv owner=v"
"""

from __future__ import annotations

import logging

import click

from keyreach import __version__
from keyreach.cli.demo_cmd import demo_command
from keyreach.cli.mask_cmd import mask_command


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """keyreach: Possession-based access control for keyring graphs.

    Model how linking keyrings grants possession, and why owning a
    credential is not enough to read it.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )


# Register all subcommands
cli.add_command(demo_command)
cli.add_command(mask_command)
