"""``keyreach mask [MASK]`` - Decode a permission mask.

Parses a mask written as ``class=letters`` pairs, for example
``"possessor=alswrv owner=v"``, and prints which capabilities each class
grants. Without an argument the default credential mask is shown.

Exit Codes:
    0 - Mask parsed and displayed.
    2 - Mask string is malformed.
"""

from __future__ import annotations

import json
import sys

import click

from keyreach.core.permissions import DEFAULT_KEY_MASK, PermissionMask
from keyreach.exceptions import MaskFormatError


@click.command("mask")
@click.argument("mask", required=False)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def mask_command(mask: str | None, output_format: str) -> None:
    """Decode MASK and show the capabilities of each permission class.

    Exit code 0 on success, 2 if MASK cannot be parsed.
    """
    try:
        parsed = PermissionMask.parse(mask) if mask else DEFAULT_KEY_MASK
    except MaskFormatError as exc:
        if output_format == "json":
            click.echo(json.dumps({"error": str(exc)}))
        else:
            click.echo(f"Error: {exc}")
        sys.exit(2)

    if output_format == "json":
        click.echo(json.dumps(parsed.as_dict(), indent=2))
    else:
        from keyreach.cli.output import print_mask
        print_mask(parsed)

    sys.exit(0)
