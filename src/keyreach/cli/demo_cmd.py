"""``keyreach demo`` - Run the possession walkthrough.

Adds a key to the user keyring, shows it is neither readable nor locatable
from the session keyring, links the user keyring into the session keyring,
and shows that old and new keys alike become possessed.

Exit Codes:
    0 - Every step produced its expected outcome.
    1 - At least one step diverged from the expected outcome.
"""

from __future__ import annotations

import json
import sys

import click

from keyreach.demo import DEFAULT_DEMO_UID, run_possession_demo


@click.command("demo")
@click.option(
    "--uid",
    type=int,
    default=DEFAULT_DEMO_UID,
    show_default=True,
    help="Identity that owns the demo keyrings.",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def demo_command(uid: int, output_format: str) -> None:
    """Show that linking @u into @s retroactively grants possession.

    Exit code 0 if the model behaved as expected, 1 otherwise.
    """
    steps = run_possession_demo(uid)
    passed = all(step.passed for step in steps)

    if output_format == "json":
        click.echo(json.dumps({
            "uid": uid,
            "passed": passed,
            "steps": [step.as_dict() for step in steps],
        }, indent=2))
    else:
        from keyreach.cli.output import print_demo_steps
        print_demo_steps(steps, uid)

    sys.exit(0 if passed else 1)
