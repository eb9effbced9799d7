"""Output utilities for CLI commands with clear intent.

user_output() is for everything a human reads and goes to stderr.
machine_output() is for results meant to be parsed and goes to stdout.
"""

import click


def user_output(message: str = "", *, nl: bool = True) -> None:
    """Write user-facing text to stderr."""
    click.echo(message, err=True, nl=nl)


def machine_output(message: str) -> None:
    """Write machine-readable text to stdout."""
    click.echo(message)
