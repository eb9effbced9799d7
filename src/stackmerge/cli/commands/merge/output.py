"""Output helpers for the merge command."""

import click

from stackmerge.cli.commands.merge.errors import PreconditionError
from stackmerge.cli.output import machine_output, user_output


def _emit(message: str = "") -> None:
    """Emit a progress message for the user."""
    user_output(message)


def _check() -> str:
    return click.style("✓", fg="green")


def _format_description(description: str, check: str) -> str:
    """Format an operation description with a trailing checkmark."""
    desc_styled = click.style(description, fg="white", dim=True)
    return f"  {desc_styled} {check}"


def _format_pr(pr_number: int | None) -> str:
    if pr_number is None:
        return click.style("(no PR)", fg="red")
    return click.style(f"#{pr_number}", fg="cyan")


def _emit_precondition_error(error: PreconditionError) -> None:
    _emit(click.style("Error: ", fg="red") + str(error))
    if error.hints:
        _emit("\nTo fix:")
        for hint in error.hints:
            _emit(f"  • {hint}")


def _emit_machine_error(*, kind: str, branch: str, pr_number: int | None, reason: str) -> None:
    """Print one parseable line describing why a non-interactive run stopped."""
    pr = str(pr_number) if pr_number is not None else "-"
    flat_reason = " ".join(reason.split())
    machine_output(f"stackmerge-error: kind={kind} branch={branch} pr={pr} reason={flat_reason}")
