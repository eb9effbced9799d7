import click

from stackmerge.cli.commands.freeze import freeze_cmd, unfreeze_cmd
from stackmerge.cli.commands.merge import merge_cmd
from stackmerge.cli.commands.repo import repo_group
from stackmerge.cli.debug import configure_debug_logging
from stackmerge.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="stackmerge")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Merge stacked pull requests from the bottom up."""
    configure_debug_logging()
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context()


cli.add_command(freeze_cmd)
cli.add_command(merge_cmd)
cli.add_command(repo_group)
cli.add_command(unfreeze_cmd)


def main() -> None:
    """CLI entry point used by the `stackmerge` console script."""
    cli()
