"""Show and edit `[tool.stackmerge]` settings."""

from pathlib import Path

import click

from stackmerge.cli.output import machine_output, user_output
from stackmerge.core.config import SETTING_KEYS, ConfigError, load_repo_config, write_repo_setting
from stackmerge.core.context import StackMergeContext
from stackmerge.core.repo_discovery import NoRepoSentinel


def _repo_root(ctx: StackMergeContext) -> Path:
    if isinstance(ctx.repo, NoRepoSentinel):
        user_output(click.style("Error: ", fg="red") + ctx.repo.message)
        raise SystemExit(1)
    return ctx.repo.root


@click.group("repo")
def repo_group() -> None:
    """Manage repository settings."""


@repo_group.command("show")
@click.pass_obj
def show_cmd(ctx: StackMergeContext) -> None:
    """Print the effective settings, one `key = value` per line."""
    root = _repo_root(ctx)
    try:
        config = load_repo_config(root)
    except ConfigError as e:
        user_output(click.style("Error: ", fg="red") + str(e))
        raise SystemExit(1) from None

    trunk = config.trunk_branch or ctx.git.get_trunk_branch(root)
    values = {
        "trunk_branch": trunk,
        "merge_method": config.merge_method or "(repository default)",
        "timeout_minutes": config.timeout_minutes if config.timeout_minutes is not None else "15 (default)",
        "stack_cli": config.stack_cli,
    }
    for key in SETTING_KEYS:
        machine_output(f"{key} = {values[key]}")


@repo_group.command("set")
@click.argument("key", type=click.Choice(SETTING_KEYS))
@click.argument("value")
@click.pass_obj
def set_cmd(ctx: StackMergeContext, key: str, value: str) -> None:
    """Set KEY to VALUE in pyproject.toml."""
    root = _repo_root(ctx)
    try:
        written = write_repo_setting(root, key, value)
    except ConfigError as e:
        user_output(click.style("Error: ", fg="red") + str(e))
        raise SystemExit(1) from None

    user_output(click.style("✓ ", fg="green") + f"Set {key} = {written}")
