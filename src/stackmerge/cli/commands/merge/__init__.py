"""Merge a stack of pull requests, trunk outward, one at a time."""

from stackmerge.cli.commands.merge.command import merge_cmd

__all__ = ["merge_cmd"]
