"""Recovery decisions for failures that need a human."""

from abc import ABC, abstractmethod
from typing import Literal

import click

from stackmerge.cli.commands.merge.errors import RecoverableMergeError
from stackmerge.cli.commands.merge.output import _emit

Decision = Literal["retry", "abort"]


class DecisionProvider(ABC):
    """Decides whether a recoverable failure is retried or ends the run."""

    @abstractmethod
    def ask_retry_or_abort(self, error: RecoverableMergeError) -> Decision:
        """Return "retry" to repeat the failed step, "abort" to stop the run."""


class InteractiveDecisionProvider(DecisionProvider):
    """Prompts on the terminal."""

    def ask_retry_or_abort(self, error: RecoverableMergeError) -> Decision:
        _emit(click.style("\n⚠ ", fg="yellow") + str(error))
        _emit("Fix the problem on GitHub, then retry.")
        answer = click.prompt(
            "Retry or abort?",
            type=click.Choice(["retry", "abort"]),
            err=True,
        )
        return "retry" if answer == "retry" else "abort"


class NonInteractiveDecisionProvider(DecisionProvider):
    """Never waits for input; every recoverable failure ends the run."""

    def ask_retry_or_abort(self, error: RecoverableMergeError) -> Decision:
        return "abort"


class ScriptedDecisionProvider(DecisionProvider):
    """Returns pre-recorded decisions in order; aborts once they run out.

    Used by tests to drive the retry paths deterministically.
    """

    def __init__(self, decisions: list[Decision] | None = None) -> None:
        self._decisions = list(decisions or [])
        self._asked: list[RecoverableMergeError] = []

    @property
    def asked(self) -> list[RecoverableMergeError]:
        return list(self._asked)

    def ask_retry_or_abort(self, error: RecoverableMergeError) -> Decision:
        self._asked.append(error)
        if not self._decisions:
            return "abort"
        return self._decisions.pop(0)
