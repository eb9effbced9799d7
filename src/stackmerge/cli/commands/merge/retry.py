"""Retry logic with exponential backoff for transient platform failures.

Only errors listed in `retry_on` are retried. Anything else is a real
answer from the platform and propagates on the first attempt.

When the platform names a Retry-After delay, the wait is at least that long.
"""

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from stackmerge.cli.output import user_output
from stackmerge.core.github.errors import TransientGitHubError

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 4


def _delay_for(exc: Exception | None, retry_number: int, base_delay: float, backoff_factor: float) -> float:
    delay = base_delay * (backoff_factor ** (retry_number - 1))
    retry_after = getattr(exc, "retry_after", None)
    if retry_after is not None:
        delay = max(delay, float(retry_after))
    return delay


def retry_with_backoff(
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    base_delay: float = 2.0,
    *,
    backoff_factor: float = 2.0,
    retry_on: tuple[type[Exception], ...] = (TransientGitHubError,),
    ctx: Any = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Retry function with exponential backoff for transient failures.

    Supports two usage patterns:
    1. Function with ctx parameter: Decorator extracts ctx.time from first arg
    2. Closure function: Pass ctx explicitly to decorator

    Delay calculation: delay = base_delay * (backoff_factor ** (retry - 1)),
    raised to the error's retry_after when it carries one.
    Example with defaults: 2s, 4s, 8s before attempts 2, 3, 4

    Args:
        max_attempts: Maximum number of attempts, including the first
        base_delay: Delay in seconds before the first retry
        backoff_factor: Multiplier for exponential backoff
        retry_on: Exception types considered transient
        ctx: Optional StackMergeContext for closure functions

    Returns:
        Decorator function that wraps the target function with retry logic

    Example (closure function):
        def outer(ctx: StackMergeContext) -> None:
            @retry_with_backoff(ctx=ctx)
            def inner() -> PullRequestStatus:
                return ctx.github.get_pull_request(repo_root, 123)

    Raises:
        Exception: Non-transient errors immediately, transient errors once
            max_attempts is exhausted
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            # Inline import: Avoid circular dependency with context module
            from stackmerge.core.context import StackMergeContext

            context: StackMergeContext
            if ctx is not None:
                context = ctx
            elif len(args) > 0 and isinstance(args[0], StackMergeContext):
                context = args[0]
            else:
                msg = (
                    f"Function {func.__name__} must either take StackMergeContext "
                    "as first parameter or decorator must receive ctx"
                )
                raise TypeError(msg)

            last_exception: Exception | None = None
            for attempt in range(1, max_attempts + 1):
                if attempt > 1:
                    delay = _delay_for(last_exception, attempt - 1, base_delay, backoff_factor)
                    user_output(
                        f"Retrying after {delay:.1f}s (attempt {attempt}/{max_attempts})..."
                    )
                    context.time.sleep(delay)

                try:
                    return func(*args, **kwargs)
                except retry_on as e:
                    if attempt == max_attempts:
                        raise
                    last_exception = e
                    user_output(f"Transient failure: {e}")

            msg = f"Function {func.__name__} completed without result or exception"
            raise RuntimeError(msg)

        return wrapper

    return decorator
