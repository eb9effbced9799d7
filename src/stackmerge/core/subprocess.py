"""Subprocess execution with rich error context.

All gateway implementations shell out through these helpers so that failures
surface as RuntimeError messages naming the operation, the command, and the
captured output.
"""

import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Any


def run_subprocess_with_context(
    cmd: Sequence[str],
    operation_context: str,
    cwd: Path | None = None,
    capture_output: bool = True,
    text: bool = True,
    encoding: str = "utf-8",
    check: bool = True,
    **kwargs: Any,
) -> subprocess.CompletedProcess[str]:
    """Execute subprocess with enriched error reporting for integration layer.

    Wraps subprocess.run() to catch CalledProcessError and re-raise as RuntimeError
    with operation context, stderr output, and command details.

    Args:
        cmd: Command and arguments to execute
        operation_context: Human-readable description of operation
        cwd: Working directory for command execution
        capture_output: Whether to capture stdout/stderr (default: True)
        text: Whether to decode output as text (default: True)
        encoding: Text encoding to use (default: "utf-8")
        check: Whether to raise on non-zero exit (default: True)
        **kwargs: Additional arguments passed to subprocess.run()

    Returns:
        CompletedProcess instance from subprocess.run()

    Raises:
        RuntimeError: If command fails with enriched error context
        FileNotFoundError: If command binary is not found
    """
    try:
        return subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=capture_output,
            text=text,
            encoding=encoding,
            check=check,
            **kwargs,
        )
    except subprocess.CalledProcessError as e:
        raise RuntimeError(_format_failure(cmd, operation_context, e)) from e


def _format_failure(
    cmd: Sequence[str], operation_context: str, e: subprocess.CalledProcessError
) -> str:
    cmd_str = " ".join(str(arg) for arg in cmd)
    error_msg = f"Failed to {operation_context}"
    error_msg += f"\nCommand: {cmd_str}"
    error_msg += f"\nExit code: {e.returncode}"

    if e.stdout:
        stdout_text = e.stdout if isinstance(e.stdout, str) else e.stdout.decode("utf-8")
        stdout_stripped = stdout_text.strip()
        if stdout_stripped:
            error_msg += f"\nstdout: {stdout_stripped}"

    if e.stderr:
        stderr_text = e.stderr if isinstance(e.stderr, str) else e.stderr.decode("utf-8")
        stderr_stripped = stderr_text.strip()
        if stderr_stripped:
            error_msg += f"\nstderr: {stderr_stripped}"

    return error_msg
