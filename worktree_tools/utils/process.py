"""Bounded execution of external (non-git) commands."""

import subprocess
from typing import Optional, Sequence

from worktree_tools.exceptions import CommandError
from worktree_tools.logging_config import get_logger

logger = get_logger(__name__)


def run_command(args: Sequence[str], cwd: Optional[str] = None, timeout: Optional[float] = None) -> str:
    """Run a command and return its stripped stdout.

    Raises:
        CommandError: the executable is missing, the command timed out, or it
            exited non-zero.
    """
    logger.debug(f"Running {' '.join(args)} (cwd={cwd}, timeout={timeout})")
    try:
        completed = subprocess.run(
            list(args),
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as e:
        raise CommandError(args, f"executable not found: {e.filename or args[0]}") from e
    except subprocess.TimeoutExpired as e:
        raise CommandError(args, f"timed out after {timeout}s") from e

    if completed.returncode != 0:
        stderr = (completed.stderr or "").strip()
        message = f"exit {completed.returncode}"
        if stderr:
            message += f": {stderr}"
        raise CommandError(args, message, completed.returncode)

    return (completed.stdout or "").strip()
