"""
Process-level failure indicator.

Validation outcomes are always returned as values, so the exit code is the
only machine-checkable failure signal left for automation. Anything that
decides the run has failed (validator missing, validator reported failure,
subprocess could not start) calls mark_failed(); the CLI turns the recorded
code into the process exit status when the command finishes.

The indicator is sticky for the life of the process, mirroring how a shell
exit code works: once a run has failed, later successful runs do not clear it.
"""

from __future__ import annotations

import logging
import threading

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_exit_code = 0


def mark_failed(code: int = 1) -> None:
    """Record that the current process should exit with a failure code."""
    global _exit_code  # noqa: PLW0603
    if code == 0:
        return
    with _lock:
        if _exit_code == 0:
            logger.debug("Process exit code set to %d", code)
            _exit_code = code


def exit_code() -> int:
    """Return the exit code the process should finish with."""
    with _lock:
        return _exit_code


def has_failed() -> bool:
    return exit_code() != 0


def reset() -> None:
    """Clear the indicator. Used by tests and long-lived hosts between runs."""
    global _exit_code  # noqa: PLW0603
    with _lock:
        _exit_code = 0
