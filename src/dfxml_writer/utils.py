"""Utility functions for the DFXML writer."""

import logging
import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence


def setup_logger(name: str, verbose: bool = False) -> logging.Logger:
    """Set up and return a configured logger instance.

    Args:
        name: Logger name.
        verbose: If True, sets log level to DEBUG.

    Returns:
        Configured logging.Logger instance.
    """
    logger = logging.getLogger(name)
    handler = logging.StreamHandler()
    formatter = logging.Formatter('%(levelname)s: %(message)s')

    if not logger.handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return logger


def make_command_line(argv: Sequence[str]) -> str:
    """Rebuild a printable command line, quoting arguments that contain spaces.

    Args:
        argv: Program name followed by its arguments.

    Returns:
        The arguments joined by single spaces.
    """
    return " ".join(f'"{arg}"' if " " in arg else arg for arg in argv)


@dataclass
class CommandResult:
    """Container for the results of an external command execution.

    Attributes:
        success: Whether the subprocess could be started at all.
        exit_code: The return code, -1 if the process never ran.
        stdout: Captured standard output.
        stderr: Captured standard error.
        error: Optional string containing the exception message if execution failed.
    """
    success: bool
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    error: Optional[str] = None

    @classmethod
    def from_failure(cls, error: str) -> 'CommandResult':
        """Create a CommandResult from failed execution."""
        return cls(success=False, exit_code=-1, error=error)


def run_command(argv: Sequence[str]) -> CommandResult:
    """Execute a command and capture its output.

    Output is decoded as UTF-8. Undecodable bytes are kept as surrogate
    escapes so they can be written back out unchanged.

    Args:
        argv: Program name followed by its arguments.

    Returns:
        CommandResult describing the run.
        Note: exit_code is -1 if execution crashes (e.g. binary not found).
    """
    try:
        result = subprocess.run(
            list(argv), capture_output=True, encoding="utf-8", errors="surrogateescape"
        )
    except OSError as e:
        return CommandResult.from_failure(str(e))
    return CommandResult(
        success=True,
        exit_code=result.returncode,
        stdout=result.stdout,
        stderr=result.stderr,
    )
