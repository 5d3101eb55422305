"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import NoReturn

import typer

from shipyard.core.errors import ErrorCode
from shipyard.output.console import ConsoleProtocol, Style
from shipyard.services.release.errors import ReleaseError


def exit_with_error(
    error: ReleaseError,
    console: ConsoleProtocol,
    code: ErrorCode = ErrorCode.FAILURE,
) -> NoReturn:
    """Report a pipeline failure and exit.

    Every pipeline error maps to the same exit code; the message names the
    failing step and the hint (when present) tells the operator what to do.
    """
    console.error(f"{error.category}: {error.message}")
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)
    raise typer.Exit(code=int(code))
