from __future__ import annotations

import logging
from typing import Iterable

from .command import CmdResult, run_cmd

logger = logging.getLogger(__name__)

DEFAULT_POWERSHELL = "powershell.exe"


def ps_quote(value: str) -> str:
    """Quote a value as a PowerShell single-quoted string literal."""

    return "'" + str(value).replace("'", "''") + "'"


def ps_array(values: Iterable[str]) -> str:
    return "@(" + ", ".join(ps_quote(v) for v in values) + ")"


def powershell_cmd(
    script: str,
    *,
    executable: str = DEFAULT_POWERSHELL,
    check: bool = True,
    timeout_s: float | None = None,
    dry_run: bool = False,
) -> CmdResult:
    """Run a PowerShell script block non-interactively."""

    argv = [
        executable,
        "-NoProfile",
        "-NonInteractive",
        "-ExecutionPolicy",
        "Bypass",
        "-Command",
        # Surface terminating errors as a non-zero exit code.
        "$ErrorActionPreference = 'Stop'; " + script,
    ]
    return run_cmd(argv, check=check, timeout_s=timeout_s, dry_run=dry_run)
