from __future__ import annotations

import logging
import subprocess
from typing import Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)

DEFAULT_CHOCO = "choco"

STRICT_FLAGS: tuple[str, ...] = (
    "--yes",
    "--accept-license",
    "--limit-output",
    "--no-progress",
    "--force",
    "--install-arguments=ALLUSERS=1",
)
RELAXED_FLAGS: tuple[str, ...] = ("--ignore-checksums",)


def choco_install_argv(
    package: str,
    *,
    executable: str = DEFAULT_CHOCO,
    ignore_checksums: bool = False,
    extra_args: Sequence[str] = (),
) -> list[str]:
    argv = [executable, "install", package, *STRICT_FLAGS]
    if ignore_checksums:
        argv += list(RELAXED_FLAGS)
    argv += list(extra_args)
    return argv


class ChocolateyInstaller:
    """Installs a single package through choco.exe.

    Each call is one attempt; the return value is the only signal the caller
    gets. A missing executable or a timeout counts as a failed attempt.
    """

    def __init__(
        self,
        *,
        executable: str = DEFAULT_CHOCO,
        timeout_s: float | None = None,
        extra_args: Sequence[str] = (),
        dry_run: bool = False,
    ) -> None:
        self.executable = executable
        self.timeout_s = timeout_s
        self.extra_args = tuple(extra_args)
        self.dry_run = dry_run

    def install(self, package: str, *, ignore_checksums: bool = False) -> bool:
        argv = choco_install_argv(
            package,
            executable=self.executable,
            ignore_checksums=ignore_checksums,
            extra_args=self.extra_args,
        )
        try:
            r = run_cmd(argv, check=False, timeout_s=self.timeout_s, dry_run=self.dry_run)
        except (OSError, ValueError, subprocess.SubprocessError) as e:
            logger.error("choco could not be run for %s: %s", package, e)
            return False

        if not r.ok:
            logger.info("choco exited %s for %s", r.returncode, package)
        return r.ok
