from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol, Sequence

from .lib.defender import FeatureToggle, NullToggle, controlled_folder_access_disabled

logger = logging.getLogger(__name__)


class PackageInstaller(Protocol):
    """One install attempt per call; returns True when the package installed."""

    def install(self, package: str, *, ignore_checksums: bool = False) -> bool:
        ...


class InstallAttemptResult(enum.Enum):
    SUCCESS = "success"
    # Strict attempt failed, relaxed retry installed the package.
    FAILED_STRICT = "failed_strict"
    FAILED_BOTH = "failed_both"

    @property
    def installed(self) -> bool:
        return self is not InstallAttemptResult.FAILED_BOTH

    @property
    def label(self) -> str:
        if self is InstallAttemptResult.SUCCESS:
            return "installed"
        if self is InstallAttemptResult.FAILED_STRICT:
            return "installed (checksums ignored)"
        return "failed"


@dataclass(frozen=True)
class PackageResult:
    position: int
    package: str
    result: InstallAttemptResult


@dataclass
class InstallSummary:
    total: int
    progress: int = 0
    results: List[PackageResult] = field(default_factory=list)

    @property
    def installed(self) -> List[str]:
        return [r.package for r in self.results if r.result.installed]

    @property
    def failed(self) -> List[str]:
        return [r.package for r in self.results if not r.result.installed]

    @property
    def percent(self) -> int:
        if not self.total:
            return 100
        return int(self.progress * 100 / self.total)


ProgressCallback = Callable[[InstallSummary, PackageResult], None]


def log_progress(summary: InstallSummary, item: PackageResult) -> None:
    logger.info(
        "[%d/%d] (%d%%) %s: %s",
        summary.progress,
        summary.total,
        summary.percent,
        item.package,
        item.result.label,
    )


class PackageInstallOrchestrator:
    """Installs an ordered package list with a strict-then-relaxed fallback.

    The protection toggle is disabled once before the first package and
    re-enabled once after the last, whatever happened in between. Per-package
    failures are reported through InstallAttemptResult and never abort the run.
    """

    def __init__(
        self,
        installer: PackageInstaller,
        *,
        toggle: Optional[FeatureToggle] = None,
        on_progress: Optional[ProgressCallback] = log_progress,
    ) -> None:
        self.installer = installer
        self.toggle = toggle if toggle is not None else NullToggle()
        self.on_progress = on_progress

    def _attempt(self, package: str, *, ignore_checksums: bool) -> bool:
        # An installer that raises counts as a failed attempt.
        try:
            return bool(self.installer.install(package, ignore_checksums=ignore_checksums))
        except Exception as e:
            logger.error("Installer raised for %s (ignore_checksums=%s): %s", package, ignore_checksums, e)
            return False

    def install_one(self, package: str) -> InstallAttemptResult:
        if self._attempt(package, ignore_checksums=False):
            return InstallAttemptResult.SUCCESS

        logger.info("Strict install failed for %s, retrying with checksums ignored", package)
        if self._attempt(package, ignore_checksums=True):
            return InstallAttemptResult.FAILED_STRICT

        logger.warning("Failed to install %s", package)
        return InstallAttemptResult.FAILED_BOTH

    def run(self, packages: Sequence[str]) -> InstallSummary:
        summary = InstallSummary(total=len(packages))

        with controlled_folder_access_disabled(self.toggle):
            for package in packages:
                result = self.install_one(package)
                summary.progress += 1
                item = PackageResult(position=summary.progress, package=package, result=result)
                summary.results.append(item)
                if self.on_progress is not None:
                    self.on_progress(summary, item)

        logger.info(
            "Install run finished: %d/%d installed, %d failed",
            len(summary.installed),
            summary.total,
            len(summary.failed),
        )
        if summary.failed:
            logger.info("Failed packages: %s", ", ".join(summary.failed))
        return summary
