from __future__ import annotations

import contextlib
import logging
from typing import Iterator, Protocol

from .powershell import DEFAULT_POWERSHELL, powershell_cmd

logger = logging.getLogger(__name__)


class FeatureToggle(Protocol):
    """A system-wide feature that is switched off for the duration of a run."""

    def disable(self) -> None:
        ...

    def enable(self) -> None:
        ...


class ControlledFolderAccess:
    """Microsoft Defender controlled folder access, driven through Set-MpPreference."""

    def __init__(self, *, powershell: str = DEFAULT_POWERSHELL, dry_run: bool = False) -> None:
        self.powershell = powershell
        self.dry_run = dry_run

    def _set(self, value: str) -> None:
        powershell_cmd(
            f"Set-MpPreference -EnableControlledFolderAccess {value}",
            executable=self.powershell,
            dry_run=self.dry_run,
        )

    def disable(self) -> None:
        self._set("Disabled")

    def enable(self) -> None:
        self._set("Enabled")


class NullToggle:
    def disable(self) -> None:
        pass

    def enable(self) -> None:
        pass


def best_effort(action: str, fn) -> bool:
    """Call fn(), logging and swallowing any failure. Returns True on success."""

    try:
        fn()
        return True
    except Exception as e:
        logger.debug("Ignoring %s failure: %s", action, e)
        return False


@contextlib.contextmanager
def controlled_folder_access_disabled(toggle: FeatureToggle) -> Iterator[FeatureToggle]:
    best_effort("protection disable", toggle.disable)
    try:
        yield toggle
    finally:
        best_effort("protection enable", toggle.enable)
