"""Shared fakes for winprov tests."""

from __future__ import annotations

import subprocess
from typing import Dict, List, Set, Tuple

import pytest


class FakeInstaller:
    """Records (package, ignore_checksums) calls; fails where told to."""

    def __init__(self, *, strict_fail: Set[str] = frozenset(), relaxed_fail: Set[str] = frozenset(), events=None):
        self.strict_fail = set(strict_fail)
        self.relaxed_fail = set(relaxed_fail)
        self.calls: List[Tuple[str, bool]] = []
        self.events = events if events is not None else []

    def install(self, package: str, *, ignore_checksums: bool = False) -> bool:
        self.calls.append((package, ignore_checksums))
        self.events.append(("install", package, ignore_checksums))
        failing = self.relaxed_fail if ignore_checksums else self.strict_fail
        return package not in failing


class FakeToggle:
    def __init__(self, events=None, *, fail: bool = False):
        self.events = events if events is not None else []
        self.fail = fail

    def disable(self) -> None:
        self.events.append(("disable",))
        if self.fail:
            raise RuntimeError("Set-MpPreference failed")

    def enable(self) -> None:
        self.events.append(("enable",))
        if self.fail:
            raise RuntimeError("Set-MpPreference failed")


class FakeRun:
    """Stand-in for subprocess.run returning scripted results."""

    def __init__(self, results: Dict[str, Tuple[int, str, str]] | None = None, default=(0, "", "")):
        self.results = results or {}
        self.default = default
        self.calls: List[List[str]] = []

    def __call__(self, argv, **kwargs):
        self.calls.append(list(argv))
        joined = " ".join(argv)
        rc, out, err = self.default
        for needle, result in self.results.items():
            if needle in joined:
                rc, out, err = result
        return subprocess.CompletedProcess(argv, rc, stdout=out, stderr=err)


@pytest.fixture
def events() -> list:
    return []


@pytest.fixture
def fake_run(monkeypatch) -> FakeRun:
    runner = FakeRun()
    monkeypatch.setattr(subprocess, "run", runner)
    return runner


@pytest.fixture
def make_installer(events):
    def _make(**kwargs) -> FakeInstaller:
        return FakeInstaller(events=events, **kwargs)

    return _make


@pytest.fixture
def make_toggle(events):
    def _make(**kwargs) -> FakeToggle:
        return FakeToggle(events, **kwargs)

    return _make
