from __future__ import annotations

import subprocess

from winprov.lib.choco import RELAXED_FLAGS, STRICT_FLAGS, ChocolateyInstaller, choco_install_argv


def test_strict_argv() -> None:
    argv = choco_install_argv("7zip", executable="C:/choco.exe")

    assert argv[:3] == ["C:/choco.exe", "install", "7zip"]
    for flag in STRICT_FLAGS:
        assert flag in argv
    assert "--ignore-checksums" not in argv


def test_relaxed_argv_adds_checksum_bypass() -> None:
    strict = choco_install_argv("7zip")
    relaxed = choco_install_argv("7zip", ignore_checksums=True)

    assert relaxed[: len(strict)] == strict
    assert relaxed[len(strict):] == list(RELAXED_FLAGS)


def test_extra_args_come_last() -> None:
    argv = choco_install_argv("vlc", ignore_checksums=True, extra_args=["--source=internal"])

    assert argv[-1] == "--source=internal"


def test_install_success(fake_run) -> None:
    assert ChocolateyInstaller().install("git") is True
    assert fake_run.calls[0][:3] == ["choco", "install", "git"]


def test_install_nonzero_exit_is_failure(fake_run) -> None:
    fake_run.default = (1, "", "checksum mismatch")

    assert ChocolateyInstaller().install("git") is False


def test_missing_executable_is_failure(monkeypatch) -> None:
    def missing(argv, **kwargs):
        raise FileNotFoundError(argv[0])

    monkeypatch.setattr(subprocess, "run", missing)

    assert ChocolateyInstaller(executable="nope.exe").install("git") is False


def test_timeout_is_failure(monkeypatch) -> None:
    def slow(argv, **kwargs):
        raise subprocess.TimeoutExpired(argv, kwargs.get("timeout"))

    monkeypatch.setattr(subprocess, "run", slow)

    assert ChocolateyInstaller(timeout_s=1).install("git", ignore_checksums=True) is False


def test_dry_run_succeeds_without_running(fake_run) -> None:
    installer = ChocolateyInstaller(dry_run=True)

    assert installer.install("git") is True
    assert fake_run.calls == []


def test_undecodable_output_is_failure(monkeypatch) -> None:
    def garbled(argv, **kwargs):
        raise UnicodeDecodeError("utf-8", b"\xff\xfe", 0, 1, "invalid start byte")

    monkeypatch.setattr(subprocess, "run", garbled)

    assert ChocolateyInstaller().install("bad") is False


def test_nul_in_package_name_is_failure(monkeypatch) -> None:
    def nul(argv, **kwargs):
        raise ValueError("embedded null byte")

    monkeypatch.setattr(subprocess, "run", nul)

    assert ChocolateyInstaller().install("bad\x00name") is False
