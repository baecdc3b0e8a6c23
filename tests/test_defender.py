from __future__ import annotations

import pytest

from winprov.lib.defender import ControlledFolderAccess, controlled_folder_access_disabled


def test_disable_and_enable_commands(fake_run) -> None:
    cfa = ControlledFolderAccess(powershell="pwsh.exe")
    cfa.disable()
    cfa.enable()

    scripts = [argv[-1] for argv in fake_run.calls]
    assert scripts[0].endswith("Set-MpPreference -EnableControlledFolderAccess Disabled")
    assert scripts[1].endswith("Set-MpPreference -EnableControlledFolderAccess Enabled")
    assert all(argv[0] == "pwsh.exe" for argv in fake_run.calls)


def test_failed_toggle_raises_outside_scope(fake_run) -> None:
    fake_run.default = (1, "", "access denied")

    with pytest.raises(RuntimeError):
        ControlledFolderAccess().disable()


def test_scope_swallows_toggle_failures(fake_run) -> None:
    fake_run.default = (1, "", "access denied")
    ran = []

    with controlled_folder_access_disabled(ControlledFolderAccess()):
        ran.append(True)

    assert ran == [True]
    assert len(fake_run.calls) == 2


def test_scope_reenables_on_error(events, make_toggle) -> None:
    with pytest.raises(ValueError):
        with controlled_folder_access_disabled(make_toggle()):
            raise ValueError("boom")

    assert events == [("disable",), ("enable",)]
