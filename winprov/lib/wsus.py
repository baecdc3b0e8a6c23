from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .powershell import DEFAULT_POWERSHELL, powershell_cmd, ps_quote

logger = logging.getLogger(__name__)

DEFINITION_UPDATES = "Definition Updates"


@dataclass(frozen=True)
class WsusServer:
    name: str = "localhost"
    port: int = 8530
    use_ssl: bool = False

    def connect_script(self) -> str:
        script = f"Get-WsusServer -Name {ps_quote(self.name)} -PortNumber {int(self.port)}"
        if self.use_ssl:
            script += " -UseSsl"
        return script


@dataclass
class ApprovalResult:
    target_group: str
    approved: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def approval_script(
    server: WsusServer,
    target_group: str,
    *,
    classification: str = DEFINITION_UPDATES,
) -> str:
    """PowerShell that approves pending updates of one classification for one group.

    Only unapproved, non-declined updates are touched. One approved title is
    written per output line.
    """

    group = ps_quote(target_group)
    return "; ".join(
        [
            "Import-Module UpdateServices",
            f"$wsus = {server.connect_script()}",
            f"$group = $wsus.GetComputerTargetGroups() | Where-Object {{ $_.Name -eq {group} }}",
            f"if (-not $group) {{ throw ('Target group not found: ' + {group}) }}",
            "$pending = Get-WsusUpdate -UpdateServer $wsus -Classification All -Approval Unapproved -Status Any"
            f" | Where-Object {{ $_.Update.UpdateClassificationTitle -eq {ps_quote(classification)}"
            " -and -not $_.Update.IsDeclined }",
            "foreach ($u in $pending) {"
            f" $u | Approve-WsusUpdate -Action Install -TargetGroupName {group};"
            " Write-Output $u.Update.Title }",
        ]
    )


def approve_definition_updates(
    server: WsusServer,
    target_groups: Sequence[str],
    *,
    classification: str = DEFINITION_UPDATES,
    powershell: str = DEFAULT_POWERSHELL,
    timeout_s: float | None = None,
    dry_run: bool = False,
) -> List[ApprovalResult]:
    """Approve pending definition updates for each target group in turn.

    A failing group is logged and recorded; the remaining groups still run.
    """

    results: List[ApprovalResult] = []
    for target_group in target_groups:
        result = ApprovalResult(target_group=target_group)
        try:
            r = powershell_cmd(
                approval_script(server, target_group, classification=classification),
                executable=powershell,
                timeout_s=timeout_s,
                dry_run=dry_run,
            )
            result.approved = [line.strip() for line in r.stdout.splitlines() if line.strip()]
            logger.info(
                "Approved %d %s update(s) for %s",
                len(result.approved),
                classification,
                target_group,
            )
        except Exception as e:
            result.error = str(e)
            logger.warning("Approval failed for target group %s: %s", target_group, e)
        results.append(result)
    return results
