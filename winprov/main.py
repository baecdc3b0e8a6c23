from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from .config import ProvisionConfig, load_config
from .lib.choco import ChocolateyInstaller
from .lib.defender import ControlledFolderAccess, FeatureToggle, NullToggle
from .lib.wsus import ApprovalResult, approve_definition_updates
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .orchestrator import InstallSummary, PackageInstallOrchestrator

logger = logging.getLogger(__name__)


def build_orchestrator(cfg: ProvisionConfig) -> PackageInstallOrchestrator:
    installer = ChocolateyInstaller(
        executable=cfg.choco_executable,
        timeout_s=cfg.choco_timeout_s,
        extra_args=cfg.choco_extra_args,
        dry_run=cfg.dry_run,
    )
    toggle: FeatureToggle
    if cfg.manage_protection:
        toggle = ControlledFolderAccess(powershell=cfg.powershell, dry_run=cfg.dry_run)
    else:
        toggle = NullToggle()
    return PackageInstallOrchestrator(installer, toggle=toggle)


def run_install(cfg: ProvisionConfig, packages: Optional[List[str]] = None) -> InstallSummary:
    """Install the configured package list (or an explicit override)."""

    pkgs = packages if packages else cfg.packages
    logger.info("Installing %d package(s) (dry_run=%s)", len(pkgs), cfg.dry_run)
    return build_orchestrator(cfg).run(pkgs)


def run_approve(cfg: ProvisionConfig, target_groups: Optional[List[str]] = None) -> List[ApprovalResult]:
    groups = target_groups if target_groups else cfg.wsus_target_groups
    server = cfg.wsus_server
    logger.info("Approving %s on %s:%s for %s", cfg.wsus_classification, server.name, server.port, ", ".join(groups))
    return approve_definition_updates(
        server,
        groups,
        classification=cfg.wsus_classification,
        powershell=cfg.powershell,
        dry_run=cfg.dry_run,
    )


def _apply_overrides(cfg: ProvisionConfig, args: argparse.Namespace) -> ProvisionConfig:
    raw = dict(cfg.raw)
    if args.dry_run:
        raw["dry_run"] = True
    if getattr(args, "server", None):
        raw["wsus"] = dict(raw.get("wsus") or {}, server=args.server)
    if getattr(args, "port", None):
        raw["wsus"] = dict(raw.get("wsus") or {}, port=args.port)
    if getattr(args, "no_protection_toggle", False):
        raw["protection"] = dict(raw.get("protection") or {}, manage=False)
    return ProvisionConfig(raw=raw)


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="winprov")
    p.add_argument("--config", default=None, help="Path to provisioning config (yaml)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to log file")
    p.add_argument("--dry-run", action="store_true", help="Log commands without running them")
    p.add_argument("-v", "--verbose", action="store_true", help="Write command output and ignored toggle errors to the log file")

    sub = p.add_subparsers(dest="command", required=True)

    install = sub.add_parser("install", help="Install desktop packages through Chocolatey")
    install.add_argument(
        "--package",
        action="append",
        dest="packages",
        default=None,
        help="Package to install (repeatable, overrides the configured list)",
    )
    install.add_argument(
        "--no-protection-toggle",
        action="store_true",
        help="Leave controlled folder access untouched",
    )

    approve = sub.add_parser("approve-definitions", help="Approve pending definition updates in WSUS")
    approve.add_argument("--server", default=None, help="WSUS server name")
    approve.add_argument("--port", type=int, default=None, help="WSUS port")
    approve.add_argument(
        "--target-group",
        action="append",
        dest="target_groups",
        default=None,
        help="Computer target group (repeatable)",
    )

    args = p.parse_args(argv)

    configure_logging(log_path=args.log, verbose=args.verbose)
    cfg = _apply_overrides(load_config(args.config), args)

    # Per-item failures are logged, never turned into an exit code.
    if args.command == "install":
        run_install(cfg, args.packages)
    else:
        run_approve(cfg, args.target_groups)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
