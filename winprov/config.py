from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .lib.choco import DEFAULT_CHOCO
from .lib.powershell import DEFAULT_POWERSHELL
from .lib.wsus import DEFINITION_UPDATES, WsusServer

DEFAULT_PACKAGES = (
    "googlechrome",
    "firefox",
    "7zip",
    "vlc",
    "notepadplusplus",
    "adobereader",
)


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ProvisionConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    def _section(self, name: str) -> Dict[str, Any]:
        section = self.raw.get(name) or {}
        if not isinstance(section, dict):
            raise ConfigError(f"{name} must be a mapping")
        return section

    def _number(self, key: str, value: Any, kind):
        try:
            return kind(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"{key} must be a number, got {value!r}") from e

    @property
    def dry_run(self) -> bool:
        return bool(self.raw.get("dry_run", False))

    @property
    def packages(self) -> List[str]:
        pkgs = self.raw.get("packages")
        if pkgs is None:
            return list(DEFAULT_PACKAGES)
        if not isinstance(pkgs, list):
            raise ConfigError("packages must be a list")
        return [str(p).strip() for p in pkgs if str(p).strip()]

    @property
    def choco_executable(self) -> str:
        return str(self._section("chocolatey").get("executable") or DEFAULT_CHOCO)

    @property
    def choco_timeout_s(self) -> Optional[float]:
        value = self._section("chocolatey").get("timeout_s", 3600)
        return self._number("chocolatey.timeout_s", value, float) if value else None

    @property
    def choco_extra_args(self) -> List[str]:
        return [str(a) for a in (self._section("chocolatey").get("extra_args") or [])]

    @property
    def manage_protection(self) -> bool:
        return bool(self._section("protection").get("manage", True))

    @property
    def powershell(self) -> str:
        return str(self._section("protection").get("powershell") or DEFAULT_POWERSHELL)

    @property
    def wsus_server(self) -> WsusServer:
        wsus = self._section("wsus")
        return WsusServer(
            name=str(wsus.get("server") or "localhost"),
            port=self._number("wsus.port", wsus.get("port") or 8530, int),
            use_ssl=bool(wsus.get("use_ssl", False)),
        )

    @property
    def wsus_classification(self) -> str:
        return str(self._section("wsus").get("classification") or DEFINITION_UPDATES)

    @property
    def wsus_target_groups(self) -> List[str]:
        groups = self._section("wsus").get("target_groups")
        if groups is None:
            return ["All Computers"]
        if not isinstance(groups, list):
            raise ConfigError("wsus.target_groups must be a list")
        return [str(g) for g in groups]


def load_config(path: Optional[str]) -> ProvisionConfig:
    """Load a YAML config. No path means built-in defaults."""

    if not path:
        return ProvisionConfig()

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigError("config must be YAML")

    try:
        import yaml  # type: ignore
    except Exception as e:
        raise RuntimeError("PyYAML is required to read the provisioning config") from e

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{p.name} must contain a mapping/object")

    return ProvisionConfig(raw=raw)
