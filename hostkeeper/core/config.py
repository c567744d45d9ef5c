"""Configuration loading with layered overrides."""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

SYSTEM_CONFIG = Path("/etc/hostkeeper/config.yaml")
USER_CONFIG = Path.home() / ".config" / "hostkeeper" / "config.yaml"

DEFAULT_PREREQUISITES = [
    "reflector",
    "pacman-contrib",
    "smartmontools",
    "lm_sensors",
    "btrfs-progs",
    "tlp",
    "nvme-cli",
    "ethtool",
]

DEFAULT_BACKUP_PATHS = [
    "/etc/pacman.conf",
    "/etc/pacman.d/mirrorlist",
    "/etc/fstab",
    "/etc/mkinitcpio.conf",
    "/etc/default/grub",
    "/etc/systemd/zram-generator.conf",
    "/etc/tlp.conf",
    "/etc/ssh/sshd_config",
    "/etc/sudoers",
]

DEFAULT_SERVICES = [
    "NetworkManager.service",
    "systemd-timesyncd.service",
    "systemd-resolved.service",
    "bluetooth.service",
    "cups.service",
]


@dataclass
class Settings:
    """Effective configuration for a session."""

    log_dir: Path = Path("/var/log/hostkeeper")
    retention_days: int = 30
    token_refresh_interval: float = 60.0
    disk_usage_threshold: int = 80
    aur_helper: str = "yay"
    btrfs_mount: str = "/"
    prerequisites: list[str] = field(default_factory=lambda: list(DEFAULT_PREREQUISITES))
    backup_paths: list[str] = field(default_factory=lambda: list(DEFAULT_BACKUP_PATHS))
    services: list[str] = field(default_factory=lambda: list(DEFAULT_SERVICES))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Settings":
        """Build settings from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        if "log_dir" in values:
            values["log_dir"] = Path(values["log_dir"])
        return cls(**values)


def load_config_file(path: Path) -> dict[str, Any]:
    """Load a YAML config file if it exists."""
    if not path.exists():
        return {}
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError):
        return {}
    return data if isinstance(data, dict) else {}


def load_settings(
    path: Path | None = None,
    search_paths: list[Path] | None = None,
) -> Settings:
    """
    Load settings with explicit -> system -> user -> defaults precedence.

    Args:
        path: Explicit config file (highest precedence)
        search_paths: Lower-precedence files, highest first

    Returns:
        Merged Settings
    """
    if search_paths is None:
        search_paths = [SYSTEM_CONFIG, USER_CONFIG]

    layers = list(search_paths)
    if path is not None:
        layers.insert(0, path)

    merged: dict[str, Any] = {}
    # Lowest precedence first so higher layers overwrite
    for layer in reversed(layers):
        merged.update(load_config_file(layer))

    return Settings.from_dict(merged)
