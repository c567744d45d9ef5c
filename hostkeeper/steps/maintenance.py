"""
Mutating maintenance actions.

Each action raises CommandError when it fails. Whether that failure ends
the session is decided by the Step wrapping it, not here.
"""

from pathlib import Path
from typing import TYPE_CHECKING

from hostkeeper.core.runner import SessionAbort
from hostkeeper.lib.filesystem import backup_files, read_file
from hostkeeper.lib.process import CommandError, check_tool, run_command, stream_command

if TYPE_CHECKING:
    from hostkeeper.core.config import Settings
    from hostkeeper.core.context import Context
    from hostkeeper.core.output import Console
    from hostkeeper.core.session import Session

PACMAN_INSTALL = ["pacman", "-S", "--needed", "--noconfirm"]

REFLECTOR_COMMAND = [
    "reflector",
    "--latest", "20",
    "--protocol", "https",
    "--sort", "rate",
    "--save", "/etc/pacman.d/mirrorlist",
]

FIRMWARE_PACKAGES = ["linux-firmware", "sof-firmware"]

MICROCODE = {
    "GenuineIntel": "intel-ucode",
    "AuthenticAMD": "amd-ucode",
}

ZRAM_CONFIG = "/etc/systemd/zram-generator.conf"
ZSWAP_ENABLED = "/sys/module/zswap/parameters/enabled"


def install_prerequisites(context: "Context", console: "Console", settings: "Settings") -> None:
    """Install the tools later steps and probes rely on."""
    if not settings.prerequisites:
        console.info("No prerequisite packages configured")
        return
    stream_command(PACMAN_INSTALL + list(settings.prerequisites), context)
    console.ok(f"Prerequisites installed: {', '.join(settings.prerequisites)}")


def backup_configs(console: "Console", settings: "Settings", session: "Session") -> Path:
    """Copy critical configuration files into the session backup directory."""
    copied, missing = backup_files(settings.backup_paths, session.backup_dir)
    for path in missing:
        console.info(f"Not backed up (absent): {path}")
    console.ok(f"Backed up {len(copied)} file(s) to {session.backup_dir}")
    return session.backup_dir


def refresh_mirrors(context: "Context", console: "Console") -> None:
    if not check_tool("reflector", context):
        console.info("reflector not installed, keeping current mirror list")
        return
    stream_command(REFLECTOR_COMMAND, context)
    console.ok("Mirror list refreshed")


def upgrade_system(context: "Context", console: "Console") -> None:
    stream_command(["pacman", "-Syu", "--noconfirm"], context)
    console.ok("System packages upgraded")


def upgrade_aur(context: "Context", console: "Console", settings: "Settings") -> None:
    """
    Upgrade AUR packages as the invoking user.

    AUR helpers refuse to run as root, so the command is wrapped in
    `sudo -u $SUDO_USER`.
    """
    helper = settings.aur_helper
    if not check_tool(helper, context):
        console.info(f"{helper} not installed, skipping AUR upgrade")
        return

    user = context.get_env("SUDO_USER")
    if not user or user == "root":
        console.warning("No invoking user found (SUDO_USER), skipping AUR upgrade")
        return

    stream_command(["sudo", "-u", user, helper, "-Sua", "--noconfirm"], context)
    console.ok("AUR packages upgraded")


def detect_microcode(context: "Context") -> str | None:
    """Return the microcode package matching the CPU vendor, if known."""
    cpuinfo = read_file("/proc/cpuinfo", context, default="")
    for line in cpuinfo.splitlines():
        if line.startswith("vendor_id"):
            vendor = line.split(":", 1)[1].strip()
            return MICROCODE.get(vendor)
    return None


def install_drivers(context: "Context", console: "Console") -> None:
    """Install firmware and CPU microcode."""
    packages = list(FIRMWARE_PACKAGES)
    microcode = detect_microcode(context)
    if microcode:
        packages.append(microcode)
    stream_command(PACMAN_INSTALL + packages, context)
    console.ok(f"Firmware and microcode present: {', '.join(packages)}")


def configure_power(context: "Context", console: "Console") -> None:
    """Enable TLP and mask the rfkill units it replaces."""
    if not check_tool("tlp", context):
        console.info("tlp not installed, skipping power management")
        return
    stream_command(["systemctl", "enable", "--now", "tlp.service"], context)
    stream_command(
        ["systemctl", "mask", "systemd-rfkill.service", "systemd-rfkill.socket"],
        context,
    )
    console.ok("TLP enabled")


def fix_swap_compression(context: "Context", console: "Console") -> None:
    """
    Disable zswap when zram swap is configured.

    Running both compresses pages twice.
    """
    if not context.file_exists(ZRAM_CONFIG):
        console.info("zram not configured, leaving zswap alone")
        return

    if context.file_exists(ZSWAP_ENABLED):
        try:
            state = context.read_file(ZSWAP_ENABLED).strip()
        except OSError as e:
            raise CommandError(f"Cannot read {ZSWAP_ENABLED}: {e}") from e
        if state in ("Y", "1"):
            try:
                context.write_file(ZSWAP_ENABLED, "N")
            except OSError as e:
                raise CommandError(f"Cannot disable zswap: {e}") from e
            console.ok("zswap disabled at runtime")

    stream_command(["systemctl", "restart", "systemd-zram-setup@zram0.service"], context)
    console.ok("zram swap restarted")


def restart_services(context: "Context", console: "Console", settings: "Settings") -> None:
    """Restart configured services that are currently running."""
    failed = []
    for service in settings.services:
        result = context.run(["systemctl", "try-restart", service])
        if result.returncode != 0:
            console.warning(f"Could not restart {service}: {(result.stderr or '').strip()}")
            failed.append(service)
        else:
            console.ok(f"Restarted {service} (if running)")
    if failed:
        raise CommandError(f"{len(failed)} service(s) failed to restart: {', '.join(failed)}")


def root_is_btrfs(context: "Context", mount: str = "/") -> bool:
    fstype = run_command(["findmnt", "-n", "-o", "FSTYPE", mount], context)
    return fstype.strip() == "btrfs"


def balance_btrfs(context: "Context", console: "Console", settings: "Settings") -> None:
    mount = settings.btrfs_mount
    if not check_tool("btrfs", context) or not root_is_btrfs(context, mount):
        console.info(f"{mount} is not btrfs, skipping balance")
        return
    stream_command(
        ["btrfs", "balance", "start", "-dusage=50", "-musage=50", mount],
        context,
    )
    console.ok(f"Balanced {mount}")


def defragment_btrfs(context: "Context", console: "Console", settings: "Settings") -> None:
    mount = settings.btrfs_mount
    if not check_tool("btrfs", context) or not root_is_btrfs(context, mount):
        console.info(f"{mount} is not btrfs, skipping defragmentation")
        return
    stream_command(["btrfs", "filesystem", "defragment", "-r", mount], context)
    console.ok(f"Defragmented {mount}")


def trim_filesystems(context: "Context", console: "Console") -> None:
    stream_command(["fstrim", "-av"], context)
    console.ok("Filesystems trimmed")


def refresh_keys(context: "Context", console: "Console") -> None:
    stream_command(["pacman-key", "--refresh-keys"], context)
    console.ok("Package signing keys refreshed")


def clean_caches(context: "Context", console: "Console") -> None:
    """Trim the package cache, remove orphans and vacuum the journal."""
    if check_tool("paccache", context):
        stream_command(["paccache", "-rk2"], context)
    else:
        console.info("paccache not installed, package cache left as-is")

    orphans = run_command(["pacman", "-Qtdq"], context).split()
    if orphans:
        stream_command(["pacman", "-Rns", "--noconfirm", *orphans], context)
        console.ok(f"Removed {len(orphans)} orphaned package(s)")
    else:
        console.info("No orphaned packages")

    stream_command(["journalctl", "--vacuum-time=2weeks"], context)
    console.ok("Caches cleaned")


def reboot_reminder(context: "Context", console: "Console") -> bool:
    """
    Warn when the running kernel has been replaced on disk.

    Returns:
        True if a reboot is recommended
    """
    release = run_command(["uname", "-r"], context, check=True).strip()
    if context.file_exists(f"/usr/lib/modules/{release}"):
        console.ok("Running kernel matches installed kernel")
        return False
    console.warning(f"Kernel {release} is no longer installed: reboot recommended")
    return True


def clean_docker(context: "Context", console: "Console") -> None:
    """
    Prune unused container data.

    When containers are running the operator is asked whether to abort
    the session before anything is pruned.

    Raises:
        SessionAbort: Operator chose to abort
        CommandError: Docker commands failed
    """
    if not check_tool("docker", context):
        console.info("docker not installed, skipping container cleanup")
        return

    running = run_command(["docker", "ps", "-q"], context, check=True).split()
    if running:
        console.warning(f"{len(running)} container(s) running: {' '.join(running)}")
        answer = context.prompt("Abort before container cleanup? [y/N] ")
        if answer.strip().lower() in ("y", "yes"):
            raise SessionAbort("operator aborted before container cleanup")
        console.info("Operator chose to continue with container cleanup")

    stream_command(["docker", "system", "prune", "-af"], context)
    console.ok("Docker data pruned")
