"""
Probe registry.

Order within each tuple is the order sections appear in the audit report.

Only the presence-style probes (grep/find pipelines whose non-zero exit
means "nothing matched") carry a fallback line. Everything else records
the command output as produced, including empty output and error text.
"""

from hostkeeper.core.probe import ProbeDescriptor

HARDWARE_PROBES = (
    ProbeDescriptor("cpu", "CPU Information", command=("lscpu",)),
    ProbeDescriptor("memory", "Memory Usage", command=("free", "-h")),
    ProbeDescriptor("block-devices", "Block Devices", command=("lsblk", "-f")),
    ProbeDescriptor(
        "disk-health",
        "Disk SMART Health",
        command="for d in $(lsblk -dno NAME -e 7,11); do echo \"/dev/$d:\"; smartctl -H /dev/$d; done",
        shell=True,
        requires="smartctl",
    ),
    ProbeDescriptor("nvme", "NVMe Devices", command=("nvme", "list"), requires="nvme"),
    ProbeDescriptor("sensors", "Temperature Sensors", command=("sensors",), requires="sensors"),
    ProbeDescriptor("pci", "PCI Devices", command=("lspci",), requires="lspci"),
    ProbeDescriptor("usb", "USB Devices", command=("lsusb",), requires="lsusb"),
    ProbeDescriptor(
        "gpu",
        "Graphics Adapters",
        command="lspci | grep -Ei 'vga|3d|display'",
        shell=True,
        requires="lspci",
        fallback="No graphics adapter found",
    ),
    ProbeDescriptor(
        "battery",
        "Battery Status",
        command="upower -e | grep -i bat | xargs -r -n1 upower -i",
        shell=True,
        requires="upower",
    ),
    ProbeDescriptor("network-interfaces", "Network Interfaces", command=("ip", "-brief", "address")),
    ProbeDescriptor("kernel", "Kernel", command=("uname", "-a")),
    ProbeDescriptor("uptime", "Uptime and Load", command=("uptime",)),
)

SECURITY_PROBES = (
    ProbeDescriptor("listening-ports", "Listening Ports", command=("ss", "-tulpn")),
    ProbeDescriptor("firewall", "Firewall Rules", command=("nft", "list", "ruleset"), requires="nft"),
    ProbeDescriptor(
        "failed-logins",
        "Failed SSH Logins",
        command="journalctl -u sshd --no-pager -q | grep -i 'failed password' | tail -n 20 | grep .",
        shell=True,
        fallback="No failed SSH logins found",
    ),
    ProbeDescriptor(
        "sshd-config",
        "SSH Daemon Hardening",
        command="grep -E '^(PermitRootLogin|PasswordAuthentication|PubkeyAuthentication)' /etc/ssh/sshd_config",
        shell=True,
        fallback="No explicit SSH hardening directives found",
    ),
    ProbeDescriptor(
        "uid-zero",
        "Accounts With UID 0",
        command=("awk", "-F:", "$3 == 0 {print $1}", "/etc/passwd"),
    ),
    ProbeDescriptor(
        "suid-files",
        "SUID Binaries",
        command="find / -xdev -perm -4000 -type f 2>/dev/null | grep .",
        shell=True,
        fallback="No SUID files found",
    ),
    ProbeDescriptor(
        "world-writable",
        "World-Writable Files in /etc",
        command="find /etc -xdev -type f -perm -0002 2>/dev/null | grep .",
        shell=True,
        fallback="No world-writable files found",
    ),
    ProbeDescriptor("failed-units", "Failed systemd Units", command=("systemctl", "--failed", "--no-pager")),
    ProbeDescriptor(
        "sysctl-hardening",
        "Kernel Hardening sysctls",
        command=(
            "sysctl",
            "kernel.kptr_restrict",
            "kernel.dmesg_restrict",
            "kernel.unprivileged_bpf_disabled",
            "net.ipv4.conf.all.rp_filter",
            "net.ipv4.tcp_syncookies",
        ),
    ),
    ProbeDescriptor(
        "pending-updates",
        "Pending Updates",
        command=("checkupdates",),
        requires="checkupdates",
        fallback="No pending updates",
    ),
)

EXTENDED_PROBES = (
    ProbeDescriptor("selinux", "SELinux Status", command=("sestatus",), requires="sestatus"),
    ProbeDescriptor("apparmor", "AppArmor Status", command=("aa-status",), requires="aa-status"),
    ProbeDescriptor(
        "pam",
        "PAM system-auth",
        command="grep -Ev '^(#|$)' /etc/pam.d/system-auth",
        shell=True,
        fallback="No active PAM directives found",
    ),
    ProbeDescriptor("auditd", "Audit Daemon", command=("auditctl", "-s"), requires="auditctl"),
    ProbeDescriptor(
        "logrotate",
        "Log Rotation",
        command=("systemctl", "status", "logrotate.timer", "--no-pager"),
        requires="logrotate",
    ),
    ProbeDescriptor(
        "rootkits",
        "Rootkit Scan",
        command=("rkhunter", "--check", "--sk", "--rwo"),
        requires="rkhunter",
    ),
    ProbeDescriptor(
        "journal-errors",
        "Journal Errors (this boot)",
        command="journalctl -p 3 -b --no-pager -q | tail -n 50",
        shell=True,
    ),
    ProbeDescriptor(
        "kernel-messages",
        "Kernel Errors and Warnings",
        command="dmesg --level=err,warn | tail -n 50 | grep .",
        shell=True,
        fallback="No kernel errors or warnings found",
    ),
    ProbeDescriptor(
        "coredumps",
        "Core Dumps",
        command=("coredumpctl", "list", "--no-pager"),
        requires="coredumpctl",
        fallback="No core dumps found",
    ),
    ProbeDescriptor("timers", "systemd Timers", command=("systemctl", "list-timers", "--no-pager")),
    ProbeDescriptor(
        "boot-time",
        "Boot Time",
        command="systemd-analyze && systemd-analyze blame --no-pager | head -n 15",
        shell=True,
    ),
    ProbeDescriptor("zram", "zram Devices", command=("zramctl",), requires="zramctl"),
    ProbeDescriptor(
        "btrfs-usage",
        "Btrfs Usage",
        command=("btrfs", "filesystem", "usage", "/"),
        requires="btrfs",
    ),
    ProbeDescriptor(
        "orphans",
        "Orphaned Packages",
        command=("pacman", "-Qtdq"),
        fallback="No orphaned packages",
    ),
    ProbeDescriptor("package-db", "Package Database Check", command=("pacman", "-Dk")),
)

# Sections for optional container tooling vanish when docker is absent
DOCKER_PROBES = (
    ProbeDescriptor(
        "docker-containers",
        "Docker Containers",
        command=("docker", "ps", "-a"),
        requires="docker",
        omit_if_missing=True,
    ),
    ProbeDescriptor(
        "docker-images",
        "Docker Images",
        command=("docker", "images"),
        requires="docker",
        omit_if_missing=True,
    ),
    ProbeDescriptor(
        "docker-disk",
        "Docker Disk Usage",
        command=("docker", "system", "df"),
        requires="docker",
        omit_if_missing=True,
    ),
)

ALL_PROBES = HARDWARE_PROBES + SECURITY_PROBES + EXTENDED_PROBES + DOCKER_PROBES
