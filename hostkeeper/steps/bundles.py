"""Ordered step lists for unattended mode and the interactive menu."""

from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Callable

from hostkeeper.core import recommendations
from hostkeeper.core.config import Settings
from hostkeeper.core.context import Context
from hostkeeper.core.output import Console
from hostkeeper.core.probe import ProbeDescriptor, run_probe
from hostkeeper.core.report import AuditReport, finalize
from hostkeeper.core.runner import FailurePolicy, Step
from hostkeeper.core.session import Session
from hostkeeper.steps import maintenance
from hostkeeper.steps.probes import (
    DOCKER_PROBES,
    EXTENDED_PROBES,
    HARDWARE_PROBES,
    SECURITY_PROBES,
)

FATAL = FailurePolicy.FATAL
WARN = FailurePolicy.WARN


@dataclass
class Toolkit:
    """Everything a step needs, built once per session."""

    session: Session
    settings: Settings
    context: Context
    console: Console
    report: AuditReport
    final_report: Path | None = None

    @classmethod
    def create(
        cls,
        session: Session,
        settings: Settings,
        context: Context,
        console: Console,
    ) -> "Toolkit":
        return cls(
            session=session,
            settings=settings,
            context=context,
            console=console,
            report=AuditReport(session.audit_path),
        )


def _probe(kit: Toolkit, probe: ProbeDescriptor, group: str | None = None) -> None:
    if group:
        kit.console.step(group)
    run_probe(probe, kit.report, kit.context, kit.console)


def probe_steps(kit: Toolkit, probes: tuple[ProbeDescriptor, ...], title: str) -> list[Step]:
    """Wrap probes as non-fatal pipeline steps; the first one announces the group title."""
    return [
        Step(
            probe.name,
            partial(_probe, kit, probe, title if index == 0 else None),
            WARN,
            kind="probe",
        )
        for index, probe in enumerate(probes)
    ]


def _recommend(kit: Toolkit) -> None:
    recommendations.generate(
        kit.session.log_path,
        kit.report,
        kit.context,
        kit.settings.disk_usage_threshold,
    )


def _finalize(kit: Toolkit) -> None:
    kit.final_report = finalize(kit.session)
    kit.console.ok(f"Final report written to {kit.final_report}")


def update_steps(kit: Toolkit) -> list[Step]:
    """Package prerequisites, backup and upgrades."""
    ctx, con, cfg = kit.context, kit.console, kit.settings
    return [
        Step("Install prerequisite packages", partial(maintenance.install_prerequisites, ctx, con, cfg), FATAL),
        Step("Back up configuration files", partial(maintenance.backup_configs, con, cfg, kit.session), WARN),
        Step("Refresh mirror list", partial(maintenance.refresh_mirrors, ctx, con), WARN),
        Step("Upgrade system packages", partial(maintenance.upgrade_system, ctx, con), FATAL),
        Step("Upgrade AUR packages", partial(maintenance.upgrade_aur, ctx, con, cfg), WARN),
    ]


def tuning_steps(kit: Toolkit) -> list[Step]:
    """Drivers, power, swap, services, filesystems and keys."""
    ctx, con, cfg = kit.context, kit.console, kit.settings
    return [
        Step("Install firmware and microcode", partial(maintenance.install_drivers, ctx, con), WARN),
        Step("Configure power management", partial(maintenance.configure_power, ctx, con), WARN),
        Step("Fix swap compression", partial(maintenance.fix_swap_compression, ctx, con), WARN),
        Step("Restart services", partial(maintenance.restart_services, ctx, con, cfg), WARN),
        Step("Balance Btrfs", partial(maintenance.balance_btrfs, ctx, con, cfg), WARN),
        Step("Defragment Btrfs", partial(maintenance.defragment_btrfs, ctx, con, cfg), WARN),
        Step("Trim filesystems", partial(maintenance.trim_filesystems, ctx, con), WARN),
        Step("Refresh package keys", partial(maintenance.refresh_keys, ctx, con), WARN),
    ]


def cleanup_steps(kit: Toolkit) -> list[Step]:
    ctx, con = kit.context, kit.console
    return [
        Step("Clean package and journal caches", partial(maintenance.clean_caches, ctx, con), WARN),
        Step("Check for pending reboot", partial(maintenance.reboot_reminder, ctx, con), WARN),
        Step("Clean Docker data", partial(maintenance.clean_docker, ctx, con), WARN),
    ]


def audit_steps(kit: Toolkit) -> list[Step]:
    """Full probe battery, recommendations and the final report."""
    return (
        probe_steps(kit, HARDWARE_PROBES, "Hardware audit")
        + probe_steps(kit, SECURITY_PROBES, "Security audit")
        + probe_steps(kit, EXTENDED_PROBES, "Extended audit")
        + probe_steps(kit, DOCKER_PROBES, "Container audit")
        + [
            Step("Generate recommendations", partial(_recommend, kit), WARN),
            Step("Write final report", partial(_finalize, kit), WARN),
        ]
    )


def security_steps(kit: Toolkit) -> list[Step]:
    return probe_steps(kit, SECURITY_PROBES, "Security audit")


def unattended_steps(kit: Toolkit) -> list[Step]:
    """The complete pipeline, in execution order."""
    return update_steps(kit) + tuning_steps(kit) + cleanup_steps(kit) + audit_steps(kit)


def system_update_bundle(kit: Toolkit) -> list[Step]:
    ctx, con = kit.context, kit.console
    return update_steps(kit) + [
        Step("Refresh package keys", partial(maintenance.refresh_keys, ctx, con), WARN),
        Step("Check for pending reboot", partial(maintenance.reboot_reminder, ctx, con), WARN),
    ]


# Interactive menu: (key, label, builder); "exit" has no builder
MENU: list[tuple[str, str, Callable[[Toolkit], list[Step]] | None]] = [
    ("update", "System update", system_update_bundle),
    ("cleanup", "Cleanup", cleanup_steps),
    ("security", "Basic security check", security_steps),
    ("audit", "Full extended audit", audit_steps),
    ("exit", "Exit", None),
]
