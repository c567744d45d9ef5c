"""Probe descriptors and execution."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from hostkeeper.core.context import Context
    from hostkeeper.core.output import Console
    from hostkeeper.core.report import AuditReport


@dataclass(frozen=True)
class ProbeDescriptor:
    """
    A named diagnostic command whose output goes into the audit report.

    Exactly one of command or action is set. A command is an argument list,
    or a shell string when shell is True. An action receives the Context and
    returns the section text.
    """

    name: str
    header: str
    command: tuple[str, ...] | str | None = None
    action: "Callable[[Context], str] | None" = None
    shell: bool = False
    requires: str | None = None
    fallback: str | None = None
    omit_if_missing: bool = False

    def __post_init__(self):
        if (self.command is None) == (self.action is None):
            raise ValueError(f"Probe {self.name!r} needs exactly one of command or action")


@dataclass
class ProbeResult:
    """Outcome of running one probe."""

    name: str
    skipped: bool
    returncode: int | None = None
    output: str = ""


def skip_line(descriptor: ProbeDescriptor) -> str:
    """Placeholder recorded when a probe's tool is absent."""
    return f"{descriptor.name}: {descriptor.requires} not installed, skipping"


def _execute(descriptor: ProbeDescriptor, context: "Context") -> tuple[int | None, str]:
    if descriptor.action is not None:
        return None, descriptor.action(context)

    cmd = descriptor.command if descriptor.shell else list(descriptor.command)
    try:
        result = context.run_combined(cmd, shell=descriptor.shell)
    except OSError as e:
        return None, f"{e}\n"
    return result.returncode, result.stdout or ""


def run_probe(
    descriptor: ProbeDescriptor,
    report: "AuditReport",
    context: "Context",
    console: "Console",
) -> ProbeResult:
    """
    Run a probe and append its output to the audit report.

    A probe never raises for a failing command. When the command exits
    non-zero and the descriptor defines a fallback, the fallback line is
    appended after whatever output was produced.

    Args:
        descriptor: Probe to run
        report: Audit report receiving the section
        context: Execution context
        console: Status output

    Returns:
        ProbeResult describing what happened
    """
    if descriptor.requires and not context.check_tool(descriptor.requires):
        if not descriptor.omit_if_missing:
            report.append_line(skip_line(descriptor))
        return ProbeResult(name=descriptor.name, skipped=True)

    console.info(f"Running probe: {descriptor.name}")
    returncode, output = _execute(descriptor, context)

    if returncode not in (0, None) and descriptor.fallback:
        if output and not output.endswith("\n"):
            output += "\n"
        output += descriptor.fallback + "\n"

    report.append_section(descriptor.header, output)
    return ProbeResult(
        name=descriptor.name,
        skipped=False,
        returncode=returncode,
        output=output,
    )
