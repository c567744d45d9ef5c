"""Core hostkeeper functionality."""

from hostkeeper.core.config import Settings, load_settings
from hostkeeper.core.context import Context
from hostkeeper.core.logging import LogSink, LogSinkError
from hostkeeper.core.output import Console
from hostkeeper.core.privilege import PrivilegeError, TokenKeeper, ensure_elevated
from hostkeeper.core.probe import ProbeDescriptor, ProbeResult, run_probe
from hostkeeper.core.report import AuditReport, finalize
from hostkeeper.core.runner import FailurePolicy, PipelineResult, SessionAbort, Step, run_pipeline
from hostkeeper.core.session import Session

__all__ = [
    "AuditReport",
    "Console",
    "Context",
    "FailurePolicy",
    "LogSink",
    "LogSinkError",
    "PipelineResult",
    "PrivilegeError",
    "ProbeDescriptor",
    "ProbeResult",
    "Session",
    "SessionAbort",
    "Settings",
    "Step",
    "TokenKeeper",
    "ensure_elevated",
    "finalize",
    "load_settings",
    "run_pipeline",
    "run_probe",
]
