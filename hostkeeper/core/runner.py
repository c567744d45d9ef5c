"""Pipeline step execution."""

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from hostkeeper.core.output import Console


class FailurePolicy(enum.Enum):
    """What a step failure does to the rest of the pipeline."""

    FATAL = "fatal"
    WARN = "warn"


class SessionAbort(Exception):
    """Operator asked to stop the session."""

    pass


@dataclass(frozen=True)
class Step:
    """One entry in the ordered pipeline."""

    name: str
    action: Callable[[], object]
    policy: FailurePolicy = FailurePolicy.WARN
    kind: str = "action"


@dataclass
class PipelineResult:
    """Result of running a list of steps."""

    completed: list[str]
    failed: list[str]
    halted_at: str | None = None

    @property
    def exit_code(self) -> int:
        """Process exit code for this result."""
        return 1 if self.halted_at is not None else 0


def run_pipeline(steps: list[Step], console: "Console") -> PipelineResult:
    """
    Run steps strictly in order.

    A SessionAbort or a failure in a FATAL step halts the pipeline; no
    later step runs. A failure in a WARN step is reported and skipped.

    Args:
        steps: Ordered steps
        console: Status output

    Returns:
        PipelineResult with completed/failed step names and halt point
    """
    result = PipelineResult(completed=[], failed=[])

    for step in steps:
        if step.kind == "action":
            console.step(step.name)
        try:
            step.action()
        except SessionAbort as e:
            console.error(f"Session aborted during {step.name}: {e}")
            result.failed.append(step.name)
            result.halted_at = step.name
            return result
        except Exception as e:
            result.failed.append(step.name)
            if step.policy is FailurePolicy.FATAL:
                console.error(f"{step.name} failed: {e}")
                result.halted_at = step.name
                return result
            console.warning(f"{step.name} failed: {e}")
            continue
        result.completed.append(step.name)

    return result
