"""Process utilities for maintenance steps."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hostkeeper.core.context import Context


class CommandError(Exception):
    """Error running a command."""

    pass


def run_command(
    cmd: list[str],
    context: "Context | None" = None,
    check: bool = False,
) -> str:
    """
    Run a command and return its output.

    Args:
        cmd: Command and arguments
        context: Execution context (for testing)
        check: Raise on non-zero exit

    Returns:
        Command stdout

    Raises:
        CommandError: If the command cannot be run, or check=True and it fails
    """
    if context is None:
        from hostkeeper.core.context import Context
        context = Context()

    try:
        result = context.run(cmd)
    except OSError as e:
        raise CommandError(f"Command failed: {' '.join(cmd)}: {e}") from e

    if check and result.returncode != 0:
        detail = (result.stderr or "").strip()
        message = f"Command failed with exit code {result.returncode}: {' '.join(cmd)}"
        if detail:
            message = f"{message}: {detail}"
        raise CommandError(message)

    return result.stdout


def stream_command(
    cmd: list[str],
    context: "Context | None" = None,
) -> None:
    """
    Run a command with its output echoed to the console and session log.

    Args:
        cmd: Command and arguments
        context: Execution context (for testing)

    Raises:
        CommandError: If the command cannot be run or exits non-zero
    """
    if context is None:
        from hostkeeper.core.context import Context
        context = Context()

    try:
        returncode = context.stream(cmd)
    except OSError as e:
        raise CommandError(f"Command failed: {' '.join(cmd)}: {e}") from e

    if returncode != 0:
        raise CommandError(f"Command failed with exit code {returncode}: {' '.join(cmd)}")


def check_tool(
    name: str,
    context: "Context | None" = None,
    required: bool = False,
) -> bool:
    """
    Check if a tool exists in PATH.

    Args:
        name: Tool name to check
        context: Execution context (for testing)
        required: Raise if tool is missing

    Returns:
        True if tool exists

    Raises:
        CommandError: If required=True and tool is missing
    """
    if context is None:
        from hostkeeper.core.context import Context
        context = Context()

    exists = context.check_tool(name)

    if required and not exists:
        raise CommandError(f"Required tool not found: {name}")

    return exists
