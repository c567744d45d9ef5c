"""Command-line interface for hostkeeper."""

import argparse
import sys
from pathlib import Path
from typing import Callable

from hostkeeper import __version__
from hostkeeper.core import (
    Console,
    Context,
    LogSink,
    LogSinkError,
    PrivilegeError,
    Session,
    TokenKeeper,
    ensure_elevated,
    load_settings,
    run_pipeline,
)
from hostkeeper.core.recommendations import scan_log
from hostkeeper.steps.bundles import MENU, Toolkit, unattended_steps

# Digest lines shown at the end of a run
DIGEST_LIMIT = 20


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="hostkeeper",
        description="Sequential host maintenance and audit for Arch-based systems",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"hostkeeper {__version__}",
    )
    parser.add_argument(
        "-i",
        "--interactive",
        action="store_true",
        help="Show a menu instead of running the full unattended pipeline",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML config file (overrides /etc and user config)",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        help="Directory for logs, reports and backups",
    )
    return parser


def render_menu() -> str:
    lines = ["", "=== hostkeeper ==="]
    for number, (key, label, _) in enumerate(MENU, start=1):
        lines.append(f"  {number}) {label} [{key}]")
    return "\n".join(lines)


def resolve_choice(choice: str) -> tuple[str, Callable | None] | None:
    """Map a menu answer (number or name) to its (key, builder) entry."""
    choice = choice.strip().lower()
    for number, (key, _, builder) in enumerate(MENU, start=1):
        if choice in (str(number), key):
            return key, builder
    return None


def interactive_menu(kit: Toolkit) -> int:
    """
    Run bundles chosen by the operator until they pick exit.

    Returns:
        0 on exit, 1 if a bundle halted the session
    """
    while True:
        print(render_menu())
        try:
            answer = kit.context.prompt(f"Select an option [1-{len(MENU)}]: ")
        except EOFError:
            return 0

        entry = resolve_choice(answer)
        if entry is None:
            kit.console.warning(f"Unknown option: {answer.strip()!r}")
            continue

        key, builder = entry
        if builder is None:
            kit.console.info("Exiting")
            return 0

        result = run_pipeline(builder(kit), kit.console)
        if result.exit_code != 0:
            return result.exit_code


def print_summary(kit: Toolkit, exit_code: int) -> None:
    """Print file locations and a digest of severity lines."""
    session = kit.session
    print()
    print("=== Summary ===")
    print(f"Status:       {'completed' if exit_code == 0 else 'halted'} ({kit.console.summary})")
    print(f"Session log:  {session.log_path}")
    if session.audit_path.exists():
        print(f"Audit report: {session.audit_path}")
    if kit.final_report is not None:
        print(f"Final report: {kit.final_report}")

    findings = scan_log(session.log_path)
    if findings:
        print("Errors/warnings in transcript:")
        for count, line in findings[:DIGEST_LIMIT]:
            print(f"  {count}x {line}")
        if len(findings) > DIGEST_LIMIT:
            print(f"  ... and {len(findings) - DIGEST_LIMIT} more")


def main(argv: list[str] | None = None, context: Context | None = None) -> int:
    """Main entry point."""
    if argv is None:
        argv = sys.argv[1:]
    parser = create_parser()
    args = parser.parse_args(argv)

    context = context or Context()
    try:
        ensure_elevated(argv, context)
    except PrivilegeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    settings = load_settings(args.config)
    if args.log_dir is not None:
        settings.log_dir = args.log_dir

    session = Session.create(settings.log_dir)
    console = Console()

    with TokenKeeper(context, settings.token_refresh_interval):
        sink = LogSink(session, settings.retention_days)
        try:
            sink.open()
        except LogSinkError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        try:
            kit = Toolkit.create(session, settings, context, console)
            if args.interactive:
                exit_code = interactive_menu(kit)
            else:
                exit_code = run_pipeline(unattended_steps(kit), console).exit_code
            print_summary(kit, exit_code)
            return exit_code
        finally:
            sink.close()


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
