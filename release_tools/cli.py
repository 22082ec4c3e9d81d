from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Mapping, Sequence

from release_tools.common import ReleaseToolError


Command = Callable[[list[str]], None]


def command_map() -> dict[str, Command]:
    """
    Map CLI command names to Python entry functions.

    Each value is a `main(argv)` function from one command module.
    """
    from release_tools.sync_main import main as sync_upstream_main
    from release_tools.sync_release import main as sync_upstream_release
    from release_tools.verify_release import main as verify_release

    return {
        "sync-upstream-release": sync_upstream_release,
        "sync-upstream-main": sync_upstream_main,
        "verify-release": verify_release,
    }


def build_parser(commands: Mapping[str, Command]) -> argparse.ArgumentParser:
    """Build argument parser with one positional command choice."""
    parser = argparse.ArgumentParser(
        prog="python3 -m release_tools.cli",
        description="Run one fork sync or release command.",
    )
    parser.add_argument("command", choices=sorted(commands.keys()))
    parser.add_argument("args", nargs=argparse.REMAINDER, help="options for the command")
    return parser


def run_command(command: str, args: Sequence[str], commands: Mapping[str, Command]) -> None:
    """
    Run one registered command.

    `commands` is passed in to keep this function easy to test.
    """
    commands[command](list(args))


def main(argv: list[str] | None = None) -> None:
    # Build command registry once so parser and dispatcher use the same keys.
    commands = command_map()
    parser = build_parser(commands)
    args = parser.parse_args(argv)

    try:
        run_command(args.command, args.args, commands)
    except ReleaseToolError as exc:
        # Merge conflicts exit with git's own status.
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(exc.exit_code) from exc


if __name__ == "__main__":
    main()
