"""
Script: release_tools/common.py
What: Shared helpers and error types used by all `release_tools` modules.
Doing: Wraps env reads and command execution, and defines the error kinds the CLI reports.
Why: Avoids duplicated helper code.
Goal: Keep failure reporting consistent across all commands.
"""

from __future__ import annotations

import os
import subprocess
from typing import Mapping, Sequence


class ReleaseToolError(RuntimeError):
    """Raised when a release helper hits a known error condition."""

    exit_code = 1


class ResolutionError(ReleaseToolError):
    """No release tag could be determined."""


class PreconditionError(ReleaseToolError):
    """Repository state does not allow the requested operation."""


class MissingTagError(ReleaseToolError):
    """The fork tag is not resolvable on the remote."""


class CommandError(ReleaseToolError):
    """An external command exited with a non-zero status."""

    def __init__(self, message: str, returncode: int = 1) -> None:
        super().__init__(message)
        self.exit_code = returncode or 1


class MergeConflictError(ReleaseToolError):
    """`git merge` failed; the exit code is the merge's own status."""

    def __init__(self, message: str, returncode: int) -> None:
        super().__init__(message)
        self.exit_code = returncode or 1


class AssertionMismatchError(ReleaseToolError):
    """One or more expected substrings were missing from a build preview."""

    def __init__(self, failures: Sequence[str]) -> None:
        self.failures = list(failures)
        lines = [f"- {failure}" for failure in self.failures]
        super().__init__("release verification failed:\n" + "\n".join(lines))


class CommandResult:
    """Outcome of one external command that is allowed to fail."""

    def __init__(self, args: Sequence[str], returncode: int, stdout: str, stderr: str) -> None:
        self.args = list(args)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def __repr__(self) -> str:
        return f"CommandResult(args={self.args!r}, returncode={self.returncode})"


def optional_env(name: str, default: str = "") -> str:
    """Return an environment variable with a fallback default."""
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return value


def run_cmd(
    args: Sequence[str],
    *,
    capture_output: bool = True,
    cwd: str | None = None,
) -> str:
    """Run a command and return stdout, raising a readable error on failure."""
    try:
        result = subprocess.run(
            list(args),
            check=True,
            text=True,
            capture_output=capture_output,
            cwd=cwd,
        )
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or "").strip()
        stdout = (exc.stdout or "").strip()
        details = stderr or stdout or str(exc)
        raise CommandError(f"Command failed: {' '.join(args)}\n{details}", exc.returncode) from exc

    if not capture_output:
        return ""
    return result.stdout


def try_cmd(
    args: Sequence[str],
    *,
    capture_output: bool = True,
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
) -> CommandResult:
    """
    Run a command whose failure the caller wants to inspect.

    Unlike `run_cmd`, a non-zero exit is returned as a `CommandResult` instead
    of raised, so callers branch on `result.ok`.
    """
    result = subprocess.run(
        list(args),
        check=False,
        text=True,
        capture_output=capture_output,
        cwd=cwd,
        env=dict(env) if env is not None else None,
    )
    return CommandResult(args, result.returncode, result.stdout or "", result.stderr or "")
