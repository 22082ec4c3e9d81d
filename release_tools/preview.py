"""
Script: release_tools/preview.py
What: Runs `make -n` against the openclaw-docker repo to see the planned docker commands.
Doing: Calls `make -C <dir> -n <target> OPENCLAW_REF=<ref>` and keeps the combined output.
Why: A dry run shows which build args and tags the real build would use, without building.
Goal: Feed the compatibility checks with preview text for the `build` and `push` targets.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from release_tools.common import PreconditionError, try_cmd


PREVIEW_TARGETS = ("build", "push")


@dataclass(frozen=True)
class PreviewOutput:
    target: str
    text: str
    exit_status: int = 0


PreviewRunner = Callable[[str, str], PreviewOutput]


def require_docker_dir(docker_dir: Path) -> None:
    """Fail early when the docker packaging checkout is not usable."""
    if not docker_dir.is_dir():
        raise PreconditionError(f"docker dir not found: {docker_dir}")
    makefile = docker_dir / "Makefile"
    if not makefile.is_file():
        raise PreconditionError(f"docker Makefile not found: {makefile}")


def make_preview(docker_dir: Path, target: str, ref: str) -> PreviewOutput:
    """
    Return the dry-run plan of one make target.

    The Makefile refuses to run without a GitHub token, so a placeholder is
    passed in. A non-zero exit is not an error here; the caller checks the text.
    """
    if target not in PREVIEW_TARGETS:
        raise ValueError(f"Unsupported preview target: {target}")
    env = dict(os.environ)
    env["GH_TOKEN"] = "dummy"
    result = try_cmd(
        ["make", "-C", str(docker_dir), "-n", target, f"OPENCLAW_REF={ref}"],
        env=env,
    )
    return PreviewOutput(target=target, text=result.stdout + result.stderr, exit_status=result.returncode)


def make_preview_runner(docker_dir: Path) -> PreviewRunner:
    """
    Bind `make_preview` to one docker checkout.

    The checkout is validated on each call, not here, so a missing origin tag
    is still reported before a missing docker dir.
    """

    def run_preview(target: str, ref: str) -> PreviewOutput:
        require_docker_dir(docker_dir)
        return make_preview(docker_dir, target, ref)

    return run_preview
