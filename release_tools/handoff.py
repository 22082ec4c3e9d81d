"""
Script: release_tools/handoff.py
What: Writes a markdown handoff note when an upstream merge stops on conflicts.
Doing: Lists the target branch, source ref, unresolved files, and the commands to finish the sync.
Why: Conflicts are never auto-resolved; whoever picks them up needs the context in one file.
Goal: Make a failed sync easy to finish by hand or by a coding agent.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


NO_UNRESOLVED_FILES = "(none detected by git diff --diff-filter=U)"
TOOLING_COMMANDS = (
    "sync-upstream-release",
    "sync-upstream-main",
    "verify-release",
)


def default_handoff_path(repo_root: Path, sync_name: str, target_branch: str) -> Path:
    """
    Return `tmp/codex-handoff-<sync>-<branch>.md` under the repo root.

    `/` in the branch name becomes `-` so the note stays one file in `tmp/`.
    """
    safe_branch = target_branch.replace("/", "-")
    return repo_root / "tmp" / f"codex-handoff-{sync_name}-{safe_branch}.md"


def render_handoff(
    *,
    repo_root: Path,
    target_branch: str,
    source_ref: str,
    unresolved_files: Sequence[str],
) -> str:
    lines = [
        "# Codex Handoff: Resolve upstream sync conflicts",
        "",
        "Context",
        f"- Repo: {repo_root}",
        f"- Target branch: {target_branch}",
        f"- Source ref: {source_ref}",
        "",
        "Unresolved conflict files",
    ]
    if unresolved_files:
        lines.extend(f"- {path}" for path in unresolved_files)
    else:
        lines.append(f"- {NO_UNRESOLVED_FILES}")

    lines.extend(
        [
            "",
            "Required outcomes",
            f"- Merge {source_ref} into {target_branch} while preserving fork-specific behavior.",
            "- Keep release tooling commands functional:",
        ]
    )
    lines.extend(f"  - python3 -m release_tools.cli {command}" for command in TOOLING_COMMANDS)
    lines.extend(
        [
            "",
            "Suggested workflow",
            "1. Resolve conflict markers.",
            "2. Run the release tooling tests:",
            "   python3 -m unittest discover tests",
            "3. Commit and push:",
            "   git add <resolved files>",
            "   git commit",
            f"   git push origin {target_branch}",
        ]
    )
    return "\n".join(lines) + "\n"


def write_handoff(
    path: Path,
    *,
    repo_root: Path,
    target_branch: str,
    source_ref: str,
    unresolved_files: Sequence[str],
) -> Path:
    """Render the handoff note to `path`, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        render_handoff(
            repo_root=repo_root,
            target_branch=target_branch,
            source_ref=source_ref,
            unresolved_files=unresolved_files,
        ),
        encoding="utf-8",
    )
    return path
