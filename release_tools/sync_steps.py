"""
Script: release_tools/sync_steps.py
What: Steps shared by the `sync-upstream-release` and `sync-upstream-main` commands.
Doing: Checks the working tree, fetches remotes, and runs the merge with conflict handoff.
Why: Both sync commands need the same preflight and the same "stop and hand off" merge policy.
Goal: Keep the two sync flows consistent.
"""

from __future__ import annotations

import sys
from pathlib import Path

from release_tools.common import MergeConflictError, PreconditionError
from release_tools.git import GitRepo
from release_tools.handoff import default_handoff_path, write_handoff


def check_repo_ready(git: GitRepo, *, allow_dirty: bool) -> None:
    if not git.is_inside_work_tree():
        raise PreconditionError("run this command inside a git repository.")
    if not allow_dirty and not git.is_clean():
        raise PreconditionError("working tree is not clean. Commit or stash changes first.")


def fetch_remotes(git: GitRepo, *, tags: bool) -> None:
    print("Fetching remotes...")
    git.fetch("upstream", tags=tags)
    git.fetch("origin", tags=tags)


def merge_or_handoff(
    git: GitRepo,
    *,
    source_ref: str,
    target_branch: str,
    sync_name: str,
    push_hint: str,
    write_codex_handoff: bool,
    handoff_path: Path | None,
) -> None:
    """
    Merge `source_ref` into the checked-out branch.

    On failure the merge is left as-is for manual resolution. A handoff note is
    written when enabled, then `MergeConflictError` carries the merge's status.
    """
    result = git.merge(source_ref)
    if result.ok:
        return

    print(file=sys.stderr)
    print(f"Merge reported conflicts or errors on branch '{target_branch}'.", file=sys.stderr)
    if write_codex_handoff:
        repo_root = Path(git.toplevel())
        path = handoff_path or default_handoff_path(repo_root, sync_name, target_branch)
        write_handoff(
            path,
            repo_root=repo_root,
            target_branch=target_branch,
            source_ref=source_ref,
            unresolved_files=git.unresolved_files(),
        )
        print(f"Wrote Codex handoff: {path}", file=sys.stderr)

    raise MergeConflictError(
        f"merge stopped. Resolve conflicts, commit, then push manually:\n  {push_hint}",
        result.returncode,
    )
