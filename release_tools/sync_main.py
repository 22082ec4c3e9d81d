"""
Script: release_tools/sync_main.py
What: Merges upstream `main` into the fork's main branch.
Doing: Checks out and rebases the target branch, merges the source ref, and pushes on success.
Why: Keeps the fork's main close to upstream between tagged releases.
Goal: Stop with a handoff note instead of guessing when the merge conflicts.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from release_tools.common import PreconditionError
from release_tools.git import GitRepo
from release_tools.sync_steps import check_repo_ready, fetch_remotes, merge_or_handoff


DEFAULT_TARGET_BRANCH = "main"
DEFAULT_SOURCE_REF = "upstream/main"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python3 -m release_tools.cli sync-upstream-main",
        description="Merge upstream main into the fork's target branch.",
    )
    parser.add_argument("--target-branch", default=DEFAULT_TARGET_BRANCH)
    parser.add_argument("--source-ref", default=DEFAULT_SOURCE_REF)
    parser.add_argument(
        "--no-codex-handoff",
        action="store_true",
        help="do not write a Codex conflict handoff file",
    )
    parser.add_argument("--codex-handoff-path", default="", help="path for the conflict handoff file")
    parser.add_argument("--no-push", action="store_true", help="do not push target branch after merge")
    parser.add_argument("--dry-run", action="store_true", help="print computed values and exit")
    parser.add_argument("--allow-dirty", action="store_true", help="skip clean-tree check")
    return parser


def checkout_target_branch(git: GitRepo, target_branch: str) -> None:
    """Use the local branch, else track origin's, else fail."""
    if git.local_branch_exists(target_branch):
        git.checkout(target_branch)
    elif git.ref_exists(f"origin/{target_branch}"):
        git.create_branch(target_branch, f"origin/{target_branch}")
    else:
        raise PreconditionError(f"target branch '{target_branch}' not found locally or on origin.")


def run(args: argparse.Namespace, git: GitRepo) -> None:
    check_repo_ready(git, allow_dirty=args.allow_dirty)
    fetch_remotes(git, tags=False)

    if not git.ref_exists(args.source_ref):
        raise PreconditionError(f"source ref '{args.source_ref}' not found.")

    print(f"Target branch: {args.target_branch}")
    print(f"Source ref:    {args.source_ref}")

    if args.dry_run:
        print("Dry run complete.")
        return

    checkout_target_branch(git, args.target_branch)

    print(f"Rebasing {args.target_branch} onto origin/{args.target_branch}...")
    git.pull_rebase("origin", args.target_branch)

    print(f"Merging {args.source_ref} into {args.target_branch}...")
    merge_or_handoff(
        git,
        source_ref=args.source_ref,
        target_branch=args.target_branch,
        sync_name="main",
        push_hint=f"git push origin {args.target_branch}",
        write_codex_handoff=not args.no_codex_handoff,
        handoff_path=Path(args.codex_handoff_path) if args.codex_handoff_path else None,
    )

    if not args.no_push:
        print(f"Pushing {args.target_branch} to origin...")
        git.push("origin", args.target_branch)

    print(f"Done. {args.source_ref} merged into {args.target_branch}.")


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    run(args, GitRepo())


if __name__ == "__main__":
    main()
