"""
Script: release_tools/sync_release.py
What: Brings one upstream release tag into the fork on a fresh sync branch.
Doing: Resolves the upstream tag, merges it onto a `release-sync/<tag>` branch, pushes, and creates the `vida-` fork tag.
Why: Each fork release must track exactly one upstream release.
Goal: Turn "sync to the latest upstream release" into one repeatable command.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from release_tools.common import PreconditionError, optional_env
from release_tools.compat import DEFAULT_IMAGE_REPO
from release_tools.git import GitRepo
from release_tools.image_tag import DEFAULT_FORK_TAG_PREFIX
from release_tools.preview import make_preview_runner
from release_tools.sync_steps import check_repo_ready, fetch_remotes, merge_or_handoff
from release_tools.tags import default_sync_branch, fork_tag_for, resolve_upstream_tag
from release_tools.verify_release import PreviewFactory, check_release, default_docker_dir


DEFAULT_BASE_REF = "origin/main"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python3 -m release_tools.cli sync-upstream-release",
        description="Merge an upstream release tag into a new fork sync branch.",
    )
    parser.add_argument("--tag", default="", help="default: latest upstream non-beta release tag")
    parser.add_argument("--branch", default="", help="default: release-sync/<tag>")
    parser.add_argument("--base", default=DEFAULT_BASE_REF, help=f"default: {DEFAULT_BASE_REF}")
    parser.add_argument("--fork-tag", default="", help="default: <prefix><tag>")
    parser.add_argument(
        "--fork-tag-prefix",
        default=optional_env("VIDA_FORK_TAG_PREFIX", DEFAULT_FORK_TAG_PREFIX),
        help=f"fork tag prefix when --fork-tag is omitted (default: {DEFAULT_FORK_TAG_PREFIX})",
    )
    parser.add_argument("--no-fork-tag", action="store_true", help="do not create a fork release tag")
    parser.add_argument(
        "--no-codex-handoff",
        action="store_true",
        help="do not write a Codex conflict handoff file",
    )
    parser.add_argument("--codex-handoff-path", default="", help="path for the conflict handoff file")
    parser.add_argument(
        "--no-verify",
        action="store_true",
        help="skip release verification after pushing the fork tag",
    )
    parser.add_argument("--docker-dir", default="", help="default: ../openclaw-docker")
    parser.add_argument("--no-push", action="store_true", help="do not push branch or tag to origin")
    parser.add_argument("--dry-run", action="store_true", help="print computed values and exit")
    parser.add_argument("--allow-dirty", action="store_true", help="skip clean-tree check")
    return parser


def run(
    args: argparse.Namespace,
    git: GitRepo,
    preview_factory: PreviewFactory = make_preview_runner,
) -> None:
    check_repo_ready(git, allow_dirty=args.allow_dirty)
    fetch_remotes(git, tags=True)

    tag = resolve_upstream_tag(args.tag, git.list_tags_by_recency)
    if not git.local_tag_exists(tag):
        raise PreconditionError(f"tag '{tag}' not found locally after fetch.")
    if not git.ref_exists(args.base):
        raise PreconditionError(f"base ref '{args.base}' not found.")

    branch = args.branch or default_sync_branch(tag)
    create_fork_tag = not args.no_fork_tag
    fork_tag = ""
    if create_fork_tag:
        fork_tag = args.fork_tag or fork_tag_for(tag, args.fork_tag_prefix)

    if git.local_branch_exists(branch):
        raise PreconditionError(f"local branch '{branch}' already exists.")
    if git.remote_branch_exists(branch):
        raise PreconditionError(f"origin branch '{branch}' already exists.")

    print(f"Tag:      {tag}")
    print(f"Base ref: {args.base}")
    print(f"Branch:   {branch}")
    if create_fork_tag:
        print(f"Fork tag: {fork_tag}")

    if args.dry_run:
        print("Dry run complete.")
        return

    print("Creating branch...")
    git.create_branch(branch, args.base)

    print(f"Merging release tag {tag}...")
    merge_or_handoff(
        git,
        source_ref=tag,
        target_branch=branch,
        sync_name="release",
        push_hint=f"git push -u origin {branch}",
        write_codex_handoff=not args.no_codex_handoff,
        handoff_path=Path(args.codex_handoff_path) if args.codex_handoff_path else None,
    )

    push = not args.no_push
    if push:
        print("Pushing branch to origin...")
        git.push("origin", branch, set_upstream=True)

    if create_fork_tag:
        if git.local_tag_exists(fork_tag):
            raise PreconditionError(f"local tag '{fork_tag}' already exists.")
        if git.remote_tag_exists(fork_tag):
            raise PreconditionError(f"origin tag '{fork_tag}' already exists.")
        print(f"Creating fork tag '{fork_tag}'...")
        git.create_annotated_tag(fork_tag, f"Fork release aligned with upstream {tag}")
        if push:
            print(f"Pushing fork tag '{fork_tag}' to origin...")
            git.push("origin", fork_tag)

    print(f"Done. Branch '{branch}' now contains merge of '{tag}' into '{args.base}'.")

    # Verification needs the fork tag on origin.
    if args.no_verify or not create_fork_tag or not push:
        return

    print(f"Verifying fork release '{fork_tag}'...")
    docker_dir = Path(args.docker_dir) if args.docker_dir else default_docker_dir(git)
    result = check_release(
        git,
        fork_tag=fork_tag,
        openclaw_ref=fork_tag,
        docker_dir=docker_dir,
        skip_docker=False,
        image_repo=optional_env("OPENCLAW_DOCKER_IMAGE", DEFAULT_IMAGE_REPO),
        prefix=args.fork_tag_prefix,
        preview_factory=preview_factory,
    )
    if result is not None:
        result.raise_for_failures()
    print("Verification passed.")


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    run(args, GitRepo())


if __name__ == "__main__":
    main()
