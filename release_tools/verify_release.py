"""
Script: release_tools/verify_release.py
What: Verifies that a vida fork release is pushed and buildable by openclaw-docker.
Doing: Resolves the fork tag, checks it exists on origin, and runs the docker compatibility checks.
Why: Image publication depends on the docker repo deriving the right tag from the fork release.
Goal: Catch a missing tag or a mismatched image tag before the release is announced.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Callable

from release_tools.common import PreconditionError, optional_env
from release_tools.compat import DEFAULT_IMAGE_REPO, VerificationResult, require_remote_tag, verify
from release_tools.git import GitRepo
from release_tools.image_tag import DEFAULT_FORK_TAG_PREFIX, derive_image_tag
from release_tools.preview import PreviewRunner, make_preview_runner
from release_tools.tags import resolve_fork_tag


PreviewFactory = Callable[[Path], PreviewRunner]


def default_docker_dir(git: GitRepo) -> Path:
    override = optional_env("OPENCLAW_DOCKER_DIR")
    if override:
        return Path(override)
    return Path(git.toplevel()).parent / "openclaw-docker"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python3 -m release_tools.cli verify-release",
        description="Verify a vida fork release tag and openclaw-docker compatibility.",
    )
    parser.add_argument("--fork-tag", default="", help="default: latest local tag matching vida-v*")
    parser.add_argument("--openclaw-ref", default="", help="default: same as --fork-tag")
    parser.add_argument("--docker-dir", default="", help="default: ../openclaw-docker")
    parser.add_argument("--skip-docker", action="store_true")
    parser.add_argument(
        "--image-repo",
        default=optional_env("OPENCLAW_DOCKER_IMAGE", DEFAULT_IMAGE_REPO),
        help=f"default: {DEFAULT_IMAGE_REPO}",
    )
    parser.add_argument(
        "--fork-tag-prefix",
        default=optional_env("VIDA_FORK_TAG_PREFIX", DEFAULT_FORK_TAG_PREFIX),
        help=f"fork tag prefix stripped when deriving the image tag (default: {DEFAULT_FORK_TAG_PREFIX})",
    )
    return parser


def check_release(
    git: GitRepo,
    *,
    fork_tag: str,
    openclaw_ref: str,
    docker_dir: Path,
    skip_docker: bool,
    image_repo: str = DEFAULT_IMAGE_REPO,
    prefix: str = DEFAULT_FORK_TAG_PREFIX,
    preview_factory: PreviewFactory = make_preview_runner,
) -> VerificationResult | None:
    """
    Run the release checks for an already-resolved fork tag.

    Returns None when docker checks are skipped. Shared with
    `sync-upstream-release`, which verifies the tag it just pushed.
    """
    if not git.local_tag_exists(fork_tag):
        print(f"Warning: local tag '{fork_tag}' not found.")

    if skip_docker:
        require_remote_tag(fork_tag, git.remote_tag_exists)
        print("Skipped docker compatibility checks (--skip-docker).")
        return None

    return verify(
        fork_tag,
        openclaw_ref,
        remote_tag_exists=git.remote_tag_exists,
        run_preview=preview_factory(docker_dir),
        image_repo=image_repo,
        prefix=prefix,
    )


def run(
    args: argparse.Namespace,
    git: GitRepo,
    preview_factory: PreviewFactory = make_preview_runner,
) -> VerificationResult | None:
    if not git.is_inside_work_tree():
        raise PreconditionError("run this command inside the openclaw git repository.")

    fork_tag = resolve_fork_tag(args.fork_tag, git.list_tags_by_recency)
    openclaw_ref = args.openclaw_ref or fork_tag
    docker_dir = Path(args.docker_dir) if args.docker_dir else default_docker_dir(git)

    print("Release verification inputs:")
    print(f"- fork tag: {fork_tag}")
    print(f"- openclaw ref: {openclaw_ref}")
    print(f"- expected docker tag: {derive_image_tag(openclaw_ref, args.fork_tag_prefix)}")

    result = check_release(
        git,
        fork_tag=fork_tag,
        openclaw_ref=openclaw_ref,
        docker_dir=docker_dir,
        skip_docker=args.skip_docker,
        image_repo=args.image_repo,
        prefix=args.fork_tag_prefix,
        preview_factory=preview_factory,
    )
    if result is not None:
        result.raise_for_failures()
    print("Verification passed.")
    return result


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    run(args, GitRepo())


if __name__ == "__main__":
    main()
