"""
Script: release_tools/compat.py
What: Checks that the docker packaging repo would build and push the right image for a fork release.
Doing: Confirms the fork tag is on origin, then looks for required flags in `make -n build` and `make -n push` output.
Why: A release is only usable when the docker repo tags the image with the date derived from the fork tag.
Goal: Report every mismatch from one run instead of stopping at the first.
"""

from __future__ import annotations

from typing import Callable

from release_tools.common import AssertionMismatchError, MissingTagError
from release_tools.image_tag import DEFAULT_FORK_TAG_PREFIX, derive_image_tag
from release_tools.preview import PREVIEW_TARGETS, PreviewRunner


DEFAULT_IMAGE_REPO = "vidaislive/openclaw-docker"
BUILD_ARG_NAME = "OPENCLAW_GIT_REF"


class VerificationResult:
    """Outcome of one verification run. `failures` keeps check order."""

    def __init__(self, fork_tag: str, source_ref: str, expected_image_tag: str) -> None:
        self.fork_tag = fork_tag
        self.source_ref = source_ref
        self.expected_image_tag = expected_image_tag
        self.failures: list[str] = []

    @property
    def passed(self) -> bool:
        return not self.failures

    def raise_for_failures(self) -> None:
        if self.failures:
            raise AssertionMismatchError(self.failures)


def expected_substrings(
    target: str,
    *,
    source_ref: str,
    expected_image_tag: str,
    image_repo: str = DEFAULT_IMAGE_REPO,
) -> list[tuple[str, str]]:
    """
    Return `(needle, label)` pairs a preview of `target` must contain.

    `push` needs everything `build` needs plus `--push`.
    """
    checks = [
        (f"--build-arg {BUILD_ARG_NAME}={source_ref}", "expected OPENCLAW_REF"),
        (f"-t {image_repo}:{expected_image_tag}", "expected image tag"),
        ("--no-cache", "--no-cache"),
    ]
    if target == "push":
        checks.append(("--push", "--push"))
    return checks


def require_remote_tag(fork_tag: str, remote_tag_exists: Callable[[str], bool]) -> None:
    """Raise `MissingTagError` with a push hint when `fork_tag` is not on origin."""
    if not remote_tag_exists(fork_tag):
        raise MissingTagError(
            f"origin tag '{fork_tag}' not found. Push it first:\n  git push origin {fork_tag}"
        )


def verify(
    fork_tag: str,
    source_ref: str,
    *,
    remote_tag_exists: Callable[[str], bool],
    run_preview: PreviewRunner,
    image_repo: str = DEFAULT_IMAGE_REPO,
    prefix: str = DEFAULT_FORK_TAG_PREFIX,
) -> VerificationResult:
    """
    Verify one fork release against the docker repo's build plan.

    Raises `MissingTagError` before any preview runs when `fork_tag` is not on
    the remote. Substring mismatches are collected into the result.
    """
    expected_image_tag = derive_image_tag(source_ref, prefix)
    result = VerificationResult(fork_tag, source_ref, expected_image_tag)

    require_remote_tag(fork_tag, remote_tag_exists)

    previews = [run_preview(target, source_ref) for target in PREVIEW_TARGETS]

    for target, preview in zip(PREVIEW_TARGETS, previews):
        for needle, label in expected_substrings(
            target,
            source_ref=source_ref,
            expected_image_tag=expected_image_tag,
            image_repo=image_repo,
        ):
            if needle not in preview.text:
                result.failures.append(f"{target} preview missing {label} ({needle})")

    return result
