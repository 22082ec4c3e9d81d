"""
Script: release_tools/tags.py
What: Picks the upstream or fork release tag a command should work on.
Doing: Returns an explicit tag as-is, or the most recent tag matching the expected pattern.
Why: Sync and verify both default to "latest release" when no tag is given.
Goal: Keep tag selection rules identical across commands.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable

from release_tools.common import ResolutionError
from release_tools.image_tag import DEFAULT_FORK_TAG_PREFIX


FORK_TAG_RE = re.compile(r"^vida-v[0-9]")
UPSTREAM_TAG_RE = re.compile(r"^v[0-9]")
PRERELEASE_MARKER = "-beta"
SYNC_BRANCH_PREFIX = "release-sync/"

TagLister = Callable[[], Iterable[str]]


def first_matching_tag(
    tags: Iterable[str],
    pattern: re.Pattern[str],
    *,
    exclude: str = "",
) -> str:
    """Return the first tag matching `pattern`, or empty string."""
    for tag in tags:
        if not pattern.search(tag):
            continue
        if exclude and exclude in tag:
            continue
        return tag
    return ""


def resolve_fork_tag(explicit_fork_tag: str | None, list_tags_by_recency: TagLister) -> str:
    """
    Return the fork tag to verify.

    An explicit tag wins and is not validated here. Otherwise the newest
    `vida-v<digit>...` tag is used.
    """
    if explicit_fork_tag:
        return explicit_fork_tag
    tag = first_matching_tag(list_tags_by_recency(), FORK_TAG_RE)
    if not tag:
        raise ResolutionError(
            "could not resolve fork tag (expected something like vida-v2026.2.14)."
        )
    return tag


def resolve_upstream_tag(explicit_tag: str | None, list_tags_by_recency: TagLister) -> str:
    """Return the upstream release tag, skipping `-beta` pre-releases."""
    if explicit_tag:
        return explicit_tag
    tag = first_matching_tag(list_tags_by_recency(), UPSTREAM_TAG_RE, exclude=PRERELEASE_MARKER)
    if not tag:
        raise ResolutionError("could not determine upstream release tag.")
    return tag


def fork_tag_for(upstream_tag: str, prefix: str = DEFAULT_FORK_TAG_PREFIX) -> str:
    return f"{prefix}{upstream_tag}"


def default_sync_branch(upstream_tag: str) -> str:
    return f"{SYNC_BRANCH_PREFIX}{upstream_tag}"
