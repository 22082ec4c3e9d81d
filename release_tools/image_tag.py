"""
Script: release_tools/image_tag.py
What: Derives the docker image tag published for a fork release reference.
Doing: Parses `vida-vYYYY.M.D<suffix>` style refs into date parts and formats them as `YYYY-MM-DD<suffix>`.
Why: The docker packaging repo tags images by date, not by the git tag spelling.
Goal: One tested place that answers "which image tag should this ref produce?".
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union


DEFAULT_FORK_TAG_PREFIX = "vida-"

# Suffix must not start with a digit, so an over-long day like `.1444` does not
# match as day `14` plus suffix `44`.
STRUCTURED_REF_BODY = r"v([0-9]{1,4})\.([0-9]{1,2})\.([0-9]{1,2})((?![0-9]).*)$"


@dataclass(frozen=True)
class StructuredRef:
    year: int
    month: int
    day: int
    suffix: str = ""
    prefix: str = ""


@dataclass(frozen=True)
class OpaqueRef:
    raw: str


ParsedRef = Union[StructuredRef, OpaqueRef]


def _structured_ref_re(prefix: str) -> re.Pattern[str]:
    prefix_part = f"({re.escape(prefix)})?" if prefix else "()"
    return re.compile(f"^{prefix_part}{STRUCTURED_REF_BODY}", re.DOTALL)


def parse_reference(reference: str, prefix: str = DEFAULT_FORK_TAG_PREFIX) -> ParsedRef:
    """
    Split a release reference into date parts, or keep it opaque.

    Examples:
    - `vida-v2026.2.14` -> StructuredRef(2026, 2, 14, "", "vida-")
    - `v2026.12.4-rc1` -> StructuredRef(2026, 12, 4, "-rc1", "")
    - `feature/foo` -> OpaqueRef("feature/foo")

    Month and day are not range-checked; `v2026.13.40` is still structured.
    """
    match = _structured_ref_re(prefix).match(reference)
    if not match:
        return OpaqueRef(reference)
    matched_prefix, year, month, day, suffix = match.groups()
    return StructuredRef(
        year=int(year),
        month=int(month),
        day=int(day),
        suffix=suffix,
        prefix=matched_prefix or "",
    )


def format_image_tag(parsed: ParsedRef) -> str:
    if isinstance(parsed, StructuredRef):
        return f"{parsed.year:04d}-{parsed.month:02d}-{parsed.day:02d}{parsed.suffix}"
    # Registry tags cannot contain `/`.
    return parsed.raw.replace("/", "-")


def derive_image_tag(reference: str, prefix: str = DEFAULT_FORK_TAG_PREFIX) -> str:
    """Return the image tag the docker repo builds for `reference`."""
    return format_image_tag(parse_reference(reference, prefix))
