"""Dotted version comparison for bundle requirement checks.

Versions are compared as fixed-width integers: up to five dot-separated
segments, each zero-padded to four digits, concatenated and read as one
number.
"""

from __future__ import annotations

import logging
import re
from enum import Enum

logger = logging.getLogger(__name__)

SEGMENT_COUNT = 5
SEGMENT_WIDTH = 4

_LEADING_DIGITS = re.compile(r"^\s*([0-9]+)")


class VersionCheckError(ValueError):
    """Raised when a version check is called with invalid arguments."""

    pass


class VersionCheckType(str, Enum):
    """How the second version is checked against the first."""

    MIN = "Min"  # version2 >= version1
    MAX = "Max"  # version2 < version1


def _segment_value(segment: str) -> int:
    match = _LEADING_DIGITS.match(segment)
    return int(match.group(1)) if match else 0


def version_number(version: str) -> int:
    """Convert a dotted version string to its fixed-width integer form.

    Segments of 10000 or more are not clamped: they widen their field and
    shift every following segment, so ordering across such versions is wrong.

    Example:
        >>> version_number("1.3")
        10003000000000000
    """
    parts = version.split(".")
    digits = ""
    for position in range(SEGMENT_COUNT):
        if position < len(parts):
            digits += f"{_segment_value(parts[position]):0{SEGMENT_WIDTH}d}"
        else:
            digits += "0" * SEGMENT_WIDTH
    return int(digits)


def check_version(
    version1: str | None,
    version2: str | None,
    check_type: VersionCheckType | str | None,
) -> bool:
    """Check version2 against version1.

    Args:
        version1: Reference version (lower bound for Min, upper bound for Max).
        version2: Version being checked.
        check_type: ``Min`` (version2 is at least version1) or ``Max``
            (version2 is below version1).

    Returns:
        True if version2 satisfies the bound.

    Raises:
        VersionCheckError: If an argument is missing or the type is unknown.
    """
    for attribute, value in (
        ("version1", version1),
        ("version2", version2),
        ("check_type", check_type),
    ):
        if value is None:
            logger.error("%s not defined!", attribute)
            raise VersionCheckError(f"{attribute} not defined!")

    try:
        mode = VersionCheckType(check_type)
    except ValueError:
        logger.error("Invalid Type!")
        raise VersionCheckError(f"Invalid Type: {check_type!r}")

    number1 = version_number(version1)
    number2 = version_number(version2)

    if mode == VersionCheckType.MIN:
        return number2 >= number1
    return number2 < number1
