"""Deterministic ordering of dependency records for report output."""

import functools
import logging
from typing import Iterable, List, Optional

import semantic_version

from .models import DependencyRecord

logger = logging.getLogger(__name__)


def parse_semver(value: Optional[str]) -> Optional[semantic_version.Version]:
    """
    Parse a strict semantic version string.

    Surrounding whitespace and a single leading 'v' are tolerated, the way
    npm's semver.valid() accepts them. Build metadata is dropped because it
    takes no part in precedence.

    Args:
        value: Version string, may be None

    Returns:
        Parsed version, or None if the value is not a valid semver
    """
    if not isinstance(value, str):
        return None
    candidate = value.strip()
    if candidate.startswith("v"):
        candidate = candidate[1:]
    try:
        return semantic_version.Version(candidate).truncate("prerelease")
    except ValueError:
        return None


def is_valid_semver(value: Optional[str]) -> bool:
    """Check whether a value is a valid semantic version."""
    return parse_semver(value) is not None


def compare_records(a: DependencyRecord, b: DependencyRecord) -> int:
    """
    Compare two records for report ordering.

    Ordering is by:
    1. lowercase name
    2. installed_version, only when both versions are valid semvers
    3. root records before non-root records

    Returns:
        -1 if a sorts first, 1 if b sorts first, 0 if equal
    """
    name_a = a.name.lower()
    name_b = b.name.lower()
    if name_a < name_b:
        return -1
    if name_a > name_b:
        return 1

    version_a = parse_semver(a.installed_version)
    version_b = parse_semver(b.installed_version)
    if version_a is not None and version_b is not None:
        if version_a < version_b:
            return -1
        if version_a > version_b:
            return 1

    root_a = bool(a.is_root_node)
    root_b = bool(b.is_root_node)
    if root_a and not root_b:
        return -1
    if root_b and not root_a:
        return 1
    return 0


record_sort_key = functools.cmp_to_key(compare_records)


def sort_records(records: Iterable[DependencyRecord]) -> List[DependencyRecord]:
    """Return records in report order. Equal records keep their input order."""
    ordered = sorted(records, key=record_sort_key)
    logger.debug(f"Ordered {len(ordered)} records")
    return ordered
