"""Selection of a manifest's dependencies according to inclusion/exclusion rules."""

import logging
from typing import Any, Collection, Dict, List, Optional

from .manifest import Manifest
from .models import DependencyRecord, DEPENDENCY_GROUPS

logger = logging.getLogger(__name__)

ALIAS_PREFIX = "npm:"


def has_restriction(inclusions: Any) -> bool:
    """Only a non-empty list, tuple or set of group tags restricts selection."""
    return isinstance(inclusions, (list, tuple, set, frozenset)) and len(inclusions) > 0


def build_record(key: str, version_range: str, group: str) -> DependencyRecord:
    """
    Create a record for one manifest entry.

    An entry like "my-alias": "npm:real-package@^1.0.0" declares an alias:
    the record is named after the real package while the manifest key is
    kept as full_name.
    """
    name = key
    alias = ""
    defined_version = version_range
    if version_range.startswith(ALIAS_PREFIX):
        target = version_range[len(ALIAS_PREFIX):]
        # Skip index 0 so a scoped target like @scope/pkg keeps its '@'
        separator = target.rfind("@")
        if separator > 0:
            name, defined_version = target[:separator], target[separator + 1:]
        else:
            name, defined_version = target, ""
        alias = key

    return DependencyRecord(
        name=name,
        full_name=key,
        defined_version=defined_version,
        alias=alias,
        group=group,
    )


def annotate_paths(records: List[DependencyRecord], parent_path: str) -> None:
    """Set each record's path to <parent_path>><full_name>."""
    for record in records:
        record.path = f"{parent_path}>{record.full_name}"


def _add_group(
    packages: Dict[str, str],
    group: str,
    exclusions: Collection[str],
    records: List[DependencyRecord],
) -> None:
    for key, version_range in packages.items():
        record = build_record(key, version_range, group)
        # An alias is excluded by its own key or by the package it points to
        if key in exclusions or record.name in exclusions:
            logger.debug(f"Excluding {key} ({group})")
            continue
        records.append(record)


def select(
    manifest: Manifest,
    exclusions: Optional[Collection[str]],
    inclusions: Any,
    parent_path: str,
) -> List[DependencyRecord]:
    """
    Get the dependencies of a manifest that match the selection rules.

    Groups are read in the order prod, dev, peer, opt. A group is read when
    there is no restriction or the inclusions name it, and the manifest
    defines it. Excluded names are dropped from every group that is read.

    Args:
        manifest: Parsed package manifest
        exclusions: Package names to drop
        inclusions: Group tags to read (prod, dev, peer, opt); anything other
            than a non-empty list, tuple or set means all groups
        parent_path: Path of the parent in the dependency tree (e.g. '>got>once')

    Returns:
        Newly created records with their paths set
    """
    exclusions = exclusions or ()
    restricted = has_restriction(inclusions)
    records: List[DependencyRecord] = []

    for group in DEPENDENCY_GROUPS:
        if restricted and group not in inclusions:
            continue
        packages = manifest.group(group)
        if packages is None:
            continue
        _add_group(packages, group, exclusions, records)

    annotate_paths(records, parent_path)
    return records
