"""Collects selected dependencies across the root manifest and installed packages."""

import logging
from collections import deque
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Set, Tuple

from .config import SelectionConfig
from .manifest import Manifest, ManifestError, find_installed_package, load_manifest
from .models import DependencyRecord
from .ordering import sort_records
from .selector import select
from .utils import deep_clone

logger = logging.getLogger(__name__)

METADATA_FIELDS = ("license_type", "author", "homepage", "extra")


def _package_key(record: DependencyRecord, manifest: Manifest) -> str:
    """Identify an installed package by its own manifest's name and version."""
    return f"{manifest.name or record.name}@{manifest.version}"


class MetadataProvider(Protocol):
    """Attaches additional metadata (license, remote version, ...) to a record."""

    def enrich(self, record: DependencyRecord) -> None:
        ...


class TreeAggregator:
    """
    Walks the dependency graph starting at a root manifest.

    The root manifest is read with the configured inclusions. With recursion
    enabled, the manifest of every installed dependency is read as well,
    using the transitive inclusions, and its records get the parent record's
    path as prefix.

    Traversal is breadth-first in selection order, so the same input always
    yields the same paths. An installed package (name@version) is expanded
    at most once; later occurrences are recorded but not descended into.
    """

    def __init__(self, config: Optional[SelectionConfig] = None,
                 providers: Optional[Iterable[MetadataProvider]] = None):
        """Initialize the aggregator."""
        self.config = config or SelectionConfig()
        self.providers: List[MetadataProvider] = list(providers or [])

        self.records: List[DependencyRecord] = []
        self._expanded: Set[str] = set()
        self._manifests: Dict[Path, Optional[Manifest]] = {}  # package dir -> manifest
        self._metadata: Dict[str, dict] = {}  # name@version -> enrichment result

    def collect(self, root: Manifest) -> List[DependencyRecord]:
        """
        Collect all selected records for a root manifest.

        Args:
            root: The manifest of the project being reported on

        Returns:
            All records in traversal order (not yet sorted)
        """
        self.records = []
        self._expanded = set()

        root_dir = root.directory or Path.cwd()
        roots = select(root, self.config.exclusions, self.config.inclusions, self.config.root_path)
        for record in roots:
            record.is_root_node = True
        logger.info(f"Selected {len(roots)} direct dependencies")

        queue: deque = deque((record, root_dir) for record in roots)
        while queue:
            record, declaring_dir = queue.popleft()
            self.records.append(record)

            manifest = self._installed_manifest(record, declaring_dir)
            if manifest is None:
                continue
            record.installed_version = manifest.version
            self._enrich(record, manifest)

            if not self.config.recurse:
                continue

            package_key = _package_key(record, manifest)
            if package_key in self._expanded:
                logger.debug(f"Already expanded {package_key}, not descending from {record.path}")
                continue
            self._expanded.add(package_key)

            children = select(
                manifest,
                self.config.exclusions,
                self.config.transitive_inclusions,
                record.path,
            )
            queue.extend((child, manifest.directory) for child in children)

        logger.info(f"Collected {len(self.records)} dependency records")
        return self.records

    def _installed_manifest(self, record: DependencyRecord, declaring_dir: Path) -> Optional[Manifest]:
        """Find and read the installed copy of a record's package."""
        # Aliased packages are installed under their manifest key
        package_dir = find_installed_package(record.full_name, declaring_dir)
        if package_dir is None:
            logger.warning(f"Package {record.full_name} is not installed (required at {record.path})")
            return None

        package_dir = package_dir.resolve()
        if package_dir not in self._manifests:
            try:
                self._manifests[package_dir] = load_manifest(package_dir)
            except ManifestError as e:
                logger.warning(f"Skipping {record.name}: {e}")
                self._manifests[package_dir] = None
        return self._manifests[package_dir]

    def _enrich(self, record: DependencyRecord, manifest: Manifest) -> None:
        """Attach local and provider metadata, reusing earlier results for the same package."""
        package_key = _package_key(record, manifest)
        cached = self._metadata.get(package_key)
        if cached is not None:
            for name, value in deep_clone(cached).items():
                setattr(record, name, value)
            return

        record.license_type = manifest.license
        record.author = manifest.author
        record.homepage = manifest.homepage

        for provider in self.providers:
            try:
                provider.enrich(record)
            except Exception as e:
                logger.warning(f"Metadata provider {type(provider).__name__} failed for {record}: {e}")

        self._metadata[package_key] = deep_clone(
            {name: getattr(record, name) for name in METADATA_FIELDS}
        )


def _identity(record: DependencyRecord) -> Tuple[str, Optional[str]]:
    return record.name, record.installed_version


def unique_records(records: Iterable[DependencyRecord]) -> List[DependencyRecord]:
    """
    Order records and keep one record per package version.

    The first record in report order wins, so a root record is kept over a
    transitive occurrence of the same package version.
    """
    seen: Set[Tuple[str, Optional[str]]] = set()
    result = []
    for record in sort_records(records):
        identity = _identity(record)
        if identity in seen:
            continue
        seen.add(identity)
        result.append(record)
    return result


def build_report(manifest: Optional[Manifest] = None,
                 config: Optional[SelectionConfig] = None,
                 providers: Optional[Iterable[MetadataProvider]] = None) -> List[DependencyRecord]:
    """
    Produce the ordered record sequence handed to a renderer.

    Args:
        manifest: Root manifest; when omitted it is loaded from config.package,
            or from package.json in the current directory
        config: Selection settings (defaults to no restrictions, no recursion)
        providers: Optional metadata providers

    Returns:
        Records in report order

    Raises:
        ManifestError: If the root manifest cannot be loaded
    """
    config = config or SelectionConfig()
    if manifest is None:
        manifest = load_manifest(config.package or Path.cwd())

    records = TreeAggregator(config, providers).collect(manifest)
    if config.unique:
        return unique_records(records)
    return sort_records(records)
