"""license-report-recursive: select and order a project's npm dependencies for license reports."""

__version__ = "1.0.0"

from .aggregator import MetadataProvider, TreeAggregator, build_report, unique_records
from .config import SelectionConfig
from .manifest import Manifest, ManifestError, find_installed_package, load_manifest
from .models import DependencyRecord
from .ordering import compare_records, sort_records
from .selector import annotate_paths, select

__all__ = [
    "DependencyRecord",
    "Manifest",
    "ManifestError",
    "MetadataProvider",
    "SelectionConfig",
    "TreeAggregator",
    "annotate_paths",
    "build_report",
    "compare_records",
    "find_installed_package",
    "load_manifest",
    "select",
    "sort_records",
    "unique_records",
]
