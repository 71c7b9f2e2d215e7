"""Reading package.json manifests and locating installed packages."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .models import PROD, DEV, PEER, OPT
from .utils import read_json

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "package.json"
NODE_MODULES = "node_modules"

# package.json key for each dependency group
GROUP_KEYS = {
    PROD: "dependencies",
    DEV: "devDependencies",
    PEER: "peerDependencies",
    OPT: "optionalDependencies",
}


class ManifestError(Exception):
    """Raised when a manifest cannot be read or parsed."""


def _group(data: Dict[str, Any], key: str) -> Optional[Dict[str, str]]:
    """Return a dependency mapping, or None when absent or malformed."""
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        logger.debug(f"Ignoring non-object '{key}' in manifest")
        return None
    return {str(name): str(version) for name, version in value.items()}


def _person_name(value: Any) -> Optional[str]:
    """Normalize an npm person field ("Name <mail>" or {name, email})."""
    if isinstance(value, str):
        return value or None
    if isinstance(value, dict):
        return value.get("name")
    return None


def _license(data: Dict[str, Any]) -> Optional[str]:
    """Extract the declared license, including the legacy object/list forms."""
    value = data.get("license")
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        return value.get("type")
    licenses = data.get("licenses")
    if isinstance(licenses, list):
        types = [
            entry.get("type") if isinstance(entry, dict) else entry
            for entry in licenses
        ]
        types = [t for t in types if isinstance(t, str) and t]
        if types:
            return " OR ".join(types)
    return None


@dataclass
class Manifest:
    """The parts of a package.json relevant to dependency selection."""

    dependencies: Optional[Dict[str, str]] = None
    dev_dependencies: Optional[Dict[str, str]] = None
    peer_dependencies: Optional[Dict[str, str]] = None
    optional_dependencies: Optional[Dict[str, str]] = None
    name: Optional[str] = None
    version: Optional[str] = None
    license: Optional[str] = None
    author: Optional[str] = None
    homepage: Optional[str] = None
    directory: Optional[Path] = field(default=None, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], directory: Optional[Path] = None) -> "Manifest":
        """Build a manifest from parsed package.json content."""
        return cls(
            dependencies=_group(data, GROUP_KEYS[PROD]),
            dev_dependencies=_group(data, GROUP_KEYS[DEV]),
            peer_dependencies=_group(data, GROUP_KEYS[PEER]),
            optional_dependencies=_group(data, GROUP_KEYS[OPT]),
            name=data.get("name"),
            version=data.get("version"),
            license=_license(data),
            author=_person_name(data.get("author")),
            homepage=data.get("homepage"),
            directory=directory,
        )

    def group(self, tag: str) -> Optional[Dict[str, str]]:
        """Return the mapping for a dependency group tag (prod, dev, peer, opt)."""
        return {
            PROD: self.dependencies,
            DEV: self.dev_dependencies,
            PEER: self.peer_dependencies,
            OPT: self.optional_dependencies,
        }[tag]


def load_manifest(path: Union[str, Path]) -> Manifest:
    """
    Load a package.json file.

    Args:
        path: Path to a package.json file, or to a directory containing one

    Returns:
        Parsed Manifest

    Raises:
        ManifestError: If the file is missing or is not a JSON object
    """
    path = Path(path)
    if path.is_dir():
        path = path / MANIFEST_FILENAME

    logger.debug(f"Reading manifest: {path}")
    try:
        data = read_json(path)
    except FileNotFoundError as e:
        raise ManifestError(f"Manifest not found: {path}") from e
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ManifestError(f"Cannot read manifest {path}: {e}") from e

    if not isinstance(data, dict):
        raise ManifestError(f"Manifest {path} does not contain a JSON object")

    return Manifest.from_dict(data, directory=path.parent.resolve())


def _candidate_dirs(start_dir: Path) -> List[Path]:
    """Directories searched for node_modules, nearest first."""
    start_dir = start_dir.resolve()
    return [start_dir, *start_dir.parents]


def find_installed_package(name: str, start_dir: Union[str, Path]) -> Optional[Path]:
    """
    Locate an installed package the way Node resolves modules.

    Looks for node_modules/<name>/package.json in start_dir and then in each
    ancestor directory.

    Args:
        name: Package name (may be scoped, e.g. @babel/core)
        start_dir: Directory of the manifest declaring the dependency

    Returns:
        Directory of the installed package, or None if it is not installed
    """
    for directory in _candidate_dirs(Path(start_dir)):
        if directory.name == NODE_MODULES:
            continue
        candidate = directory / NODE_MODULES / name
        if (candidate / MANIFEST_FILENAME).is_file():
            return candidate
    return None
