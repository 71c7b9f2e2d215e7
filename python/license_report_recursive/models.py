"""Core data models for license-report-recursive."""

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Optional

from packageurl import PackageURL

# Dependency group tags, in the order groups are read from a manifest
PROD = "prod"
DEV = "dev"
PEER = "peer"
OPT = "opt"
DEPENDENCY_GROUPS = (PROD, DEV, PEER, OPT)


@dataclass
class DependencyRecord:
    """One occurrence of a package in the resolved dependency set."""

    name: str
    full_name: str
    defined_version: str = ""
    installed_version: Optional[str] = None
    alias: str = ""  # Manifest key when declared as npm:<name>@<range>
    group: str = PROD
    is_root_node: bool = False
    path: str = ""
    license_type: Optional[str] = None
    author: Optional[str] = None
    homepage: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)  # Data attached by metadata providers

    def __post_init__(self):
        assert self.name, "DependencyRecord requires a name"
        assert self.full_name, "DependencyRecord requires a full_name"

    @property
    def purl(self) -> str:
        """Return the Package URL for this record, e.g. pkg:npm/%40scope/name@1.0.0."""
        namespace = None
        name = self.name
        if name.startswith("@") and "/" in name:
            namespace, name = name.split("/", 1)
        return PackageURL(
            type="npm",
            namespace=namespace,
            name=name,
            version=self.installed_version or None,
        ).to_string()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the record for renderers."""
        data = asdict(self)
        data["purl"] = self.purl
        return data

    def __str__(self) -> str:
        return f"{self.name}@{self.installed_version or self.defined_version}"
