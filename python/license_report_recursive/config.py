"""Selection configuration and logging setup."""

import logging
import os
from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple, Union

from .models import PROD, DEV, PEER, OPT

logger = logging.getLogger(__name__)

ENV_PREFIX = "LICENSE_REPORT_"

# Accepted spellings for --only values
GROUP_ALIASES = {
    "prod": PROD,
    "production": PROD,
    "dev": DEV,
    "development": DEV,
    "peer": PEER,
    "opt": OPT,
    "optional": OPT,
}

# Groups npm installs for dependencies of dependencies
DEFAULT_TRANSITIVE_INCLUSIONS = (PROD, OPT)

OptionValue = Union[str, Iterable[str], None]


def _split_option(value: OptionValue) -> Tuple[str, ...]:
    """Flatten a repeated and/or comma separated option into its parts."""
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    parts = []
    for item in value:
        parts.extend(p.strip() for p in str(item).split(","))
    return tuple(p for p in parts if p)


def normalize_inclusions(only: OptionValue) -> Tuple[str, ...]:
    """
    Normalize --only values into group tags.

    Unknown values are dropped with a warning. An empty result means no
    restriction.
    """
    tags = []
    for part in _split_option(only):
        tag = GROUP_ALIASES.get(part.lower())
        if tag is None:
            logger.warning(f"Ignoring unknown dependency group: {part}")
            continue
        if tag not in tags:
            tags.append(tag)
    return tuple(tags)


def _env_flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


@dataclass
class SelectionConfig:
    """Normalized inclusion/exclusion settings for a report run."""

    exclusions: frozenset = field(default_factory=frozenset)
    inclusions: Tuple[str, ...] = ()
    recurse: bool = False
    transitive_inclusions: Tuple[str, ...] = DEFAULT_TRANSITIVE_INCLUSIONS
    root_path: str = ""
    unique: bool = False
    package: Optional[str] = None  # package.json to report on

    @classmethod
    def from_options(
        cls,
        only: OptionValue = None,
        exclude: OptionValue = None,
        recurse: bool = False,
        package: Optional[str] = None,
        **kwargs,
    ) -> "SelectionConfig":
        """Build a config from raw --only/--exclude/--recurse/--package values."""
        config = cls(
            exclusions=frozenset(_split_option(exclude)),
            inclusions=normalize_inclusions(only),
            recurse=bool(recurse),
            package=package,
            **kwargs,
        )
        logger.debug(f"Selection config: {config}")
        return config

    @classmethod
    def from_env(cls, environ=None) -> "SelectionConfig":
        """Build a config from LICENSE_REPORT_* environment variables."""
        environ = os.environ if environ is None else environ
        return cls.from_options(
            only=environ.get(f"{ENV_PREFIX}ONLY"),
            exclude=environ.get(f"{ENV_PREFIX}EXCLUDE"),
            recurse=_env_flag(environ.get(f"{ENV_PREFIX}RECURSE")),
            package=environ.get(f"{ENV_PREFIX}PACKAGE") or None,
        )

