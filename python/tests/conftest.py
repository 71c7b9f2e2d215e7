"""Shared fixtures: on-disk npm projects with installed node_modules."""

import json

import pytest


def write_package(directory, data):
    """Write a package.json into directory, creating it if needed."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "package.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def project(tmp_path):
    """
    A project with a dependency cycle and two installed versions of one package.

        my-app
        ├── a@1.2.0 (prod)      -> c@^1
        └── b@2.0.0 (dev)       -> c@^2 (nested install), d (optional)
        c@1.0.0                 -> a@^1 (cycle back to a)
    """
    root = tmp_path / "my-app"
    modules = root / "node_modules"
    write_package(root, {
        "name": "my-app",
        "version": "0.1.0",
        "dependencies": {"a": "^1.0.0"},
        "devDependencies": {"b": "^2.0.0"},
    })
    write_package(modules / "a", {
        "name": "a",
        "version": "1.2.0",
        "license": "MIT",
        "author": {"name": "Ann", "email": "ann@example.com"},
        "homepage": "https://example.com/a",
        "dependencies": {"c": "^1.0.0"},
        "devDependencies": {"mocha": "^10.0.0"},
    })
    write_package(modules / "b", {
        "name": "b",
        "version": "2.0.0",
        "license": {"type": "ISC"},
        "dependencies": {"c": "^2.0.0"},
        "optionalDependencies": {"d": "^1.0.0"},
        "peerDependencies": {"react": ">=17"},
    })
    write_package(modules / "c", {
        "name": "c",
        "version": "1.0.0",
        "licenses": [{"type": "MIT"}, {"type": "Apache-2.0"}],
        "dependencies": {"a": "^1.0.0"},
    })
    write_package(modules / "b" / "node_modules" / "c", {
        "name": "c",
        "version": "2.0.0",
        "author": "Cy <cy@example.com>",
    })
    write_package(modules / "d", {"name": "d", "version": "1.0.1"})
    return root
