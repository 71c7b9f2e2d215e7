"""Tests for selection configuration."""

import logging

import pytest

from license_report_recursive.config import SelectionConfig, normalize_inclusions


class TestNormalizeInclusions:

    @pytest.mark.parametrize("only,expected", [
        (None, ()),
        ("", ()),
        ("prod", ("prod",)),
        ("prod,dev", ("prod", "dev")),
        (["dev", "peer"], ("dev", "peer")),
        (["prod,opt", "dev"], ("prod", "opt", "dev")),
        ("production, development, optional", ("prod", "dev", "opt")),
        ("PROD", ("prod",)),
        ("prod,prod", ("prod",)),
    ])
    def test_forms(self, only, expected):
        assert normalize_inclusions(only) == expected

    def test_unknown_group_is_dropped(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert normalize_inclusions("prod,bundled") == ("prod",)

        assert "bundled" in caplog.text


class TestSelectionConfig:
    """Tests for SelectionConfig construction."""

    def test_defaults(self):
        config = SelectionConfig()

        assert config.exclusions == frozenset()
        assert config.inclusions == ()
        assert config.recurse is False
        assert config.transitive_inclusions == ("prod", "opt")
        assert config.root_path == ""

    def test_from_options(self):
        config = SelectionConfig.from_options(
            only=["prod", "dev"],
            exclude=["left-pad", "lodash,chalk"],
            recurse=True,
            package="/tmp/app/package.json",
        )

        assert config.inclusions == ("prod", "dev")
        assert config.exclusions == frozenset({"left-pad", "lodash", "chalk"})
        assert config.recurse is True
        assert config.package == "/tmp/app/package.json"

    def test_from_options_passes_extra_settings(self):
        config = SelectionConfig.from_options(root_path=">app", unique=True)

        assert config.root_path == ">app"
        assert config.unique is True

    def test_from_env(self):
        config = SelectionConfig.from_env({
            "LICENSE_REPORT_ONLY": "prod,peer",
            "LICENSE_REPORT_EXCLUDE": "a,b",
            "LICENSE_REPORT_RECURSE": "true",
            "LICENSE_REPORT_PACKAGE": "pkg/package.json",
        })

        assert config.inclusions == ("prod", "peer")
        assert config.exclusions == frozenset({"a", "b"})
        assert config.recurse is True
        assert config.package == "pkg/package.json"

    def test_from_env_empty(self):
        config = SelectionConfig.from_env({})

        assert config == SelectionConfig()

    def test_from_env_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("LICENSE_REPORT_RECURSE", "1")

        assert SelectionConfig.from_env().recurse is True

