"""
Tests for engine configuration loading.
"""

import os

import pytest

from phpcore import EngineConfig, load_config, parse_directive
from phpcore.config import PHPCORE_CONFIG, parse_bool


class TestDirectives:
    """Test key=value directive parsing."""

    def test_parse(self):
        assert parse_directive("display_errors=0") == ("display_errors", "0")
        assert parse_directive(" memory_limit = 128M ") == ("memory_limit", "128M")

    def test_value_may_contain_equals(self):
        assert parse_directive("a=b=c") == ("a", "b=c")

    def test_missing_equals(self):
        with pytest.raises(ValueError):
            parse_directive("display_errors")

    def test_empty_key(self):
        with pytest.raises(ValueError):
            parse_directive("=1")

    @pytest.mark.parametrize("text,expected", [
        ("1", True), ("On", True), ("true", True),
        ("0", False), ("off", False), ("", False),
    ])
    def test_parse_bool(self, text, expected):
        assert parse_bool(text) is expected

    def test_parse_bool_invalid(self):
        with pytest.raises(ValueError):
            parse_bool("maybe")


class TestEngineConfig:
    """Test applying settings."""

    def test_defaults(self):
        config = EngineConfig()
        assert config.display_errors is True
        assert config.output_encoding == "utf-8"
        assert config.variables_capacity == 64
        assert config.functions_capacity == 32

    def test_known_and_unknown_keys(self):
        config = EngineConfig()
        config.apply_directives(["display_errors=off", "memory_limit=128M"])
        assert config.display_errors is False
        assert config.get("memory_limit") == "128M"
        assert config.get("missing", "x") == "x"

    def test_bad_capacity(self):
        with pytest.raises(ValueError):
            EngineConfig().apply("variables_capacity", 0)


class TestLoadConfig:
    """Test YAML loading and layering."""

    def test_no_sources(self):
        config = load_config(environ={})
        assert config == EngineConfig()

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text(
            "display_errors: false\n"
            "output_encoding: latin-1\n"
            "directives:\n"
            "  memory_limit: 64M\n"
        )
        config = load_config(path, environ={})
        assert config.display_errors is False
        assert config.output_encoding == "latin-1"
        assert config.directives == {"memory_limit": "64M"}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path, environ={}) == EngineConfig()

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError):
            load_config(path, environ={})

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml", environ={})

    def test_layering(self, tmp_path):
        """Env files load first, then the explicit file, then directives."""
        site = tmp_path / "site.yaml"
        site.write_text("display_errors: false\nprecision: '14'\nfoo: site\n")
        local = tmp_path / "local.yaml"
        local.write_text("foo: local\n")
        environ = {PHPCORE_CONFIG: os.pathsep.join([str(site), str(tmp_path / "absent.yaml")])}

        config = load_config(local, ["display_errors=1"], environ=environ)
        assert config.display_errors is True
        assert config.get("precision") == "14"
        assert config.get("foo") == "local"
