from pathlib import Path

import pytest

from repoview.config import deep_merge, parse_env_vars, read_toml_file
from repoview.exceptions import ConfigLoadError

SECTIONS = ("browser", "logging", "storage")


class TestDeepMerge:
    def test_nested_dicts_merge(self) -> None:
        base = {"browser": {"page_size": 50, "mail_enabled": False}}
        override = {"browser": {"page_size": 10}}

        assert deep_merge(base, override) == {
            "browser": {"page_size": 10, "mail_enabled": False}
        }

    def test_lists_are_replaced(self) -> None:
        assert deep_merge({"a": [1, 2]}, {"a": [3]}) == {"a": [3]}

    def test_table_replaces_scalar(self) -> None:
        assert deep_merge({"storage": "flat"}, {"storage": {"outbox": "o.jsonl"}}) == {
            "storage": {"outbox": "o.jsonl"}
        }

    def test_inputs_are_not_modified(self) -> None:
        base = {"a": {"b": 1}}
        override = {"a": {"c": [2]}}

        merged = deep_merge(base, override)
        merged["a"]["b"] = 100
        merged["a"]["c"].append(3)

        assert base == {"a": {"b": 1}}
        assert override == {"a": {"c": [2]}}


class TestParseEnvVars:
    def test_double_underscore_nests(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REPOVIEW_STORAGE__COMMENTS_DB", "/tmp/c.db")  # noqa: S108
        monkeypatch.setenv("REPOVIEW_LOGGING__LEVEL", "debug")

        assert parse_env_vars(SECTIONS) == {
            "storage": {"comments_db": "/tmp/c.db"},  # noqa: S108
            "logging": {"level": "debug"},
        }

    def test_values_stay_strings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REPOVIEW_BROWSER__PAGE_SIZE", "20")

        assert parse_env_vars(SECTIONS) == {"browser": {"page_size": "20"}}

    def test_unknown_sections_are_ignored(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("REPOVIEW_SERVER__PORT", "8080")
        monkeypatch.setenv("REPOVIEW_STRICT_CONFIG", "1")
        monkeypatch.setenv("REPOVIEW_BROWSER__", "x")

        assert parse_env_vars(SECTIONS) == {}

    def test_other_prefixes_are_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OTHER_BROWSER__PAGE_SIZE", "5")

        assert parse_env_vars(SECTIONS) == {}

    def test_custom_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RV_BROWSER__PAGE_SIZE", "5")

        assert parse_env_vars(SECTIONS, prefix="RV_") == {
            "browser": {"page_size": "5"}
        }


class TestReadTomlFile:
    def test_reads_tables(self, tmp_path: Path) -> None:
        path = tmp_path / "repoview.toml"
        _ = path.write_text('[storage]\noutbox = "out.jsonl"\n')

        assert read_toml_file(path) == {"storage": {"outbox": "out.jsonl"}}

    def test_parse_error_carries_path(self, tmp_path: Path) -> None:
        path = tmp_path / "repoview.toml"
        _ = path.write_text("[browser\n")

        with pytest.raises(ConfigLoadError) as exc_info:
            _ = read_toml_file(path)

        assert exc_info.value.path == path

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            _ = read_toml_file(tmp_path / "absent.toml")
