"""Tests for configuration loading."""

from pathlib import Path

import pytest

from npm_age_gate.config import (
    DEFAULT_MINIMUM_AGE_DAYS,
    DEFAULT_REGISTRY_URL,
    Config,
    ConfigError,
    NpmrcConfigSource,
    load_config,
)


class TestNpmrcConfigSource:
    def test_missing_file_uses_default(self, tmp_path: Path) -> None:
        source = NpmrcConfigSource(tmp_path / ".npmrc")
        assert source.get_minimum_age_days() == 7

    def test_reads_value(self, tmp_path: Path) -> None:
        npmrc = tmp_path / ".npmrc"
        npmrc.write_text("registry=https://example.test\nminimum-release-age=14\n", encoding="utf-8")
        assert NpmrcConfigSource(npmrc).get_minimum_age_days() == 14

    def test_missing_key_uses_default(self, tmp_path: Path) -> None:
        npmrc = tmp_path / ".npmrc"
        npmrc.write_text("save-exact=true\n", encoding="utf-8")
        assert NpmrcConfigSource(npmrc).get_minimum_age_days() == DEFAULT_MINIMUM_AGE_DAYS

    @pytest.mark.parametrize("value", ["soon", ""])
    def test_unusable_value_uses_default(self, tmp_path: Path, value: str) -> None:
        npmrc = tmp_path / ".npmrc"
        npmrc.write_text(f"minimum-release-age={value}\n", encoding="utf-8")
        assert NpmrcConfigSource(npmrc).get_minimum_age_days() == DEFAULT_MINIMUM_AGE_DAYS

    def test_negative_value_is_clamped_to_zero(self, tmp_path: Path) -> None:
        npmrc = tmp_path / ".npmrc"
        npmrc.write_text("minimum-release-age=-3\n", encoding="utf-8")
        assert NpmrcConfigSource(npmrc).get_minimum_age_days() == 0

    def test_leading_integer_is_accepted(self, tmp_path: Path) -> None:
        npmrc = tmp_path / ".npmrc"
        npmrc.write_text("  minimum-release-age = 10days\n", encoding="utf-8")
        assert NpmrcConfigSource(npmrc).get_minimum_age_days() == 10

    def test_value_is_read_once(self, tmp_path: Path) -> None:
        npmrc = tmp_path / ".npmrc"
        npmrc.write_text("minimum-release-age=3\n", encoding="utf-8")
        source = NpmrcConfigSource(npmrc)
        assert source.get_minimum_age_days() == 3
        npmrc.write_text("minimum-release-age=30\n", encoding="utf-8")
        assert source.get_minimum_age_days() == 3


class TestLoadConfig:
    def test_defaults_without_any_source(self, tmp_path: Path) -> None:
        config = load_config(cwd=tmp_path, environ={})
        assert config == Config()
        assert config.get_minimum_age_days() == 7
        assert config.registry_url == DEFAULT_REGISTRY_URL

    def test_reads_npmrc_in_cwd(self, tmp_path: Path) -> None:
        (tmp_path / ".npmrc").write_text("minimum-release-age=21\n", encoding="utf-8")
        assert load_config(cwd=tmp_path, environ={}).minimum_age_days == 21

    def test_env_overrides(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom.npmrc"
        custom.write_text("minimum-release-age=2\n", encoding="utf-8")
        config = load_config(
            cwd=tmp_path,
            environ={
                "NPM_AGE_GATE_NPMRC": str(custom),
                "NPM_AGE_GATE_REGISTRY_URL": "https://mirror.example/npm/",
                "NPM_AGE_GATE_TIMEOUT": "5",
                "NPM_AGE_GATE_MAX_WORKERS": "2",
            },
        )
        assert config == Config(
            minimum_age_days=2,
            registry_url="https://mirror.example/npm",
            fetch_timeout=5.0,
            max_workers=2,
        )

    @pytest.mark.parametrize(
        "environ",
        [
            {"NPM_AGE_GATE_TIMEOUT": "fast"},
            {"NPM_AGE_GATE_TIMEOUT": "0"},
            {"NPM_AGE_GATE_MAX_WORKERS": "1.5"},
            {"NPM_AGE_GATE_MAX_WORKERS": "0"},
        ],
    )
    def test_invalid_override_raises(self, tmp_path: Path, environ: dict[str, str]) -> None:
        with pytest.raises(ConfigError):
            load_config(cwd=tmp_path, environ=environ)
