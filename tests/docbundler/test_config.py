"""Tests for configuration loading."""
from __future__ import annotations

import pytest

from docbundler.config import DocsConfig
from docbundler.models import ConfigError


class TestDocsConfig:
    def test_defaults(self, config, repo):
        repo = repo.resolve()
        assert config.umbrella_package == "google-cloud"
        assert config.package_scope == "@google-cloud/"
        assert config.default_version == "master"
        assert config.docs_root == repo / "docs" / "json"
        assert config.manifest_path == repo / "docs" / "manifest.json"
        assert config.types_dict == "types.json"
        assert config.toc == "toc.json"

    def test_yaml_overrides(self, repo, monkeypatch):
        monkeypatch.delenv("DOCBUNDLER_UMBRELLA", raising=False)
        (repo / ".docbundler.yaml").write_text(
            "packages:\n  umbrella: gcloud\n  bogus: 1\ndocs:\n  default_version: main\n"
        )
        config = DocsConfig(repo)

        assert config.umbrella_package == "gcloud"
        assert config.default_version == "main"
        assert config.get("packages.bogus") is None

    def test_env_overrides_yaml(self, repo, monkeypatch):
        (repo / ".docbundler.yaml").write_text("packages:\n  umbrella: gcloud\n")
        monkeypatch.setenv("DOCBUNDLER_UMBRELLA", "cloud-all")
        monkeypatch.setenv("DOCBUNDLER_GIT_TIMEOUT", "30")
        config = DocsConfig(repo)

        assert config.umbrella_package == "cloud-all"
        assert config.git_timeout == 30

    def test_bad_env_value(self, repo, monkeypatch):
        monkeypatch.setenv("DOCBUNDLER_GIT_TIMEOUT", "soon")
        with pytest.raises(ConfigError):
            DocsConfig(repo)

    def test_invalid_yaml(self, repo):
        (repo / ".docbundler.yaml").write_text("packages: [unclosed\n")
        with pytest.raises(ConfigError):
            DocsConfig(repo)

    def test_with_root(self, config, tmp_path):
        other = config.with_root(tmp_path / "bundler")
        assert other.docs_root == (tmp_path / "bundler").resolve() / "docs" / "json"
        assert config.docs_root != other.docs_root

    def test_dotted_get(self, config):
        assert config.get("git.submodule_name") == "bundler"
        assert config.get("git.missing", "x") == "x"
