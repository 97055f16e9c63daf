"""Tests for the single-package builder."""
from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from conftest import BIGTABLE_INDEX, BIGTABLE_TABLE, write_package
from docbundler.builder import Builder, is_ignored
from docbundler.models import DocsBuildError


def _read(path):
    return json.loads(path.read_text())


class TestTagName:
    """Tag names for master, umbrella and package builds."""

    def test_umbrella(self, config):
        assert Builder("google-cloud", "0.44.0", config=config).get_tag_name() == "v0.44.0"

    def test_package(self, config):
        assert Builder("bigtable", "0.4.1", config=config).get_tag_name() == "bigtable-0.4.1"

    def test_master(self, config):
        builder = Builder("bigtable", config=config)
        assert builder.is_master
        assert builder.get_tag_name() == "master"

    def test_umbrella_master(self, config):
        assert Builder("google-cloud", config=config).get_tag_name() == "master"

    def test_output_dir(self, config):
        builder = Builder("bigtable", "0.4.1", config=config)
        assert builder.dir == config.repo_root / "docs" / "json" / "bigtable" / "0.4.1"

    def test_cwd_moves_output(self, config, tmp_path):
        builder = Builder("bigtable", "0.4.1", tmp_path / "bundler", config=config)
        assert builder.dir == (tmp_path / "bundler").resolve() / "docs" / "json" / "bigtable" / "0.4.1"


class TestIgnore:
    def test_package_dir(self):
        assert is_ignored("common/src/index.js", ["common"])

    def test_generated_client(self):
        assert is_ignored("pubsub/src/publisher_client.js", ["*/src/*_client.js"])

    def test_regular_file(self):
        assert not is_ignored("bigtable/src/index.js", ["common", "*/src/*_client.js"])


class TestBuild:
    """Writing docs to docs/json/<name>/<version>."""

    def test_writes_docs(self, repo, config, manifest):
        write_package(repo, "bigtable", {"index.js": BIGTABLE_INDEX, "table.js": BIGTABLE_TABLE})
        builder = Builder("bigtable", "0.4.1", config=config, manifest=manifest)

        builder.build()

        out = builder.dir
        assert sorted(p.name for p in out.iterdir()) == [
            "README.md", "index.json", "table.json", "toc.json", "types.json",
        ]
        index = _read(out / "index.json")
        assert index["id"] == "bigtable"
        assert index["path"] == "index.json"
        assert index["source"].startswith("packages/bigtable/src/index.js#L")

    def test_types_and_toc(self, repo, config, manifest):
        write_package(repo, "bigtable", {"index.js": BIGTABLE_INDEX, "table.js": BIGTABLE_TABLE})
        builder = Builder("bigtable", "0.4.1", config=config, manifest=manifest)
        builder.build()

        assert builder.get_types() == [
            {"id": "bigtable", "name": "Bigtable", "contents": "index.json"},
            {"id": "bigtable/table", "name": "Table", "contents": "table.json"},
        ]
        toc = _read(builder.dir / "toc.json")
        assert toc["tagName"] == "bigtable-0.4.1"
        assert toc["services"][0]["nav"] == [{"title": "Table", "type": "bigtable/table"}]

    def test_ignored_files_skipped(self, repo, config, manifest):
        write_package(repo, "bigtable", {
            "index.js": BIGTABLE_INDEX,
            "bigtable_admin_client.js": "/** @private */\n",
        })
        builder = Builder("bigtable", config=config, manifest=manifest)

        assert builder.source_files() == ["bigtable/src/index.js"]

    def test_parse_failure_names_file(self, repo, config, manifest):
        write_package(repo, "bigtable", {"index.js": BIGTABLE_INDEX, "broken.js": "/** never closed"})
        builder = Builder("bigtable", "0.4.1", config=config, manifest=manifest)

        with pytest.raises(DocsBuildError) as exc_info:
            builder.build()

        assert "Unable to generate docs for file: bigtable/src/broken.js" in str(exc_info.value)
        assert exc_info.value.file == "bigtable/src/broken.js"

    def test_umbrella_triggers_bundle(self, repo, config, manifest, monkeypatch):
        write_package(repo, "google-cloud", {"index.js": "/**\n * @constructor\n */\nfunction Gcloud() {}\n"})
        bundler = MagicMock()
        factory = MagicMock(return_value=bundler)
        monkeypatch.setattr("docbundler.bundler.bundler_for_builder", factory)

        builder = Builder("google-cloud", "0.45.0", config=config, manifest=manifest)
        builder.build()

        factory.assert_called_once_with(builder)
        bundler.bundle.assert_called_once_with()

    def test_package_does_not_bundle(self, repo, config, manifest, monkeypatch):
        write_package(repo, "bigtable", {"index.js": BIGTABLE_INDEX})
        factory = MagicMock()
        monkeypatch.setattr("docbundler.bundler.bundler_for_builder", factory)

        Builder("bigtable", "0.4.1", config=config, manifest=manifest).build()

        factory.assert_not_called()


class TestUpdateManifest:
    def test_saves_version(self, config, manifest):
        builder = Builder("bigtable", "0.4.1", config=config, manifest=manifest)
        builder.update_manifest()
        builder.update_manifest()

        data = _read(config.manifest_path)
        assert data["modules"] == [{
            "id": "bigtable",
            "name": "@google-cloud/bigtable",
            "defaultService": "bigtable",
            "versions": ["0.4.1", "master"],
        }]
