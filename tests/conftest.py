"""Pytest configuration for docbundler tests."""
import json
import shutil
import sys
from contextlib import contextmanager
from pathlib import Path

import pytest

# Add src to path for the tests - conftest is in tests/, so parent.parent is project root
project_root = Path(__file__).resolve().parent.parent
src_path = project_root / "src"

# Insert at the very beginning to override any other paths
sys.path.insert(0, str(src_path))

from docbundler.config import DocsConfig  # noqa: E402
from docbundler.manifest import Manifest  # noqa: E402


BIGTABLE_INDEX = """/*!
 * Copyright 2016 Google Inc. All Rights Reserved.
 */

'use strict';

/**
 * Interact with Cloud Bigtable.
 *
 * @constructor
 * @alias module:bigtable
 *
 * @resource [Creating a Cluster]{@link https://cloud.google.com/bigtable/docs/creating-cluster}
 *
 * @param {object=} options - Configuration object.
 *
 * @example
 * var bigtable = require('@google-cloud/bigtable')();
 */
function Bigtable(options) {
  this.options = options;
}

/**
 * Get a reference to a table.
 *
 * @param {string} name - The table name.
 * @return {Table}
 *
 * @example
 * var table = bigtable.table('prezzy');
 */
Bigtable.prototype.table = function(name) {
  return new Table(this, name);
};

/**
 * @private
 */
Bigtable.prototype.request_ = function() {};

module.exports = Bigtable;
"""

BIGTABLE_TABLE = """/**
 * A Table object.
 *
 * @constructor
 * @alias module:bigtable/table
 */
function Table(bigtable, name) {}

/**
 * Delete the table.
 *
 * @param {function=} callback - The callback function.
 * @param {?error} callback.err - An error returned while making this request.
 * @throws {Error} If the table was never created.
 */
Table.prototype.delete = function(callback) {};

/**
 * Format a table name.
 *
 * @param {string} name - Short name.
 * @return {string}
 */
Table.formatName_ = function(name) {};
"""


def write_package(root: Path, name: str, files: dict) -> Path:
    """Write ``packages/<name>/src/<file>`` for each entry of ``files``."""
    src = root / "packages" / name / "src"
    src.mkdir(parents=True, exist_ok=True)
    for file, contents in files.items():
        (src / file).write_text(contents, encoding="utf-8")
    return src.parent


def write_umbrella_deps(root: Path, dependencies: dict) -> Path:
    """Write packages/google-cloud/package.json declaring ``dependencies``."""
    package_dir = root / "packages" / "google-cloud"
    package_dir.mkdir(parents=True, exist_ok=True)
    path = package_dir / "package.json"
    path.write_text(
        json.dumps({"name": "google-cloud", "dependencies": dependencies}),
        encoding="utf-8",
    )
    return path


def write_manifest(root: Path, modules: list) -> Path:
    path = root / "docs" / "manifest.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"lang": "nodejs", "modules": modules}), encoding="utf-8")
    return path


class FakeSubmodule:
    def __init__(self, git, name, cwd):
        self.git = git
        self.name = name
        self.cwd = cwd

    def checkout(self, ref):
        self.git.history.append(f"{self.name}:{ref}")
        self.git.apply(ref, self.cwd)


class FakeGit:
    """Stands in for GitRepo. ``tags`` maps a ref to a callable that lays
    out the tree for that ref under the directory it is given."""

    def __init__(self, root, tags=None):
        self.root = Path(root)
        self.tags = tags or {}
        self.history = []
        self.current = "master"
        self.deinited = []

    def apply(self, ref, cwd):
        if ref in self.tags:
            self.tags[ref](Path(cwd))

    def current_ref(self):
        return self.current

    def checkout(self, ref):
        self.history.append(ref)
        self.apply(ref, self.root)
        self.current = ref

    @contextmanager
    def checked_out(self, ref):
        previous = self.current
        self.checkout(ref)
        try:
            yield ref
        finally:
            self.checkout(previous)

    @contextmanager
    def isolated(self, branch, name):
        path = self.root / name
        path.mkdir(parents=True, exist_ok=True)
        submodule = FakeSubmodule(self, name, path)
        try:
            yield submodule
        finally:
            shutil.rmtree(path)
            self.deinited.append(name)


@pytest.fixture
def repo(tmp_path):
    """An empty monorepo checkout with a root-level README."""
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "README.md").write_text("# Docs\n", encoding="utf-8")
    (tmp_path / "packages").mkdir()
    return tmp_path


@pytest.fixture
def config(repo, monkeypatch):
    for var in ("DOCBUNDLER_UMBRELLA", "DOCBUNDLER_SCOPE",
                "DOCBUNDLER_DEFAULT_VERSION", "DOCBUNDLER_GIT_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)
    return DocsConfig(repo)


@pytest.fixture
def manifest(config):
    return Manifest.from_config(config)
