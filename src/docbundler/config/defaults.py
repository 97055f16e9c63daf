"""Default configuration values for docbundler.

This module centralizes the hard-coded paths, file names and package
conventions the builder relies on. Modules should read these through
``DocsConfig`` so a repository can override them.

Usage:
    from docbundler.config.defaults import (
        DEFAULT_VERSION,
        UMBRELLA_PACKAGE,
        TYPES_DICT,
    )
"""

from __future__ import annotations

# =============================================================================
# Package Conventions
# =============================================================================

# Pseudo-version for builds of the current branch head
DEFAULT_VERSION = "master"

# The package that bundles every other package's docs
UMBRELLA_PACKAGE = "google-cloud"

# npm scope of the umbrella's dependencies
PACKAGE_SCOPE = "@google-cloud/"


# =============================================================================
# Output Files
# =============================================================================

TYPES_DICT = "types.json"
TOC = "toc.json"


# =============================================================================
# Repository Layout (relative to the repo root)
# =============================================================================

DOCS_ROOT = "docs/json"
PACKAGES_ROOT = "packages"
MANIFEST_FILE = "docs/manifest.json"
MARKDOWN_GLOB = "docs/*.md"

# Relative to packages/<name>/
SOURCE_GLOB = "src/*.js"

# Globs (relative to packages/) skipped by discovery and by builds
IGNORE = [
    "common",
    "common-grpc",
    "*/src/v[0-9]*",
    "*/src/*_client.js",
]

# Optional per-repository overrides
CONFIG_FILE = ".docbundler.yaml"


# =============================================================================
# Source Control
# =============================================================================

SUBMODULE_BRANCH = "master"
SUBMODULE_NAME = "bundler"
GIT_TIMEOUT_SECONDS = 120
