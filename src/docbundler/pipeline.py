"""Top-level build operations.

build(name, version)
    checkout tag -> Builder.build -> restore checkout -> update manifest
    -> propagate into umbrella releases (dependency releases only)
"""

from __future__ import annotations

import logging
from typing import List, Optional

from docbundler.builder import Builder, is_ignored
from docbundler.bundler import Bundler
from docbundler.config import DocsConfig
from docbundler.git import GitRepo
from docbundler.manifest import Manifest

logger = logging.getLogger(__name__)


def build(
    name: str,
    version: Optional[str] = None,
    config: Optional[DocsConfig] = None,
    manifest: Optional[Manifest] = None,
    git: Optional[GitRepo] = None,
) -> Builder:
    """Build docs for one package, e.g. ``build("bigtable", "0.2.0")``."""
    config = config or DocsConfig()
    manifest = manifest or Manifest.from_config(config)
    git = git or GitRepo(config.repo_root, timeout=config.git_timeout)

    builder = Builder(name, version, config=config, manifest=manifest, git=git)

    with git.checked_out(builder.get_tag_name()):
        builder.build()
    builder.update_manifest()

    if not builder.is_umbrella and not builder.is_master:
        updated = Bundler.update_dep(builder)
        if updated:
            logger.info("Propagated %s to umbrella %s", builder.get_tag_name(), ", ".join(updated))

    return builder


def discover_packages(config: Optional[DocsConfig] = None) -> List[str]:
    """Names of every package directory not matched by the ignore globs."""
    config = config or DocsConfig()
    root = config.packages_root
    if not root.exists():
        return []
    return sorted(
        p.name for p in root.iterdir()
        if p.is_dir() and not is_ignored(p.name, config.ignore)
    )


def build_all(config: Optional[DocsConfig] = None) -> List[Builder]:
    """Build the master docs of every package."""
    config = config or DocsConfig()
    manifest = Manifest.from_config(config)
    git = GitRepo(config.repo_root, timeout=config.git_timeout)

    return [
        build(name, config.default_version, config=config, manifest=manifest, git=git)
        for name in discover_packages(config)
    ]
