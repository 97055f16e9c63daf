#!/usr/bin/env python
"""
Version commands - Tag names and semver resolution against the manifest.
"""

from __future__ import annotations

from typing import Optional

from docbundler.builder import Builder
from docbundler.cli.formatting.output import ConsoleOutput
from docbundler.config import DocsConfig
from docbundler.manifest import Manifest
from docbundler.versions import max_satisfying


def run_tag(name: str, version: Optional[str] = None, config: Optional[DocsConfig] = None) -> int:
    """Print the source-control tag a build of ``name`` checks out."""
    console = ConsoleOutput()
    builder = Builder(name, version, config=config or DocsConfig())
    console.print(builder.get_tag_name())
    return 0


def run_resolve(name: str, version_range: str, config: Optional[DocsConfig] = None) -> int:
    """Print the highest recorded version of ``name`` satisfying a range."""
    console = ConsoleOutput()
    manifest = Manifest.from_config(config or DocsConfig())

    version = max_satisfying(manifest.versions(name), version_range)
    if version is None:
        console.print_warning(f"No documented version of {name} satisfies {version_range}")
        return 1

    console.print(version)
    return 0
