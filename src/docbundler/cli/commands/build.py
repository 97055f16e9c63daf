#!/usr/bin/env python
"""
Build command - Generate docs for one package or for all packages.
"""

from __future__ import annotations

from typing import Optional

from docbundler import pipeline
from docbundler.cli.formatting.output import ConsoleOutput
from docbundler.config import DocsConfig


def run(name: str, version: Optional[str] = None, config: Optional[DocsConfig] = None) -> int:
    """Run the build command."""
    console = ConsoleOutput()
    config = config or DocsConfig()

    console.print_dim(f"Building docs for: {name} {version or config.default_version}")
    builder = pipeline.build(name, version, config=config)

    console.print_success(f"{builder.get_tag_name()} -> {builder.dir}")
    return 0


def run_all(config: Optional[DocsConfig] = None) -> int:
    """Run the build-all command."""
    console = ConsoleOutput()
    config = config or DocsConfig()

    names = pipeline.discover_packages(config)
    if not names:
        console.print_warning(f"No packages found under {config.packages_root}")
        return 1

    builders = pipeline.build_all(config)
    for builder in builders:
        console.print(f"  [green]✓[/green] {builder.name}")
    console.print_success(f"Built {len(builders)} packages")
    return 0
