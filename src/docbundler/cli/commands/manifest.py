#!/usr/bin/env python
"""
Manifest command - Show documented modules and versions.
"""

from __future__ import annotations

from typing import Optional

from docbundler.cli.formatting.output import ConsoleOutput
from docbundler.config import DocsConfig
from docbundler.manifest import Manifest


def run(config: Optional[DocsConfig] = None, json_output: bool = False) -> int:
    """Run the manifest command."""
    console = ConsoleOutput()
    config = config or DocsConfig()
    manifest = Manifest.from_config(config)

    if json_output:
        console.print_json(manifest.to_dict())
        return 0

    if not manifest.modules:
        console.print_warning(f"No modules recorded in {manifest.path}")
        return 0

    console.print_table(
        f"Manifest ({manifest.path})",
        ["Module", "Package", "Versions"],
        [(m.id, m.name, ", ".join(m.versions)) for m in manifest.modules],
    )
    return 0
