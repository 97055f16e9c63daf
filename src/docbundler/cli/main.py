#!/usr/bin/env python
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from docbundler import __version__
from docbundler.config.paths import get_repo_root


def _configure_logging(verbose: bool) -> None:
    # Only configure if no handlers exist (avoid overriding an embedding app)
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=logging.WARNING,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )
    logging.getLogger("docbundler").setLevel(logging.DEBUG if verbose else logging.INFO)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docbundler",
        description="docbundler - versioned JSON docs for a package monorepo",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    # Global options
    parser.add_argument("--root", type=Path, help="Repository root (default: current directory)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # --- Command Definitions ---
    build_p = subparsers.add_parser("build", help="Build docs for one package")
    build_p.add_argument("name", help="Package name, e.g. bigtable")
    build_p.add_argument("version", nargs="?", help="Version to build (default: master)")

    subparsers.add_parser("build-all", help="Build master docs for every package")

    manifest_p = subparsers.add_parser("manifest", help="Show documented modules and versions")
    manifest_p.add_argument("--json", action="store_true", help="Output JSON")

    tag_p = subparsers.add_parser("tag", help="Show the git tag a build checks out")
    tag_p.add_argument("name", help="Package name")
    tag_p.add_argument("version", nargs="?", help="Version")

    resolve_p = subparsers.add_parser("resolve", help="Resolve a semver range against the manifest")
    resolve_p.add_argument("name", help="Package name")
    resolve_p.add_argument("range", help="npm-style range, e.g. ^0.4.0")

    subparsers.add_parser("version", help="Show version")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    root = args.root.resolve() if args.root else get_repo_root()
    load_dotenv(root / ".env")
    _configure_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "version":
        print(f"docbundler v{__version__}")
        return 0

    # --- Logic ---
    from docbundler.cli.commands import build, manifest, versions
    from docbundler.cli.formatting.output import ConsoleOutput
    from docbundler.config import DocsConfig
    from docbundler.models import DocsError

    try:
        config = DocsConfig(root)
        if args.command == "build":
            return build.run(args.name, args.version, config=config)
        elif args.command == "build-all":
            return build.run_all(config=config)
        elif args.command == "manifest":
            return manifest.run(config=config, json_output=args.json)
        elif args.command == "tag":
            return versions.run_tag(args.name, args.version, config=config)
        elif args.command == "resolve":
            return versions.run_resolve(args.name, args.range, config=config)
    except (DocsError, OSError) as e:
        ConsoleOutput().print_error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
