"""Documentation builder for a single package version.

All files end up in ``docs/json/<name>/<version>``: one JSON document per
source file, plus the type dictionary and the table of contents.

Example:
    builder = Builder("vision", "0.5.0")
    builder.build()
"""

from __future__ import annotations

import fnmatch
import logging
import shutil
from pathlib import Path, PurePosixPath
from typing import Any, Dict, Iterable, List, Optional

from docbundler import parser
from docbundler.config import DocsConfig
from docbundler.git import GitRepo
from docbundler.manifest import Manifest
from docbundler.models import DocsBuildError, ParseError
from docbundler.persistence import read_json, write_json

logger = logging.getLogger(__name__)


def is_ignored(rel_path: str, patterns: Iterable[str]) -> bool:
    """True if ``rel_path`` or one of its parent directories matches a glob."""
    parts = PurePosixPath(rel_path).parts
    candidates = ["/".join(parts[: i + 1]) for i in range(len(parts))]
    return any(
        fnmatch.fnmatch(candidate, pattern)
        for pattern in patterns
        for candidate in candidates
    )


class Builder:
    """Builds the documentation JSON of one package at one version.

    Args:
        name: Name of the package to build docs for.
        version: Target version of the docs; defaults to the master
            pseudo-version.
        cwd: Checkout root to build from; defaults to the configured repo
            root.
    """

    def __init__(
        self,
        name: str,
        version: Optional[str] = None,
        cwd: Optional[Path] = None,
        *,
        config: Optional[DocsConfig] = None,
        manifest: Optional[Manifest] = None,
        git: Optional[GitRepo] = None,
    ):
        config = config or DocsConfig()
        self.config = config.with_root(cwd) if cwd is not None else config
        self.name = name
        self.version = version or self.config.default_version
        self.dir = self.config.docs_root / name / self.version
        self.is_umbrella = name == self.config.umbrella_package
        self.is_master = self.version == self.config.default_version
        self._manifest = manifest
        self.git = git or GitRepo(config.repo_root, timeout=config.git_timeout)

    def __repr__(self) -> str:
        return f"Builder(name={self.name!r}, version={self.version!r})"

    @property
    def manifest(self) -> Manifest:
        if self._manifest is None:
            self._manifest = Manifest.from_config(self.config)
        return self._manifest

    def get_tag_name(self) -> str:
        """Source-control tag of this release, e.g. ``bigtable-0.2.0``."""
        if self.is_master:
            return self.version
        if self.is_umbrella:
            return "v" + self.version
        return f"{self.name}-{self.version}"

    def source_files(self) -> List[str]:
        """Package sources relative to the packages root, ignores applied."""
        root = self.config.packages_root
        pattern = f"{self.name}/{self.config.source_glob}"
        files = []
        for path in sorted(root.glob(pattern)):
            rel = path.relative_to(root).as_posix()
            if is_ignored(rel, self.config.ignore):
                logger.debug("Skipping ignored file %s", rel)
                continue
            files.append(rel)
        return files

    def build(self) -> None:
        """Generate the docs of this package.

        Raises:
            DocsBuildError: If any source file fails to parse.
        """
        logger.info("Building docs for %s %s", self.name, self.version)
        self.dir.mkdir(parents=True, exist_ok=True)

        for markdown in sorted(self.config.repo_root.glob(self.config.markdown_glob)):
            shutil.copy(markdown, self.dir)

        docs = []
        for file in self.source_files():
            json = self.parse_file(file)
            output_file = PurePosixPath(file).stem + ".json"

            json["path"] = output_file
            self.write(output_file, json)
            docs.append(json)

        types = parser.create_types_dictionary(docs)
        toc = parser.create_toc(types)

        toc["tagName"] = self.get_tag_name()
        self.write(self.config.types_dict, types)
        self.write(self.config.toc, toc)
        logger.info("Wrote %d docs to %s", len(docs), self.dir)

        if self.is_umbrella:
            from docbundler.bundler import bundler_for_builder

            bundler_for_builder(self).bundle()

    def get_types(self) -> List[Dict[str, Any]]:
        return read_json(self.dir / self.config.types_dict)

    def parse_file(self, file: str) -> Dict[str, Any]:
        """Parse ``file`` (relative to the packages root).

        Raises:
            DocsBuildError: Naming the file, if parsing fails.
        """
        contents = (self.config.packages_root / file).read_text(encoding="utf-8")
        source_path = f"{self.config.get('packages.root')}/{file}"

        try:
            return parser.parse_file(source_path, contents)
        except ParseError as e:
            raise DocsBuildError(file, str(e)) from e

    def update_manifest(self) -> None:
        """Record this module/version in the manifest and save it."""
        self.manifest.update(self.name, self.version)
        self.manifest.save()

    def write(self, file: str, json: Any) -> None:
        write_json(self.dir / file, json)
