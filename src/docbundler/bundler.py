"""Umbrella documentation bundler.

The umbrella package's docs for a release include the docs of every scoped
dependency at the version that release resolves to. ``bundle`` builds a
whole umbrella release; ``update_dep`` pushes a freshly built dependency
version into every umbrella release that would resolve to it.

Execution Traces:
- Happy: Dependencies resolved, built in an isolated checkout, merged
- Failure: Dependency missing from the manifest, ManifestError raised
- Edge: Patch release of a dependency, copied into compatible bundles only
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from docbundler.builder import Builder
from docbundler.config import DocsConfig
from docbundler.git import GitRepo
from docbundler.manifest import Manifest
from docbundler.models import Dependency, PropagationError
from docbundler.parser import create_overview, create_toc
from docbundler.persistence import read_json
from docbundler.versions import max_satisfying, valid_versions

logger = logging.getLogger(__name__)


class Bundler:
    """Generates or updates the docs of one umbrella release."""

    def __init__(self, builder: Builder):
        self.builder = builder

    def __repr__(self) -> str:
        return f"Bundler(version={self.builder.version!r})"

    @property
    def config(self) -> DocsConfig:
        return self.builder.config

    def get_deps(self) -> List[Dependency]:
        """Scoped dependencies declared by the umbrella's package.json.

        Reads the file from the current checkout, scope stripped:
        ``{"@google-cloud/bigtable": "^0.4.0"}`` -> ``Dependency("bigtable", "^0.4.0")``
        """
        json_path = self.config.packages_root / self.config.umbrella_package / "package.json"
        contents = json.loads(json_path.read_text(encoding="utf-8"))
        dependencies = contents.get("dependencies") or {}
        scope = self.config.package_scope

        return [
            Dependency(name=dep[len(scope):], version=version)
            for dep, version in dependencies.items()
            if dep.startswith(scope)
        ]

    def resolve(self, dep: Dependency) -> Dependency:
        """Match a declared range against the versions in the manifest.

        When no recorded release satisfies the range the returned version is
        ``None``, which builds the dependency's default version.

        Raises:
            ManifestError: If the dependency is not in the manifest.
        """
        versions = self.builder.manifest.versions(dep.name)
        version = max_satisfying(versions, dep.version)
        if version is None:
            logger.warning(
                "No documented version of %s satisfies %s, using %s",
                dep.name,
                dep.version,
                self.config.default_version,
            )
        return Dependency(name=dep.name, version=version)

    def add(self, builder: Builder) -> None:
        """Copy ``builder``'s docs into this bundle under ``<builder.name>/``.

        Example:
            bundler = bundler_for_version("0.45.0")
            bundler.add(Builder("bigtable", "0.5.0"))
            # The 0.45.0 bundle now contains the bigtable-0.5.0 docs
        """
        output_folder = self.builder.dir / builder.name
        output_folder.mkdir(parents=True, exist_ok=True)

        skip = {builder.config.types_dict, builder.config.toc}
        count = 0
        for file in sorted(builder.dir.glob("*.json")):
            if file.name in skip:
                continue
            doc: Dict[str, Any] = read_json(file)
            service = doc.get("parent") or doc.get("id")

            doc["overview"] = create_overview(
                service,
                True,
                umbrella=self.config.umbrella_package,
                scope=self.config.package_scope,
            )
            self.builder.write(f"{builder.name}/{file.name}", doc)
            count += 1

        logger.info("Added %d %s docs to %s", count, builder.name, self.builder.get_tag_name())

    def bundle(self) -> None:
        """Generate every dependency's docs for this umbrella release."""
        base_types = self.builder.get_types()
        deps = [self.resolve(dep) for dep in self.get_deps()]
        logger.info(
            "Bundling %s with %s",
            self.builder.get_tag_name(),
            ", ".join(
                f"{d.name}@{d.version or self.config.default_version}" for d in deps
            ) or "no dependencies",
        )

        dep_types: List[Dict[str, Any]] = []
        git = self.builder.git

        with git.isolated(self.config.submodule_branch, self.config.submodule_name) as submodule:
            for dep in deps:
                builder = Builder(
                    dep.name,
                    dep.version,
                    submodule.cwd,
                    config=self.config,
                    manifest=self.builder.manifest,
                    git=git,
                )

                submodule.checkout(builder.get_tag_name())
                builder.build()
                self.add(builder)

                for entry in builder.get_types():
                    entry["contents"] = f"{dep.name}/{entry['contents']}"
                    dep_types.append(entry)

        types = base_types + dep_types
        toc = create_toc(types, collapse=True)

        toc["tagName"] = self.builder.get_tag_name()
        self.builder.write(self.config.types_dict, types)
        self.builder.write(self.config.toc, toc)

    @staticmethod
    def update_dep(builder: Builder) -> List[str]:
        """Install a dependency release into every umbrella release using it.

        Walks the umbrella versions recorded in the manifest (newest first)
        and stops at the first one whose declared range no longer resolves
        to ``builder.version``.

        Example:
            # a patch release lands in umbrella releases that ask for ^0.4.0
            Bundler.update_dep(Builder("bigtable", "0.4.1"))

        Returns:
            The umbrella versions that received the docs.

        Raises:
            PropagationError: If ``builder`` is a master build.
        """
        if builder.is_master:
            raise PropagationError("Must supply valid version to update bundles with.")

        manifest = builder.manifest
        bundle_versions = valid_versions(manifest.require(builder.config.umbrella_package).versions)
        versions = manifest.versions(builder.name)
        updated: List[str] = []

        for bundle_version in bundle_versions:
            bundler = bundler_for_version(
                bundle_version,
                config=builder.config,
                manifest=manifest,
                git=builder.git,
            )
            with builder.git.checked_out(bundler.builder.get_tag_name()):
                dep = next((d for d in bundler.get_deps() if d.name == builder.name), None)

            if dep is None:
                logger.info("%s does not depend on %s, stopping", bundle_version, builder.name)
                break

            if max_satisfying(versions, dep.version) != builder.version:
                logger.info(
                    "%s pins %s %s, stopping", bundle_version, builder.name, dep.version
                )
                break

            bundler.add(builder)
            updated.append(bundle_version)

        return updated


def bundler_for_builder(builder: Builder) -> Bundler:
    return Bundler(builder)


def bundler_for_version(
    version: str,
    *,
    config: Optional[DocsConfig] = None,
    manifest: Optional[Manifest] = None,
    git: Optional[GitRepo] = None,
) -> Bundler:
    """Bundler for an umbrella release given only its version."""
    config = config or DocsConfig()
    builder = Builder(
        config.umbrella_package,
        version,
        config=config,
        manifest=manifest,
        git=git,
    )
    return Bundler(builder)
