"""Manifest store for docs/manifest.json.

The manifest lists every documented module and the versions it has docs
for. It is loaded once per invocation, mutated only through ``update`` and
written back wholesale with ``save``.

Execution Traces:
- Happy: Module found, version prepended if new, file rewritten
- Failure: Unreadable manifest, ManifestError raised
- Edge: Module missing, entry synthesized and sorted after the umbrella
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from docbundler.config import defaults
from docbundler.models import ManifestError, ModuleEntry
from docbundler.persistence import atomic_write_with_fsync
from docbundler.versions import valid_versions

logger = logging.getLogger(__name__)


class Manifest:
    """In-memory view of docs/manifest.json."""

    def __init__(
        self,
        path: Path,
        modules: Optional[List[ModuleEntry]] = None,
        extra: Optional[Dict[str, Any]] = None,
        umbrella: str = defaults.UMBRELLA_PACKAGE,
        scope: str = defaults.PACKAGE_SCOPE,
        default_version: str = defaults.DEFAULT_VERSION,
    ):
        self.path = Path(path)
        self.modules: List[ModuleEntry] = list(modules or [])
        self.extra: Dict[str, Any] = dict(extra or {})
        self.umbrella = umbrella
        self.scope = scope
        self.default_version = default_version

    @classmethod
    def load(cls, path: Path, **kwargs: Any) -> "Manifest":
        """Read a manifest file. A missing file yields an empty manifest."""
        path = Path(path)
        if not path.exists():
            logger.info("No manifest at %s, starting empty", path)
            return cls(path, **kwargs)

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ManifestError(f"Could not read manifest {path}: {e}") from e

        if isinstance(data, list):
            data = {"modules": data}
        if not isinstance(data, dict):
            raise ManifestError(f"Manifest {path} must be an object or a list")

        try:
            modules = [ModuleEntry.from_dict(m) for m in data.get("modules", [])]
        except (KeyError, TypeError) as e:
            raise ManifestError(f"Malformed module record in {path}: {e}") from e

        extra = {k: v for k, v in data.items() if k != "modules"}
        return cls(path, modules=modules, extra=extra, **kwargs)

    @classmethod
    def from_config(cls, config: Any) -> "Manifest":
        return cls.load(
            config.manifest_path,
            umbrella=config.umbrella_package,
            scope=config.package_scope,
            default_version=config.default_version,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data["modules"] = [m.to_dict() for m in self.modules]
        return data

    def save(self) -> None:
        atomic_write_with_fsync(self.path, json.dumps(self.to_dict(), indent=2))
        logger.debug("Wrote manifest %s", self.path)

    def find(self, module_id: str) -> Optional[ModuleEntry]:
        for module in self.modules:
            if module.id == module_id:
                return module
        return None

    def require(self, module_id: str) -> ModuleEntry:
        module = self.find(module_id)
        if module is None:
            raise ManifestError(f"Module {module_id!r} is not in the manifest")
        return module

    def versions(self, module_id: str) -> List[str]:
        """Recorded semver versions of a module, manifest order."""
        return valid_versions(self.require(module_id).versions)

    def _sort_key(self, module: ModuleEntry):
        return (module.id != self.umbrella, module.id)

    def update(self, module_id: str, version: str) -> ModuleEntry:
        """Record ``version`` for ``module_id``, creating the module if needed.

        Calling this twice with the same pair is a no-op the second time.
        """
        module = self.find(module_id)

        if module is None:
            name = module_id if module_id == self.umbrella else self.scope + module_id
            module = ModuleEntry(
                id=module_id,
                name=name,
                default_service=module_id,
                versions=[self.default_version],
            )
            self.modules.append(module)
            self.modules.sort(key=self._sort_key)
            logger.info("Added %s to the manifest", module_id)

        if version not in module.versions:
            module.versions.insert(0, version)
            logger.info("Recorded %s %s in the manifest", module_id, version)

        return module
