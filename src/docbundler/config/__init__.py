"""Configuration for docbundler.

Values are layered: built-in defaults, then ``.docbundler.yaml`` at the
repository root, then ``DOCBUNDLER_*`` environment variables.
"""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from docbundler.config import defaults
from docbundler.config.paths import get_repo_root
from docbundler.models import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    "packages": {
        "root": defaults.PACKAGES_ROOT,
        "umbrella": defaults.UMBRELLA_PACKAGE,
        "scope": defaults.PACKAGE_SCOPE,
        "source_glob": defaults.SOURCE_GLOB,
        "ignore": list(defaults.IGNORE),
    },
    "docs": {
        "root": defaults.DOCS_ROOT,
        "manifest": defaults.MANIFEST_FILE,
        "markdown": defaults.MARKDOWN_GLOB,
        "types_dict": defaults.TYPES_DICT,
        "toc": defaults.TOC,
        "default_version": defaults.DEFAULT_VERSION,
    },
    "git": {
        "submodule_branch": defaults.SUBMODULE_BRANCH,
        "submodule_name": defaults.SUBMODULE_NAME,
        "timeout": defaults.GIT_TIMEOUT_SECONDS,
    },
}

# env var -> (section, key, cast)
_ENV_OVERRIDES = {
    "DOCBUNDLER_UMBRELLA": ("packages", "umbrella", str),
    "DOCBUNDLER_SCOPE": ("packages", "scope", str),
    "DOCBUNDLER_DEFAULT_VERSION": ("docs", "default_version", str),
    "DOCBUNDLER_GIT_TIMEOUT": ("git", "timeout", int),
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Merge known sections/keys of ``override`` into ``base`` in place."""
    for section, values in override.items():
        if section not in base or not isinstance(values, dict):
            logger.debug("Ignoring unknown config section: %s", section)
            continue
        for key, value in values.items():
            if key not in base[section]:
                logger.debug("Ignoring unknown config key: %s.%s", section, key)
                continue
            base[section][key] = value


class DocsConfig:
    """Configuration manager for docbundler.

    Reads an optional YAML file and environment overrides on top of the
    defaults in ``docbundler.config.defaults``.
    """

    def __init__(self, repo_root: Optional[Path] = None, load_files: bool = True):
        self.repo_root = Path(repo_root).resolve() if repo_root else get_repo_root()
        self._raw: Dict[str, Dict[str, Any]] = copy.deepcopy(DEFAULT_CONFIG)
        if load_files:
            self._load_user_config()
            self._load_env()

    def _load_user_config(self) -> None:
        config_path = self.repo_root / defaults.CONFIG_FILE
        if not config_path.exists():
            return
        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Could not read {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{config_path} must contain a mapping")
        _merge(self._raw, data)
        logger.debug("Loaded config overrides from %s", config_path)

    def _load_env(self) -> None:
        for var, (section, key, cast) in _ENV_OVERRIDES.items():
            value = os.environ.get(var)
            if value is None or value == "":
                continue
            try:
                self._raw[section][key] = cast(value)
            except ValueError as e:
                raise ConfigError(f"Invalid value for {var}: {value!r}") from e

    def with_root(self, repo_root: Path) -> "DocsConfig":
        """Return a copy of this config rooted at another checkout."""
        clone = copy.copy(self)
        clone.repo_root = Path(repo_root).resolve()
        clone._raw = copy.deepcopy(self._raw)
        return clone

    def get(self, key: str, fallback: Any = None) -> Any:
        """Look up a dotted key such as ``docs.default_version``."""
        val: Any = self._raw
        for part in key.split("."):
            if not isinstance(val, dict) or part not in val:
                return fallback
            val = val[part]
        return val

    # --- Type-safe property accessors ---

    @property
    def packages_root(self) -> Path:
        return self.repo_root / self._raw["packages"]["root"]

    @property
    def umbrella_package(self) -> str:
        return self._raw["packages"]["umbrella"]

    @property
    def package_scope(self) -> str:
        return self._raw["packages"]["scope"]

    @property
    def source_glob(self) -> str:
        return self._raw["packages"]["source_glob"]

    @property
    def ignore(self) -> List[str]:
        return list(self._raw["packages"]["ignore"])

    @property
    def docs_root(self) -> Path:
        return self.repo_root / self._raw["docs"]["root"]

    @property
    def manifest_path(self) -> Path:
        return self.repo_root / self._raw["docs"]["manifest"]

    @property
    def markdown_glob(self) -> str:
        return self._raw["docs"]["markdown"]

    @property
    def types_dict(self) -> str:
        return self._raw["docs"]["types_dict"]

    @property
    def toc(self) -> str:
        return self._raw["docs"]["toc"]

    @property
    def default_version(self) -> str:
        return str(self._raw["docs"]["default_version"])

    @property
    def submodule_branch(self) -> str:
        return self._raw["git"]["submodule_branch"]

    @property
    def submodule_name(self) -> str:
        return self._raw["git"]["submodule_name"]

    @property
    def git_timeout(self) -> int:
        return int(self._raw["git"]["timeout"])


__all__ = ["DEFAULT_CONFIG", "DocsConfig"]
