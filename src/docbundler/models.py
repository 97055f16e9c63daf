"""Data classes and errors shared across docbundler."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class DocsError(RuntimeError):
    """Base class for every failure that aborts a docs build."""


class ConfigError(DocsError):
    """Raised when configuration cannot be loaded."""


class ParseError(DocsError):
    """Raised when a source file's doc comments cannot be parsed."""


class DocsBuildError(DocsError):
    """Raised when a package file fails to produce documentation."""

    def __init__(self, file: str, reason: str) -> None:
        super().__init__(f"Unable to generate docs for file: {file}. Reason: {reason}")
        self.file = file
        self.reason = reason


class ManifestError(DocsError):
    """Raised when the manifest lacks a module or cannot resolve a version."""


class PropagationError(DocsError):
    """Raised when a build cannot be propagated into umbrella bundles."""


class GitError(DocsError):
    """Raised when a git command exits non-zero."""

    def __init__(self, args: List[str], returncode: int, stderr: str = "") -> None:
        command = " ".join(["git"] + list(args))
        detail = stderr.strip() or f"exit code {returncode}"
        super().__init__(f"{command} failed - {detail}")
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


@dataclass
class ModuleEntry:
    """One module record of docs/manifest.json."""

    id: str
    name: str
    default_service: str
    versions: List[str] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModuleEntry":
        known = {"id", "name", "defaultService", "versions"}
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            default_service=data.get("defaultService", data["id"]),
            versions=list(data.get("versions", [])),
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "defaultService": self.default_service,
        }
        data.update(self.extra)
        data["versions"] = list(self.versions)
        return data


@dataclass
class Dependency:
    """A scoped dependency of the umbrella package.

    ``version`` holds the declared range as read from package.json, or the
    resolved version once matched against the manifest.
    """

    name: str
    version: Optional[str]
