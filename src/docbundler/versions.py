"""Semantic-version helpers with npm range semantics."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

import semantic_version

from docbundler.models import ManifestError

logger = logging.getLogger(__name__)


def is_valid(version: str) -> bool:
    """True if ``version`` is a strict semver string (``master`` is not)."""
    return bool(semantic_version.validate(str(version)))


def valid_versions(versions: Iterable[str]) -> List[str]:
    return [v for v in versions if is_valid(v)]


def max_satisfying(versions: Iterable[str], version_range: str) -> Optional[str]:
    """Return the highest version in ``versions`` matching an npm range.

    Invalid candidates are ignored. Returns None when nothing matches.

    Raises:
        ManifestError: If ``version_range`` is not a valid npm range.
    """
    try:
        spec = semantic_version.NpmSpec(version_range)
    except ValueError as e:
        raise ManifestError(f"Invalid version range {version_range!r}: {e}") from e

    candidates = {semantic_version.Version(v): v for v in valid_versions(versions)}
    best = spec.select(candidates.keys())
    if best is None:
        logger.debug("No version of %s satisfies %s", sorted(candidates.values()), version_range)
        return None
    return candidates[best]
