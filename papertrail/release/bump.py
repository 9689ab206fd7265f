"""Semantic-version bump calculation.

The bump level of a batch is the maximum of each fragment's level. A
fragment's level comes from, in order:

1. the rule for its canonical type,
2. the `*` rule,
3. when no rules are configured at all, the built-in heuristic
   (BREAKING CHANGE -> major, NEW FEATURE -> minor),
4. otherwise patch.

A type left out of a partial rule set is a patch release, not an error.
"""

from __future__ import annotations

from collections.abc import Iterable

from papertrail.core.result import Err, Ok, Result
from papertrail.release.errors import VersionError
from papertrail.release.manifest import WILDCARD_RULE, Manifest
from papertrail.release.model import BumpLevel
from papertrail.release.semver import ReleaseVersion, parse_version

__all__ = ["aggregate_bump", "bump_for_type", "legacy_bump", "next_version"]

_LEGACY_LEVELS = {
    "BREAKING CHANGE": BumpLevel.MAJOR,
    "NEW FEATURE": BumpLevel.MINOR,
}


def legacy_bump(canonical_type: str) -> BumpLevel:
    return _LEGACY_LEVELS.get(canonical_type.strip().upper(), BumpLevel.PATCH)


def bump_for_type(canonical_type: str, manifest: Manifest) -> BumpLevel:
    """Bump level contributed by one fragment type."""
    rules = manifest.bump_rules
    if not rules:
        return legacy_bump(canonical_type)

    level = rules.get(canonical_type)
    if level is not None:
        return level
    level = rules.get(WILDCARD_RULE)
    if level is not None:
        return level
    return BumpLevel.PATCH


def aggregate_bump(types: Iterable[str], manifest: Manifest) -> BumpLevel:
    """Maximum bump level over a batch. An empty batch is a patch release."""
    level = BumpLevel.PATCH
    for t in types:
        level = max(level, bump_for_type(t, manifest))
        if level == BumpLevel.MAJOR:
            break
    return level


def next_version(
    base: str,
    types: Iterable[str],
    manifest: Manifest,
) -> Result[ReleaseVersion, VersionError]:
    """Version following `base` for a batch with the given canonical types.

    Args:
        base: Current version tag, `vMAJOR.MINOR.PATCH`.
        types: Canonical type of every fragment in the batch.
        manifest: Resolved manifest holding the bump rules.

    Returns:
        Ok(next version), or Err(VersionError) when `base` is malformed.
    """
    parsed = parse_version(base)
    if isinstance(parsed, Err):
        return parsed
    return Ok(parsed.value.bump(aggregate_bump(types, manifest)))
