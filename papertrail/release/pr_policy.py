"""Pull request title convention: `<type>(<scope>): <title>`, scope optional."""

from __future__ import annotations

from papertrail.core.result import Err, Ok, Result
from papertrail.release.errors import PRTitleError
from papertrail.release.manifest import PRPolicy

__all__ = ["parse_pr_type", "validate_pr_title"]

_FORMAT_MESSAGE = "PR title must match: <type>(<scope>): <title> (scope optional)"


def _error(title: str, message: str) -> Err[PRTitleError]:
    return Err(PRTitleError(title=title, message=message))


def parse_pr_type(policy: PRPolicy, title: str) -> Result[str, PRTitleError]:
    """Return the canonical (lower-cased, alias-resolved) type of a PR title."""
    title = title.strip()
    if not title:
        return _error(title, "PR title is empty")

    head, sep, rest = title.partition(":")
    head = head.strip()
    if not sep or not head:
        return _error(title, _FORMAT_MESSAGE)

    typ = head.split("(", 1)[0].strip().lower()
    typ = policy.type_aliases.get(typ, typ).strip().lower()
    if typ not in policy.allowed_types:
        allowed = ", ".join(policy.allowed_types)
        return _error(title, f"invalid PR type {typ!r}; allowed types: {allowed}")

    if not rest.strip():
        return _error(title, "PR title must include a non-empty title after ':'")
    return Ok(typ)


def validate_pr_title(policy: PRPolicy, title: str) -> Result[None, PRTitleError]:
    """Check a PR title against the policy. Disabled policies accept anything."""
    if not policy.title_enabled:
        return Ok(None)
    parsed = parse_pr_type(policy, title)
    if isinstance(parsed, Err):
        return parsed
    return Ok(None)
