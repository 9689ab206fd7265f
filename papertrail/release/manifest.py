"""Release manifest resolution.

The manifest is the YAML document that controls fragment validation, the
order of changelog headings and bullets, and the version bump policy:

    versioning:
      rules: {"BREAKING CHANGE": major, "NEW FEATURE": minor, "*": patch}
    changelog:
      components: [CLI, GitHub Actions]
      strict_components: true
    types:
      order: [BREAKING CHANGE, NEW FEATURE, BUGFIX]
      aliases: {FEATURE: NEW FEATURE}

`resolve_manifest` turns the parsed document into a `Manifest` whose tables
are already trimmed, case-normalized, deduplicated and alias-resolved, so the
rest of the engine never normalizes anything again.

Built-in defaults are only used for a missing document, or for an empty order
table. Alias and bump-rule tables are taken exactly as configured.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

import yaml

from papertrail.core.result import Err, Ok, Result
from papertrail.core.structured import StrDict, as_str_dict, get_bool, get_list, get_table, scalar_text
from papertrail.release.errors import ConfigError
from papertrail.release.model import BumpLevel

__all__ = [
    "DEFAULT_COMPONENT_ORDER",
    "DEFAULT_TYPE_ORDER",
    "WILDCARD_RULE",
    "ComponentOrderFields",
    "Manifest",
    "PRPolicy",
    "default_manifest",
    "parse_manifest_text",
    "resolve_manifest",
]

DEFAULT_COMPONENT_ORDER: tuple[str, ...] = (
    "CLI",
    "GitHub Actions",
)

DEFAULT_TYPE_ORDER: tuple[str, ...] = (
    "BREAKING CHANGE",
    "NEW FEATURE",
    "BUGFIX",
    "PATCH",
    "REFACTOR",
    "DOCS UPDATE",
)

WILDCARD_RULE = "*"

DEFAULT_PR_TYPES: tuple[str, ...] = ("feat", "fix", "docs", "chore", "refactor", "test")
DEFAULT_PR_TYPE_ALIASES: Mapping[str, str] = MappingProxyType({"feature": "feat", "bugfix": "fix"})
DEFAULT_OPT_OUT_LABEL = "no-changelog"


def _empty_aliases() -> Mapping[str, str]:
    return MappingProxyType({})


def _empty_rules() -> Mapping[str, BumpLevel]:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True)
class ComponentOrderFields:
    """`changelog.components` and its legacy spelling `changelog.components_order`."""

    primary: tuple[str, ...] = ()
    legacy: tuple[str, ...] = ()

    def resolve(self) -> tuple[str, ...]:
        """Primary if non-empty, else legacy, else the built-in order."""
        primary = _dedup(s.strip() for s in self.primary)
        if primary:
            return primary
        legacy = _dedup(s.strip() for s in self.legacy)
        if legacy:
            return legacy
        return DEFAULT_COMPONENT_ORDER


@dataclass(frozen=True, slots=True)
class PRPolicy:
    """Pull request title conventions (`pr_policy` section)."""

    title_enabled: bool = False
    allowed_types: tuple[str, ...] = DEFAULT_PR_TYPES
    type_aliases: Mapping[str, str] = DEFAULT_PR_TYPE_ALIASES
    opt_out_label: str = DEFAULT_OPT_OUT_LABEL


@dataclass(frozen=True, slots=True)
class Manifest:
    """Resolved release configuration. Immutable after resolution."""

    type_order: tuple[str, ...] = DEFAULT_TYPE_ORDER
    component_order: tuple[str, ...] = DEFAULT_COMPONENT_ORDER
    type_aliases: Mapping[str, str] = field(default_factory=_empty_aliases)
    strict_components: bool = False
    bump_rules: Mapping[str, BumpLevel] = field(default_factory=_empty_rules)
    pr_policy: PRPolicy = field(default_factory=PRPolicy)
    source: Path | None = None

    def canonical_type(self, raw: str) -> str:
        """Upper-case and resolve one alias hop."""
        t = raw.strip().upper()
        if not t:
            return t
        return self.type_aliases.get(t, t)

    def type_index(self, canonical: str) -> int:
        """Position in the type order; unknown types sort after every known one."""
        try:
            return self.type_order.index(canonical)
        except ValueError:
            return len(self.type_order) + 1

    def component_index(self, component: str) -> int:
        try:
            return self.component_order.index(component)
        except ValueError:
            return len(self.component_order) + 1


def default_manifest() -> Manifest:
    """Manifest for repositories without any release configuration."""
    return Manifest()


def _dedup(items: Iterable[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        if not item or item in seen:
            continue
        seen.add(item)
        out.append(item)
    return tuple(out)


def normalize_type_aliases(raw: Mapping[str, str]) -> dict[str, str]:
    out: dict[str, str] = {}
    for k, v in raw.items():
        kk = k.strip().upper()
        vv = v.strip().upper()
        if not kk or not vv:
            continue
        out[kk] = vv
    return out


def normalize_type_order(order: Iterable[str], aliases: Mapping[str, str]) -> tuple[str, ...]:
    resolved: list[str] = []
    for t in order:
        tt = t.strip().upper()
        if not tt:
            continue
        resolved.append(aliases.get(tt, tt))
    return _dedup(resolved)


def normalize_bump_rules(
    raw: Mapping[str, str],
    aliases: Mapping[str, str],
    *,
    path: Path | None = None,
) -> Result[dict[str, BumpLevel], ConfigError]:
    """Validate rule values and canonicalize rule keys.

    Values are checked before any key is touched so that a typo in a rule is
    reported even when the key itself would be dropped.
    """
    for k in sorted(raw):
        v = raw[k]
        if BumpLevel.parse(v) is None:
            return Err(
                ConfigError(
                    message=f'invalid versioning.rules["{k}"]="{v}" (expected major|minor|patch)',
                    key=f"versioning.rules.{k}",
                    path=path,
                )
            )

    out: dict[str, BumpLevel] = {}
    for k, v in raw.items():
        kk = k.strip()
        if not kk:
            continue
        if kk != WILDCARD_RULE:
            kk = kk.upper()
            kk = aliases.get(kk, kk)
        level = BumpLevel.parse(v)
        assert level is not None
        out[kk] = level
    return Ok(out)


class _Reader:
    """Typed access to the raw document, failing with the dotted key."""

    def __init__(self, path: Path | None) -> None:
        self._path = path

    def error(self, key: str, message: str) -> Err[ConfigError]:
        return Err(ConfigError(message=f"{key}: {message}", key=key, path=self._path))

    def table(self, data: StrDict, key: str, dotted: str) -> Result[StrDict, ConfigError]:
        value = data.get(key)
        if value is None:
            return Ok({})
        table = get_table(data, key)
        if table is None:
            return self.error(dotted, f"expected a mapping, got {type(value).__name__}")
        return Ok(table)

    def strings(self, data: StrDict, key: str, dotted: str) -> Result[tuple[str, ...], ConfigError]:
        value = data.get(key)
        if value is None:
            return Ok(())
        items = get_list(data, key)
        if items is None:
            return self.error(dotted, f"expected a list, got {type(value).__name__}")
        out: list[str] = []
        for i, item in enumerate(items):
            text = scalar_text(item)
            if text is None:
                return self.error(f"{dotted}[{i}]", "expected a string")
            out.append(text)
        return Ok(tuple(out))

    def mapping(self, data: StrDict, key: str, dotted: str) -> Result[dict[str, str], ConfigError]:
        value = data.get(key)
        if value is None:
            return Ok({})
        if not isinstance(value, dict):
            return self.error(dotted, f"expected a mapping, got {type(value).__name__}")
        out: dict[str, str] = {}
        for k, v in value.items():
            kk = scalar_text(k)
            vv = scalar_text(v)
            if kk is None or vv is None:
                return self.error(f"{dotted}.{k}", "expected a string value")
            out[kk] = vv
        return Ok(out)

    def flag(self, data: StrDict, key: str, dotted: str) -> Result[bool, ConfigError]:
        value = data.get(key)
        if value is None:
            return Ok(False)
        flag = get_bool(data, key)
        if flag is None:
            return self.error(dotted, f"expected true or false, got {value!r}")
        return Ok(flag)

    def text(self, data: StrDict, key: str, dotted: str) -> Result[str, ConfigError]:
        value = data.get(key)
        text = scalar_text(value)
        if text is None:
            return self.error(dotted, "expected a string")
        return Ok(text.strip())


def _resolve_pr_policy(data: StrDict, r: _Reader) -> Result[PRPolicy, ConfigError]:
    section = r.table(data, "pr_policy", "pr_policy")
    if isinstance(section, Err):
        return section
    title = r.table(section.value, "title_validation", "pr_policy.title_validation")
    if isinstance(title, Err):
        return title
    requirement = r.table(section.value, "fragment_requirement", "pr_policy.fragment_requirement")
    if isinstance(requirement, Err):
        return requirement

    enabled = r.flag(title.value, "enabled", "pr_policy.title_validation.enabled")
    if isinstance(enabled, Err):
        return enabled
    allowed = r.strings(title.value, "allowed_types", "pr_policy.title_validation.allowed_types")
    if isinstance(allowed, Err):
        return allowed
    aliases = r.mapping(title.value, "type_aliases", "pr_policy.title_validation.type_aliases")
    if isinstance(aliases, Err):
        return aliases
    label = r.text(requirement.value, "opt_out_label", "pr_policy.fragment_requirement.opt_out_label")
    if isinstance(label, Err):
        return label

    allowed_types = _dedup(t.strip().lower() for t in allowed.value) or DEFAULT_PR_TYPES
    type_aliases: Mapping[str, str] = DEFAULT_PR_TYPE_ALIASES
    if title.value.get("type_aliases") is not None:
        type_aliases = MappingProxyType(
            {k.strip().lower(): v.strip().lower() for k, v in aliases.value.items() if k.strip()}
        )
    return Ok(
        PRPolicy(
            title_enabled=enabled.value,
            allowed_types=allowed_types,
            type_aliases=type_aliases,
            opt_out_label=label.value or DEFAULT_OPT_OUT_LABEL,
        )
    )


def resolve_manifest(
    data: StrDict | None,
    *,
    path: Path | None = None,
) -> Result[Manifest, ConfigError]:
    """Normalize a parsed manifest document.

    Args:
        data: Parsed YAML root, or None when no manifest exists.
        path: Where the document came from, for error messages.

    Returns:
        Ok(Manifest) with every table normalized, or Err(ConfigError) naming
        the offending key.
    """
    if data is None:
        return Ok(default_manifest())

    r = _Reader(path)

    versioning = r.table(data, "versioning", "versioning")
    if isinstance(versioning, Err):
        return versioning
    changelog = r.table(data, "changelog", "changelog")
    if isinstance(changelog, Err):
        return changelog
    types = r.table(data, "types", "types")
    if isinstance(types, Err):
        return types

    raw_rules = r.mapping(versioning.value, "rules", "versioning.rules")
    if isinstance(raw_rules, Err):
        return raw_rules
    components = r.strings(changelog.value, "components", "changelog.components")
    if isinstance(components, Err):
        return components
    components_legacy = r.strings(changelog.value, "components_order", "changelog.components_order")
    if isinstance(components_legacy, Err):
        return components_legacy
    strict = r.flag(changelog.value, "strict_components", "changelog.strict_components")
    if isinstance(strict, Err):
        return strict
    raw_order = r.strings(types.value, "order", "types.order")
    if isinstance(raw_order, Err):
        return raw_order
    raw_aliases = r.mapping(types.value, "aliases", "types.aliases")
    if isinstance(raw_aliases, Err):
        return raw_aliases

    aliases = normalize_type_aliases(raw_aliases.value)
    rules = normalize_bump_rules(raw_rules.value, aliases, path=path)
    if isinstance(rules, Err):
        return rules

    pr_policy = _resolve_pr_policy(data, r)
    if isinstance(pr_policy, Err):
        return pr_policy

    type_order = normalize_type_order(raw_order.value, aliases) or DEFAULT_TYPE_ORDER
    component_order = ComponentOrderFields(
        primary=components.value,
        legacy=components_legacy.value,
    ).resolve()

    return Ok(
        Manifest(
            type_order=type_order,
            component_order=component_order,
            type_aliases=MappingProxyType(aliases),
            strict_components=strict.value,
            bump_rules=MappingProxyType(rules.value),
            pr_policy=pr_policy.value,
            source=path,
        )
    )


def parse_manifest_text(text: str, *, path: Path | None = None) -> Result[Manifest, ConfigError]:
    """Parse and resolve a manifest from YAML text. An empty document means no manifest."""
    try:
        parsed: object = yaml.safe_load(text)
    except yaml.YAMLError as e:
        return Err(ConfigError(message=f"invalid manifest YAML: {e}", path=path))

    if parsed is None:
        return resolve_manifest(None, path=path)

    data = as_str_dict(parsed)
    if data is None:
        return Err(
            ConfigError(
                message=f"manifest root must be a mapping, got {type(parsed).__name__}",
                path=path,
            )
        )
    return resolve_manifest(data, path=path)
