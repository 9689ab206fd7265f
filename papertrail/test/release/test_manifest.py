from __future__ import annotations

from pathlib import Path

from papertrail.core.result import Err, Ok
from papertrail.release.manifest import (
    DEFAULT_COMPONENT_ORDER,
    DEFAULT_TYPE_ORDER,
    ComponentOrderFields,
    Manifest,
    PRPolicy,
    parse_manifest_text,
    resolve_manifest,
)
from papertrail.release.model import BumpLevel


def _resolve(data: dict[str, object]) -> Manifest:
    result = resolve_manifest(data)
    assert isinstance(result, Ok), result
    return result.value


class TestZeroConfig:
    def test_no_document_uses_defaults(self) -> None:
        result = resolve_manifest(None)
        assert isinstance(result, Ok)
        m = result.value
        assert m.type_order == DEFAULT_TYPE_ORDER
        assert m.component_order == DEFAULT_COMPONENT_ORDER
        assert dict(m.type_aliases) == {}
        assert dict(m.bump_rules) == {}
        assert m.strict_components is False
        assert m.pr_policy == PRPolicy()

    def test_empty_yaml_document_uses_defaults(self) -> None:
        result = parse_manifest_text("")
        assert isinstance(result, Ok)
        assert result.value == Manifest()


class TestTypeTables:
    def test_aliases_are_trimmed_and_upper_cased(self) -> None:
        m = _resolve({"types": {"aliases": {" feature ": "minor change", "": "X", "Y": "  "}}})
        assert dict(m.type_aliases) == {"FEATURE": "MINOR CHANGE"}

    def test_type_order_is_alias_resolved_and_deduplicated(self) -> None:
        m = _resolve(
            {
                "types": {
                    "order": [" breaking change", "Feature", "MINOR CHANGE", "", "patch", "PATCH"],
                    "aliases": {"feature": "MINOR CHANGE"},
                }
            }
        )
        assert m.type_order == ("BREAKING CHANGE", "MINOR CHANGE", "PATCH")

    def test_empty_type_order_falls_back_to_defaults(self) -> None:
        m = _resolve({"types": {"order": []}})
        assert m.type_order == DEFAULT_TYPE_ORDER

    def test_canonical_type_resolves_one_hop(self) -> None:
        m = _resolve({"types": {"aliases": {"CI": "PATCH", "FIX": "CI"}}})
        assert m.canonical_type(" ci ") == "PATCH"
        assert m.canonical_type("fix") == "CI"
        assert m.canonical_type("docs update") == "DOCS UPDATE"

    def test_unknown_type_index_sorts_last(self) -> None:
        m = _resolve({"types": {"order": ["A", "B"]}})
        assert m.type_index("A") == 0
        assert m.type_index("B") == 1
        assert m.type_index("Z") == 3


class TestComponentOrder:
    def test_primary_wins_over_legacy(self) -> None:
        m = _resolve({"changelog": {"components": ["API"], "components_order": ["Legacy"]}})
        assert m.component_order == ("API",)

    def test_legacy_used_when_primary_empty(self) -> None:
        m = _resolve({"changelog": {"components": [], "components_order": [" Web ", "Web", "CLI"]}})
        assert m.component_order == ("Web", "CLI")

    def test_components_are_not_case_normalized(self) -> None:
        m = _resolve({"changelog": {"components": ["GitHub Actions", "cli"]}})
        assert m.component_order == ("GitHub Actions", "cli")

    def test_fields_resolution_falls_back_to_defaults(self) -> None:
        assert ComponentOrderFields().resolve() == DEFAULT_COMPONENT_ORDER
        assert ComponentOrderFields(primary=("  ",), legacy=()).resolve() == DEFAULT_COMPONENT_ORDER

    def test_strict_components_flag(self) -> None:
        m = _resolve({"changelog": {"strict_components": True}})
        assert m.strict_components is True


class TestBumpRules:
    def test_keys_are_canonicalized_except_wildcard(self) -> None:
        m = _resolve(
            {
                "versioning": {"rules": {"feature": "Minor", "breaking change": " MAJOR ", "*": "patch"}},
                "types": {"aliases": {"FEATURE": "NEW FEATURE"}},
            }
        )
        assert dict(m.bump_rules) == {
            "NEW FEATURE": BumpLevel.MINOR,
            "BREAKING CHANGE": BumpLevel.MAJOR,
            "*": BumpLevel.PATCH,
        }

    def test_invalid_rule_value_is_config_error(self) -> None:
        result = resolve_manifest({"versioning": {"rules": {"PATCH": "tiny"}}}, path=Path("cfg.yml"))
        assert isinstance(result, Err)
        assert result.error.key == "versioning.rules.PATCH"
        assert "tiny" in result.error.message
        assert "major|minor|patch" in result.error.message
        assert result.error.path == Path("cfg.yml")

    def test_invalid_rule_value_reported_even_without_types(self) -> None:
        result = resolve_manifest({"versioning": {"rules": {"*": "huge"}}})
        assert isinstance(result, Err)


class TestMalformedDocument:
    def test_section_must_be_mapping(self) -> None:
        result = resolve_manifest({"types": ["A"]})
        assert isinstance(result, Err)
        assert result.error.key == "types"

    def test_order_must_be_list(self) -> None:
        result = resolve_manifest({"types": {"order": "A, B"}})
        assert isinstance(result, Err)
        assert result.error.key == "types.order"

    def test_strict_components_must_be_bool(self) -> None:
        result = resolve_manifest({"changelog": {"strict_components": "yes please"}})
        assert isinstance(result, Err)
        assert result.error.key == "changelog.strict_components"

    def test_invalid_yaml(self) -> None:
        result = parse_manifest_text("types: [unclosed", path=Path("m.yml"))
        assert isinstance(result, Err)
        assert "invalid manifest YAML" in result.error.message

    def test_root_must_be_mapping(self) -> None:
        result = parse_manifest_text("- a\n- b\n")
        assert isinstance(result, Err)
        assert "mapping" in result.error.message


class TestPRPolicy:
    def test_defaults_when_section_missing(self) -> None:
        m = _resolve({"types": {"order": ["PATCH"]}})
        assert m.pr_policy == PRPolicy()

    def test_configured_policy(self) -> None:
        text = """
pr_policy:
  title_validation:
    enabled: true
    allowed_types: [Feat, fix]
    type_aliases: {feature: feat}
  fragment_requirement:
    opt_out_label: skip-changelog
"""
        result = parse_manifest_text(text)
        assert isinstance(result, Ok)
        policy = result.value.pr_policy
        assert policy.title_enabled is True
        assert policy.allowed_types == ("feat", "fix")
        assert dict(policy.type_aliases) == {"feature": "feat"}
        assert policy.opt_out_label == "skip-changelog"


def test_full_document_round_trip_through_yaml() -> None:
    text = """
versioning:
  rules:
    BREAKING CHANGE: major
    feature: minor
changelog:
  components: [CLI, API]
  strict_components: true
types:
  order: [BREAKING CHANGE, MINOR CHANGE, PATCH]
  aliases:
    FEATURE: MINOR CHANGE
"""
    result = parse_manifest_text(text, path=Path("papertrail.config.yml"))
    assert isinstance(result, Ok)
    m = result.value
    assert m.source == Path("papertrail.config.yml")
    assert m.type_order == ("BREAKING CHANGE", "MINOR CHANGE", "PATCH")
    assert m.component_order == ("CLI", "API")
    assert m.bump_rules["MINOR CHANGE"] == BumpLevel.MINOR
