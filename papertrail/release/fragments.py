"""Fragment canonicalization and validation.

A fragment document is a small YAML mapping:

    component: CLI
    type: new feature
    summary: Add the `preview` command
    refs: ["#42"]

`canonicalize_fragment` is the single validator. Call sites that stop at the
first bad fragment and the batch check that reports every bad fragment both
go through it; only the caller decides whether to stop or collect.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

import yaml

from papertrail.core.result import Err, Ok, Result
from papertrail.core.structured import StrDict, as_obj_list, as_str_dict, scalar_text
from papertrail.release.errors import FragmentBatchError, FragmentError
from papertrail.release.manifest import Manifest
from papertrail.release.model import Fragment

__all__ = [
    "FRAGMENT_SUFFIXES",
    "RawFragment",
    "canonicalize_fragment",
    "collect_fragment_results",
    "parse_fragment_text",
]

FRAGMENT_SUFFIXES = (".yml", ".yaml")


@dataclass(frozen=True, slots=True)
class RawFragment:
    """Fields as written in the fragment document, before any normalization."""

    component: str = ""
    type: str = ""
    summary: str = ""
    refs: tuple[str, ...] = ()


def raw_fragment_from_document(data: StrDict) -> Result[RawFragment, FragmentError]:
    values: dict[str, str] = {}
    for key in ("component", "type", "summary"):
        text = scalar_text(data.get(key))
        if text is None:
            return Err(FragmentError(message=f"field {key} must be a string", field_name=key))
        values[key] = text

    refs: list[str] = []
    raw_refs = data.get("refs")
    if raw_refs is not None:
        items = as_obj_list(raw_refs)
        if items is None:
            return Err(FragmentError(message="field refs must be a list of strings", field_name="refs"))
        for item in items:
            text = scalar_text(item)
            if text is None:
                return Err(
                    FragmentError(message="field refs must be a list of strings", field_name="refs")
                )
            refs.append(text)

    return Ok(
        RawFragment(
            component=values["component"],
            type=values["type"],
            summary=values["summary"],
            refs=tuple(refs),
        )
    )


def canonicalize_fragment(
    raw: RawFragment,
    manifest: Manifest,
    *,
    source_id: str,
) -> Result[Fragment, FragmentError]:
    """Trim, case-normalize, alias-resolve and validate one fragment.

    Checks run in a fixed order: required fields, strict components, then the
    alias-resolved type against the type order.
    """
    component = raw.component.strip()
    typ = raw.type.strip().upper()
    summary = raw.summary.strip()
    refs = tuple(r.strip() for r in raw.refs)

    for name, value in (("component", component), ("type", typ), ("summary", summary)):
        if not value:
            return Err(FragmentError(message=f"missing required field: {name}", field_name=name))

    if manifest.strict_components and component not in manifest.component_order:
        allowed = ", ".join(manifest.component_order)
        return Err(
            FragmentError(
                message=f"unknown component {component!r} (expected one of {allowed})",
                field_name="component",
            )
        )

    typ = manifest.canonical_type(typ)
    if typ not in manifest.type_order:
        allowed = ", ".join(manifest.type_order)
        return Err(
            FragmentError(
                message=f"unknown type {typ!r} (expected one of {allowed})",
                field_name="type",
            )
        )

    return Ok(
        Fragment(
            component=component,
            type=typ,
            summary=summary,
            refs=refs,
            source_id=source_id,
        )
    )


def parse_fragment_text(
    text: str,
    manifest: Manifest,
    *,
    path: Path,
) -> Result[Fragment, FragmentError]:
    """Parse a fragment document and validate it. Errors carry `path`."""
    try:
        parsed: object = yaml.safe_load(text)
    except yaml.YAMLError as e:
        return Err(FragmentError(message=f"invalid YAML: {e}", path=path))

    data = as_str_dict({} if parsed is None else parsed)
    if data is None:
        return Err(
            FragmentError(
                message=f"invalid YAML: expected a mapping, got {type(parsed).__name__}",
                path=path,
            )
        )

    raw = raw_fragment_from_document(data)
    if isinstance(raw, Err):
        return raw.map_err(lambda e: e.with_path(path))

    result = canonicalize_fragment(raw.value, manifest, source_id=path.name)
    return result.map_err(lambda e: e.with_path(path))


def collect_fragment_results(
    results: Iterable[Result[Fragment, FragmentError]],
) -> Result[tuple[Fragment, ...], FragmentBatchError]:
    """Gather every failure of a batch, sorted by rendered message."""
    fragments: list[Fragment] = []
    errors: list[FragmentError] = []
    for result in results:
        match result:
            case Ok(fragment):
                fragments.append(fragment)
            case Err(error):
                errors.append(error)
    if errors:
        errors.sort(key=lambda e: e.pretty())
        return Err(FragmentBatchError(errors=tuple(errors)))
    return Ok(tuple(fragments))
