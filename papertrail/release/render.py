"""Deterministic changelog rendering.

Fragments are sorted by (component index, type index, source id) and
grouped by component. Known components come first in manifest order, then
unknown components alphabetically. Output only depends on the fragment
multiset and the manifest, never on discovery order.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from papertrail.release.manifest import Manifest
from papertrail.release.model import Fragment, RenderedRelease

__all__ = [
    "PREVIEW_MARKER",
    "ensure_terminal_punctuation",
    "group_by_component",
    "ordered_components",
    "render_bullet",
    "render_preview",
    "render_release",
    "sort_fragments",
]

PREVIEW_MARKER = "<!-- papertrail-preview -->"


def ensure_terminal_punctuation(summary: str) -> str:
    s = summary.strip()
    if not s or s.endswith((".", "!", "?")):
        return s
    return s + "."


def render_bullet(fragment: Fragment) -> str:
    return f"- **{fragment.display_type}**: {ensure_terminal_punctuation(fragment.summary)}"


def sort_fragments(fragments: Iterable[Fragment], manifest: Manifest) -> list[Fragment]:
    return sorted(
        fragments,
        key=lambda f: (
            manifest.component_index(f.component),
            manifest.type_index(f.type),
            f.source_id,
        ),
    )


def ordered_components(fragments: Iterable[Fragment], manifest: Manifest) -> list[str]:
    """Component headings in emission order, limited to those present."""
    present = {f.component for f in fragments}
    known = [c for c in manifest.component_order if c in present]
    unknown = sorted(present.difference(manifest.component_order))
    return known + unknown


def group_by_component(
    fragments: Iterable[Fragment],
    manifest: Manifest,
) -> list[tuple[str, list[Fragment]]]:
    """One sort/group pass shared by every rendered output."""
    rows = sort_fragments(fragments, manifest)
    groups: dict[str, list[Fragment]] = {}
    for row in rows:
        groups.setdefault(row.component, []).append(row)
    return [(c, groups[c]) for c in ordered_components(rows, manifest)]


def _render_body(groups: Sequence[tuple[str, list[Fragment]]], *, heading: str) -> list[str]:
    lines: list[str] = []
    for component, rows in groups:
        lines.append(f"{heading} {component}")
        lines.append("")
        lines.extend(render_bullet(r) for r in rows)
        lines.append("")
    return lines


def render_release(
    version: str,
    date: str,
    fragments: Iterable[Fragment],
    manifest: Manifest,
) -> RenderedRelease:
    """Render the dated changelog section and the undated release-notes body.

    Both share the same body; only the first heading differs:
    `## <version> (<date>)` versus `## <version>`.
    """
    body = _render_body(group_by_component(fragments, manifest), heading="###")
    section = [f"## {version} ({date})", "", *body]
    notes = [f"## {version}", "", *body]
    return RenderedRelease(
        version=version,
        section="\n".join(section) + "\n",
        notes="\n".join(notes) + "\n",
    )


def render_preview(fragments: Iterable[Fragment], manifest: Manifest) -> str:
    """Markdown preview of pending fragments, suitable for a PR comment."""
    body = _render_body(group_by_component(fragments, manifest), heading="####")
    lines = [PREVIEW_MARKER, "### Changelog preview", "", *body]
    return "\n".join(lines) + "\n"
