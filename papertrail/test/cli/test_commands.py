from __future__ import annotations

from pathlib import Path

import pytest
import typer

from papertrail.cli.context import CLIContext
from papertrail.core.errors import ErrorCode
from papertrail.output.console import MockConsole


def _ctx(tmp_path: Path) -> CLIContext:
    return CLIContext(cwd=tmp_path, console=MockConsole())


def _patch_context(monkeypatch: pytest.MonkeyPatch, module: object, ctx: CLIContext) -> None:
    monkeypatch.setattr(module, "build_context", lambda: ctx)


def _write_fragments(tmp_path: Path) -> Path:
    d = tmp_path / "changelog.d"
    d.mkdir()
    (d / "a.yml").write_text("component: CLI\ntype: new feature\nsummary: Add preview\n", encoding="utf-8")
    (d / "b.yml").write_text("component: CLI\ntype: bugfix\nsummary: Fix crash\n", encoding="utf-8")
    return d


def test_check_reports_success(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import papertrail.cli.commands.check as check_cmd

    ctx = _ctx(tmp_path)
    _patch_context(monkeypatch, check_cmd, ctx)
    _write_fragments(tmp_path)

    check_cmd.check(fragments=Path("changelog.d"), manifest=None)

    assert isinstance(ctx.console, MockConsole)
    assert ctx.console.messages == ["OK 2 fragment(s) valid"]


def test_check_exits_with_fragment_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import papertrail.cli.commands.check as check_cmd

    ctx = _ctx(tmp_path)
    _patch_context(monkeypatch, check_cmd, ctx)
    d = _write_fragments(tmp_path)
    (d / "c.yml").write_text("component: CLI\n", encoding="utf-8")

    with pytest.raises(typer.Exit) as exc:
        check_cmd.check(fragments=Path("changelog.d"), manifest=None)

    assert exc.value.exit_code == int(ErrorCode.FRAGMENT_ERROR)
    assert isinstance(ctx.console, MockConsole)
    assert ctx.console.has_error()


def test_check_fails_on_broken_manifest_first(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import papertrail.cli.commands.check as check_cmd

    ctx = _ctx(tmp_path)
    _patch_context(monkeypatch, check_cmd, ctx)
    (tmp_path / "papertrail.config.yml").write_text("versioning:\n  rules:\n    '*': big\n", encoding="utf-8")

    with pytest.raises(typer.Exit) as exc:
        check_cmd.check(fragments=Path("missing.d"), manifest=None)

    assert exc.value.exit_code == int(ErrorCode.CONFIG_ERROR)


def test_bump_prints_next_version(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    import papertrail.cli.commands.bump as bump_cmd

    _patch_context(monkeypatch, bump_cmd, _ctx(tmp_path))
    _write_fragments(tmp_path)

    bump_cmd.bump(base="v1.2.3", fragments=Path("changelog.d"), manifest=None)

    assert capsys.readouterr().out == "v1.3.0\n"


def test_bump_rejects_invalid_base(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import papertrail.cli.commands.bump as bump_cmd

    _patch_context(monkeypatch, bump_cmd, _ctx(tmp_path))

    with pytest.raises(typer.Exit) as exc:
        bump_cmd.bump(base="1.2.3", fragments=Path("changelog.d"), manifest=None)

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)


def test_preview_prints_markdown(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    import papertrail.cli.commands.preview as preview_cmd

    _patch_context(monkeypatch, preview_cmd, _ctx(tmp_path))
    _write_fragments(tmp_path)

    preview_cmd.preview(files=[Path("changelog.d/b.yml"), Path("changelog.d/a.yml")], manifest=None)

    out = capsys.readouterr().out
    assert out.splitlines()[:2] == ["<!-- papertrail-preview -->", "### Changelog preview"]
    assert out.index("**new feature**") < out.index("**bugfix**")


def test_merge_updates_changelog(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import papertrail.cli.commands.merge as merge_cmd

    ctx = _ctx(tmp_path)
    _patch_context(monkeypatch, merge_cmd, ctx)
    _write_fragments(tmp_path)
    (tmp_path / "CHANGELOG.md").write_text("# Changelog\n", encoding="utf-8")

    merge_cmd.merge(
        version="v0.1.0",
        date="2024-03-04",
        fragments=Path("changelog.d"),
        changelog=Path("CHANGELOG.md"),
        archive=Path("changelog.d/archived"),
        release_notes_out=None,
        manifest=None,
    )

    text = (tmp_path / "CHANGELOG.md").read_text(encoding="utf-8")
    assert text.startswith("# Changelog\n\n## v0.1.0 (2024-03-04)\n\n### CLI\n")
    assert (tmp_path / "changelog.d" / "archived" / "v0.1.0" / "a.yml").exists()

    with pytest.raises(typer.Exit) as exc:
        merge_cmd.merge(
            version="v0.1.0",
            date="2024-03-04",
            fragments=Path("changelog.d"),
            changelog=Path("CHANGELOG.md"),
            archive=Path("changelog.d/archived"),
            release_notes_out=None,
            manifest=None,
        )
    # No fragments remain after archiving.
    assert exc.value.exit_code == int(ErrorCode.FRAGMENT_ERROR)


def test_pr_title_policy(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import papertrail.cli.commands.pr_title as pr_title_cmd

    ctx = _ctx(tmp_path)
    _patch_context(monkeypatch, pr_title_cmd, ctx)
    (tmp_path / ".papertrail.config.yml").write_text(
        "pr_policy:\n  title_validation:\n    enabled: true\n", encoding="utf-8"
    )

    pr_title_cmd.pr_title(title="feature(cli): add preview", manifest=None)

    with pytest.raises(typer.Exit) as exc:
        pr_title_cmd.pr_title(title="update stuff", manifest=None)
    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)


def test_version_flag() -> None:
    from typer.testing import CliRunner

    from papertrail import __version__
    from papertrail.cli.app import app

    result = CliRunner().invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip() == __version__
