from __future__ import annotations

from ._gate import require_arch_checks_enabled
from ._utils import iter_python_files, matches_prefix, package_root, parse_imports

_RELEASE_FORBIDDEN = ("papertrail.cli", "papertrail.services", "papertrail.output", "typer", "rich")


def test_release_engine_stays_pure() -> None:
    require_arch_checks_enabled()

    root = package_root()
    offenders: list[str] = []

    for file_path in iter_python_files(root / "release"):
        rel = file_path.relative_to(root)
        for item in parse_imports(file_path):
            if any(matches_prefix(item.module, p) for p in _RELEASE_FORBIDDEN):
                offenders.append(f"{rel}:{item.line}: forbidden import '{item.module}'")

    assert not offenders, "release engine dependency violations:\n" + "\n".join(offenders)


def test_services_do_not_import_cli_modules() -> None:
    require_arch_checks_enabled()

    root = package_root()
    offenders: list[str] = []

    for file_path in iter_python_files(root / "services"):
        rel = file_path.relative_to(root)
        for item in parse_imports(file_path):
            if matches_prefix(item.module, "papertrail.cli"):
                offenders.append(f"{rel}:{item.line}: forbidden import '{item.module}'")

    assert not offenders, "services -> cli dependency violations:\n" + "\n".join(offenders)
