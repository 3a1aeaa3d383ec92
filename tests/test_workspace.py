from dart_import_sorter.rules import ClassificationContext
from dart_import_sorter.workspace import find_workspace_packages
from dart_import_sorter.workspace import load_package
from dart_import_sorter.workspace import resolve_workspace_pattern
from dart_import_sorter.workspace import workspace_package_names
from dart_import_sorter.workspace import workspace_patterns


def _package(path, text):
    path.mkdir(parents=True, exist_ok=True)
    (path / "pubspec.yaml").write_text(text)
    return path


def test_load_package_reads_name_and_flutter(tmp_path):
    root = _package(tmp_path / "app", "name: my_app\ndependencies:\n  flutter:\n    sdk: flutter\n")
    package = load_package(root)
    assert package.name == "my_app"
    assert package.has_flutter
    assert package.context(["my_app", "other"]) == ClassificationContext(
        "my_app", frozenset({"my_app", "other"}), True
    )


def test_load_package_uses_lock_file(tmp_path):
    root = _package(tmp_path / "app", "name: app\n")
    (root / "pubspec.lock").write_text("packages:\n  flutter:\n    source: sdk\n  http:\n    source: hosted\n")
    package = load_package(root)
    assert package.dependencies == frozenset({"flutter", "http"})


def test_load_package_without_name_uses_directory(tmp_path):
    root = _package(tmp_path / "fallback", "description: no name\n")
    assert load_package(root).name == "fallback"
    assert not load_package(root).has_flutter


def test_load_package_without_pubspec(tmp_path):
    assert load_package(tmp_path) is None


def test_workspace_patterns_list_or_mapping():
    assert workspace_patterns({"workspace": ["a", "b/*"]}) == ["a", "b/*"]
    assert workspace_patterns({"workspace": {"packages": ["c"]}}) == ["c"]
    assert workspace_patterns({"workspace": None}) == []
    assert workspace_patterns({"name": "x"}) == []


def test_resolve_workspace_pattern(tmp_path):
    _package(tmp_path / "packages" / "b", "name: b\n")
    _package(tmp_path / "packages" / "a", "name: a\n")
    (tmp_path / "packages" / "not_a_package").mkdir()
    assert resolve_workspace_pattern(tmp_path, "packages/*") == [
        tmp_path / "packages" / "a",
        tmp_path / "packages" / "b",
    ]
    assert resolve_workspace_pattern(tmp_path, "packages/a/") == [tmp_path / "packages" / "a"]
    assert resolve_workspace_pattern(tmp_path, "missing") == []


def test_find_workspace_packages_in_manifest_order(tmp_path):
    _package(tmp_path, "name: root\nworkspace:\n  - apps/mobile\n  - packages/*\n  - packages/core\n")
    _package(tmp_path / "apps" / "mobile", "name: mobile\n")
    _package(tmp_path / "packages" / "core", "name: core\n")
    _package(tmp_path / "packages" / "ui", "name: ui\n")
    packages = find_workspace_packages(tmp_path)
    assert workspace_package_names(packages) == ["mobile", "core", "ui"]


def test_find_workspace_packages_without_workspace(tmp_path):
    assert find_workspace_packages(tmp_path) == []
    _package(tmp_path, "name: single\n")
    assert find_workspace_packages(tmp_path) == []
