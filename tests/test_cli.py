import logging

from click.testing import CliRunner

from dart_import_sorter.cli import cli


UNSORTED = "import 'package:http/http.dart';\nimport 'dart:io';\n\nvoid main() {}\n"
SORTED = (
    "// Dart imports:\n"
    "import 'dart:io';\n"
    "\n"
    "// Package imports:\n"
    "import 'package:http/http.dart';\n"
    "\n"
    "void main() {}\n"
)


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


def _single_package(tmp_path, pubspec="name: app\n"):
    _write(tmp_path / "pubspec.yaml", pubspec)
    return _write(tmp_path / "lib" / "main.dart", UNSORTED)


def test_fix_sorts_files_in_place(tmp_path):
    main = _single_package(tmp_path)
    result = CliRunner().invoke(cli, ["fix", "--path", str(tmp_path)])
    assert result.exit_code == 0
    assert main.read_text() == SORTED

    result = CliRunner().invoke(cli, ["check", "--path", str(tmp_path)])
    assert result.exit_code == 0


def test_check_reports_without_writing(tmp_path):
    main = _single_package(tmp_path)
    result = CliRunner().invoke(cli, ["check", "--path", str(tmp_path)])
    assert result.exit_code == 1
    assert main.read_text() == UNSORTED


def test_fix_exit_if_changed(tmp_path):
    main = _single_package(tmp_path)
    result = CliRunner().invoke(cli, ["fix", "--exit-if-changed", "--path", str(tmp_path)])
    assert result.exit_code == 1
    assert main.read_text() == SORTED


def test_missing_pubspec_is_an_error(tmp_path):
    result = CliRunner().invoke(cli, ["check", "--path", str(tmp_path)])
    assert result.exit_code == 2


def test_flags_and_config(tmp_path):
    main = _single_package(tmp_path, "name: app\nimport_sorter:\n  emojis: true\n")
    result = CliRunner().invoke(cli, ["fix", "--path", str(tmp_path)])
    assert result.exit_code == 0
    assert "// 🎯 Dart imports:" in main.read_text()

    result = CliRunner().invoke(cli, ["fix", "--ignore-config", "--no-comments", "--path", str(tmp_path)])
    assert result.exit_code == 0
    assert main.read_text() == "import 'dart:io';\n\nimport 'package:http/http.dart';\n\nvoid main() {}\n"


def test_file_arguments_limit_the_run(tmp_path):
    main = _single_package(tmp_path)
    other = _write(tmp_path / "lib" / "other.dart", UNSORTED)
    result = CliRunner().invoke(cli, ["fix", "main.dart", "--path", str(tmp_path)])
    assert result.exit_code == 0
    assert main.read_text() == SORTED
    assert other.read_text() == UNSORTED


def test_workspace_packages_know_their_siblings(tmp_path):
    _write(tmp_path / "pubspec.yaml", "name: root\nworkspace:\n  - packages/*\nimport_sorter:\n  comments: false\n")
    _write(tmp_path / "packages" / "core" / "pubspec.yaml", "name: core\n")
    _write(tmp_path / "packages" / "ui" / "pubspec.yaml", "name: ui\n")
    widget = _write(
        tmp_path / "packages" / "ui" / "lib" / "widget.dart",
        "import 'package:ui/src/theme.dart';\n"
        "import 'package:core/core.dart';\n"
        "import 'package:meta/meta.dart';\n",
    )
    result = CliRunner().invoke(cli, ["fix", "--path", str(tmp_path)])
    assert result.exit_code == 0
    assert widget.read_text() == (
        "import 'package:meta/meta.dart';\n"
        "\n"
        "import 'package:core/core.dart';\n"
        "\n"
        "import 'package:ui/src/theme.dart';\n"
    )


def test_list_ignored(tmp_path, caplog):
    caplog.set_level(logging.INFO)
    _single_package(tmp_path)
    generated = _write(tmp_path / "lib" / "model.g.dart", UNSORTED)
    result = CliRunner().invoke(cli, ["fix", "--list-ignored", "--path", str(tmp_path)])
    assert result.exit_code == 0
    assert generated.read_text() == UNSORTED
    assert "Files sorted" in caplog.text
    assert "lib/model.g.dart" in caplog.text


def test_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "dart-import-sorter" in result.output


def test_unreadable_file_is_an_error_but_parse_warning_is_not(tmp_path):
    _single_package(tmp_path)
    _write(tmp_path / "lib" / "broken.dart", "import 'dart:io'\nvoid main() {}\n")
    result = CliRunner().invoke(cli, ["fix", "--path", str(tmp_path)])
    assert result.exit_code == 0

    (tmp_path / "lib" / "latin1.dart").write_bytes(b"import 'dart:io'; // caf\xe9\n")
    result = CliRunner().invoke(cli, ["check", "--path", str(tmp_path)])
    assert result.exit_code == 2
