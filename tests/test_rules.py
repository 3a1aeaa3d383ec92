from dart_import_sorter.parser import parse_header
from dart_import_sorter.rules import Category
from dart_import_sorter.rules import classify_directive
from dart_import_sorter.rules import ClassificationContext
from dart_import_sorter.rules import package_name_of
from dart_import_sorter.rules import split_directives


CONTEXT = ClassificationContext.create("app", ["sibling_pkg", "app"], has_flutter=True)


def test_classify_targets():
    assert classify_directive("dart:io", CONTEXT) == Category.SDK
    assert classify_directive("package:flutter/material.dart", CONTEXT) == Category.FRAMEWORK
    assert classify_directive("package:http/http.dart", CONTEXT) == Category.PACKAGE
    assert classify_directive("package:sibling_pkg/x.dart", CONTEXT) == Category.WORKSPACE
    assert classify_directive("package:app/main.dart", CONTEXT) == Category.PROJECT
    assert classify_directive("./foo.dart", CONTEXT) == Category.RELATIVE
    assert classify_directive("src/foo.dart", CONTEXT) == Category.RELATIVE


def test_own_package_wins_over_workspace_membership():
    assert classify_directive("package:app/a.dart", CONTEXT) == Category.PROJECT


def test_flutter_without_framework_flag_is_a_package():
    context = ClassificationContext.create("app", has_flutter=False)
    assert classify_directive("package:flutter/material.dart", context) == Category.PACKAGE


def test_flutter_test_is_not_the_framework():
    assert classify_directive("package:flutter_test/flutter_test.dart", CONTEXT) == Category.PACKAGE


def test_malformed_targets_are_relative():
    assert classify_directive("", CONTEXT) == Category.RELATIVE
    assert classify_directive("package:", CONTEXT) == Category.RELATIVE
    assert classify_directive("package:/x.dart", CONTEXT) == Category.RELATIVE


def test_empty_own_package_falls_through_to_package():
    context = ClassificationContext.create("")
    assert classify_directive("package:app/a.dart", context) == Category.PACKAGE


def test_package_name_of():
    assert package_name_of("package:foo/bar/baz.dart") == "foo"
    assert package_name_of("package:foo") == "foo"
    assert package_name_of("dart:io") == ""


def test_category_headers():
    assert Category.SDK.header() == "// Dart imports:"
    assert Category.PACKAGE.header(emojis=True) == "// 📦 Package imports:"
    assert list(Category) == sorted(Category)


def test_split_directives_keeps_order_and_all_categories():
    zone = parse_header([
        "import 'b.dart';",
        "import 'dart:io';",
        "import 'a.dart';",
    ])
    grouped = split_directives(zone.directives, CONTEXT)
    assert list(grouped) == list(Category)
    assert [d.target for d in grouped[Category.RELATIVE]] == ["b.dart", "a.dart"]
    assert [d.target for d in grouped[Category.SDK]] == ["dart:io"]
    assert grouped[Category.PACKAGE] == []
