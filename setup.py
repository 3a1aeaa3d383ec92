#!/usr/bin/env python3
import setuptools

setuptools.setup(
    name="dart-import-sorter",
    version="0.1.0",
    packages=["dart_import_sorter"],
    python_requires=">=3.8",
    install_requires=[
        "click",
        "PyYAML",
        "pathspec",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "dart-import-sorter = dart_import_sorter.cli:main",
        ],
    },
    author="",
    description="Command-line tool to sort the imports and exports of Dart packages and workspaces",
    license="MIT",
)
