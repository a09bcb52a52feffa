"""Shared test configuration."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))


@pytest.fixture
def js_dir(tmp_path: Path) -> Path:
    """A directory with two scripts and a nested folder that must be ignored."""
    src = tmp_path / "js"
    src.mkdir()
    (src / "a.js").write_text("function add(first, second) { return first + second; }\n", encoding="utf-8")
    (src / "b.js").write_text("var total = add(1, 2);\n", encoding="utf-8")
    nested = src / "vendor"
    nested.mkdir()
    (nested / "c.js").write_text("var nested = true;\n", encoding="utf-8")
    return src


@pytest.fixture
def css_entry(tmp_path: Path) -> Path:
    src = tmp_path / "css"
    src.mkdir()
    (src / "other.css").write_text(".base {\n    margin: 0;\n}\n", encoding="utf-8")
    entry = src / "app.css"
    entry.write_text(
        '@import "other.css";\n\n'
        "/* layout */\n"
        ".card {\n    user-select: none;\n    display: flex;\n}\n"
        ".card {\n    color: red;\n}\n",
        encoding="utf-8",
    )
    return entry
