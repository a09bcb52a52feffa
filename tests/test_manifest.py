from __future__ import annotations

from letspack.manifest import build_manifest, public_path


def test_public_path_uses_base_name() -> None:
    assert public_path("./public/js/app.min.js", "js") == "/js/app.min.js"


def test_public_path_normalizes_windows_separators() -> None:
    assert public_path("public\\css\\app.min.css", "css") == "/css/app.min.css"


def test_build_manifest_versions_each_entry() -> None:
    manifest = build_manifest(
        [
            ("js", "public/js/app.min.js", "abc"),
            ("css", "public/css/app.min.css", "def"),
        ]
    )
    assert manifest == {
        "/js/app.min.js": "/js/app.min.js?id=abc",
        "/css/app.min.css": "/css/app.min.css?id=def",
    }
