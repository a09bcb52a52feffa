from __future__ import annotations

import json
from pathlib import Path

import pytest

from letspack.build import main


def _summary(out: str) -> dict:
    # size reports share stdout with the summary
    return json.loads(out[out.index("{") :])


@pytest.fixture
def project(tmp_path: Path, js_dir: Path, css_entry: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "letspack.yaml").write_text(
        f"""
version: 1
scripts:
  - sources: {js_dir.name}
    output: public/js/app.min.js
styles:
  - entry: {css_entry.parent.name}/{css_entry.name}
    output: public/css/app.min.css
""",
        encoding="utf-8",
    )
    return tmp_path


def test_build_writes_bundles_and_manifest(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 0

    assert (project / "public" / "js" / "app.min.js").exists()
    assert (project / "public" / "css" / "app.min.css").exists()
    manifest = json.loads((project / "public" / "mix-manifest.json").read_text(encoding="utf-8"))
    assert set(manifest) == {"/js/app.min.js", "/css/app.min.css"}

    out = capsys.readouterr().out
    assert "app.min.js:\t" in out
    summary = _summary(out)
    assert summary["status"] == "done"
    assert summary["errors"] == 0
    assert summary["manifest"] == "public/mix-manifest.json"


def test_no_version_skips_manifest(project: Path) -> None:
    assert main(["--no-version"]) == 0
    assert not (project / "public" / "mix-manifest.json").exists()


def test_strict_fails_on_pipeline_error(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (project / "js" / "a.js").write_text("function ( {", encoding="utf-8")

    assert main(["--strict", "--no-version"]) == 1
    summary = _summary(capsys.readouterr().out)
    assert summary["status"] == "failed"


def test_invalid_config_exits_2(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "letspack.yaml").write_text("scripts: nope\n", encoding="utf-8")
    assert main([]) == 2
