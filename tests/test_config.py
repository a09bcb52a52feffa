from __future__ import annotations

from pathlib import Path

import pytest

from letspack.config import BuildConfig, ScriptJob, StyleJob, load_build_config
from letspack.errors import ConfigError
from letspack.manifest import DEFAULT_MANIFEST_PATH


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "letspack.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_full_config(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
version: 1
manifest: build/mix-manifest.json
fetch_timeout: 15
scripts:
  - sources: resources/js
    output: public/js/app.min.js
  - sources:
      - resources/vendor/a.js
      - https://cdn.example.com/b.js
    output: public/js/vendor.min.js
styles:
  entry: resources/css/app.css
  output: public/css/app.min.css
versioning: false
""",
    )
    config = load_build_config(path)

    assert config == BuildConfig(
        version=1,
        scripts=[
            ScriptJob(sources="resources/js", output="public/js/app.min.js"),
            ScriptJob(
                sources=["resources/vendor/a.js", "https://cdn.example.com/b.js"],
                output="public/js/vendor.min.js",
            ),
        ],
        styles=[StyleJob(entry="resources/css/app.css", output="public/css/app.min.css")],
        manifest="build/mix-manifest.json",
        fetch_timeout=15.0,
        versioning=False,
    )


def test_defaults_for_empty_file(tmp_path: Path) -> None:
    config = load_build_config(_write(tmp_path, ""))
    assert config.scripts == []
    assert config.styles == []
    assert config.manifest == DEFAULT_MANIFEST_PATH
    assert config.fetch_timeout is None
    assert config.versioning is True


@pytest.mark.parametrize(
    "text",
    [
        "scripts:\n  - output: public/js/app.js\n",
        "scripts:\n  - sources: 3\n    output: public/js/app.js\n",
        "styles:\n  - entry: app.css\n",
        "scripts: nope\n",
        "fetch_timeout: soon\n",
        "- just\n- a list\n",
        "scripts: [\n",
    ],
)
def test_invalid_config_raises(tmp_path: Path, text: str) -> None:
    with pytest.raises(ConfigError):
        load_build_config(_write(tmp_path, text))


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="cannot read"):
        load_build_config(tmp_path / "absent.yaml")
