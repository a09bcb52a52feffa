from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml

from .errors import ConfigError
from .manifest import DEFAULT_MANIFEST_PATH


@dataclass(frozen=True)
class ScriptJob:
    sources: str | List[str]
    output: str


@dataclass(frozen=True)
class StyleJob:
    entry: str
    output: str


@dataclass
class BuildConfig:
    version: int
    scripts: List[ScriptJob] = field(default_factory=list)
    styles: List[StyleJob] = field(default_factory=list)
    manifest: str = DEFAULT_MANIFEST_PATH
    fetch_timeout: float | None = None
    versioning: bool = True


def _jobs(payload: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    items = payload.get(key) or []
    if isinstance(items, dict):
        items = [items]
    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        raise ConfigError(f"'{key}' must be a mapping or a list of mappings")
    return items


def _script_job(item: Dict[str, Any]) -> ScriptJob:
    sources = item.get("sources")
    if isinstance(sources, list):
        sources = [str(value) for value in sources]
    elif not isinstance(sources, str):
        raise ConfigError("script job needs 'sources' as a directory or a list of files/URLs")
    output = item.get("output")
    if not isinstance(output, str):
        raise ConfigError("script job needs an 'output' path")
    return ScriptJob(sources=sources, output=output)


def _style_job(item: Dict[str, Any]) -> StyleJob:
    entry = item.get("entry")
    output = item.get("output")
    if not isinstance(entry, str) or not isinstance(output, str):
        raise ConfigError("style job needs 'entry' and 'output' paths")
    return StyleJob(entry=entry, output=output)


def load_build_config(path: str | Path = "letspack.yaml") -> BuildConfig:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            payload = yaml.safe_load(fh) or {}
    except OSError as exc:
        raise ConfigError(f"cannot read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"cannot parse {path}: {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigError(f"{path} must contain a mapping")

    try:
        version = int(payload.get("version", 1))
        timeout = payload.get("fetch_timeout")
        timeout = float(timeout) if timeout is not None else None
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"invalid number in {path}: {exc}") from exc

    return BuildConfig(
        version=version,
        scripts=[_script_job(item) for item in _jobs(payload, "scripts")],
        styles=[_style_job(item) for item in _jobs(payload, "styles")],
        manifest=str(payload.get("manifest") or DEFAULT_MANIFEST_PATH),
        fetch_timeout=timeout,
        versioning=bool(payload.get("versioning", True)),
    )
