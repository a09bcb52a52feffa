from __future__ import annotations

from typing import Dict, Iterable, Tuple

DEFAULT_MANIFEST_PATH = "public/mix-manifest.json"


def public_path(output: str, kind: str) -> str:
    """Map a bundle's output path to its public URL path, e.g. ``/js/app.min.js``."""
    normalized = str(output).replace("\\", "/")
    return f"/{kind}/{normalized.rsplit('/', 1)[-1]}"


def build_manifest(entries: Iterable[Tuple[str, str, str]]) -> Dict[str, str]:
    """Build the mix manifest from ``(kind, output_path, content_hash)`` triples."""
    manifest: Dict[str, str] = {}
    for kind, output, digest in entries:
        path = public_path(output, kind)
        manifest[path] = f"{path}?id={digest}"
    return manifest
