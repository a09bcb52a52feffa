from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path, PurePosixPath
from typing import Dict, List, Sequence, Union
from urllib.parse import urlparse

import requests

logger = logging.getLogger(__name__)

SourceEntry = Union[str, "os.PathLike[str]"]

DEFAULT_HEADERS = {
    "User-Agent": "letspack/0.3 (+https://pypi.org/project/letspack/)",
}


def is_secure_url(entry: SourceEntry) -> bool:
    if not isinstance(entry, str):
        return False
    parsed = urlparse(entry)
    return parsed.scheme == "https" and bool(parsed.netloc)


def logical_name(entry: SourceEntry) -> str:
    """Key under which a source is handed to the minifier.

    URLs use their final path segment, local files their base name. Two
    sources with the same name overwrite each other.
    """
    if is_secure_url(entry):
        parsed = urlparse(str(entry))
        return PurePosixPath(parsed.path).name or parsed.netloc
    return Path(entry).name


def list_directory(path: Path) -> List[Path]:
    # Immediate regular files only, sorted so bundles are reproducible.
    return sorted(child for child in path.iterdir() if child.is_file())


def read_local(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def fetch_remote(url: str, timeout: float | None = None) -> str:
    resp = requests.get(url, headers=DEFAULT_HEADERS, timeout=timeout, allow_redirects=False)
    if not 200 <= resp.status_code < 300:
        raise requests.HTTPError(f"GET {url} returned HTTP {resp.status_code}", response=resp)
    return resp.text


async def collect_sources(
    sources: SourceEntry | Sequence[SourceEntry],
    timeout: float | None = None,
) -> Dict[str, str]:
    if isinstance(sources, (str, os.PathLike)):
        entries: List[SourceEntry] = list(list_directory(Path(sources)))
    else:
        entries = list(sources)

    codes: Dict[str, str] = {}
    for entry in entries:
        if is_secure_url(entry):
            logger.debug("Fetching %s", entry)
            content = await asyncio.to_thread(fetch_remote, str(entry), timeout)
        else:
            content = read_local(Path(entry))

        name = logical_name(entry)
        if name in codes:
            logger.debug("Source %s overwrites an earlier source with the same name", entry)
        codes[name] = content
    return codes
