from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Sequence

import requests

from .common import format_size, md5_for_file, write_json, write_text
from .errors import PackError
from .manifest import DEFAULT_MANIFEST_PATH, build_manifest
from .scripts import minify_scripts
from .sources import SourceEntry, collect_sources
from .styles import process_stylesheet

logger = logging.getLogger(__name__)

PIPELINE_ERRORS = (OSError, ValueError, requests.RequestException, PackError)


@dataclass
class OutputRegistry:
    js: str | None = None
    css: str | None = None


class Packer:
    """Bundles scripts and styles and versions them in a Laravel Mix manifest.

    ``scripts`` and ``styles`` validate their arguments immediately and return
    an awaitable that resolves to the packer once the bundle is on disk. Run
    them to completion before awaiting ``version``::

        packer = Packer()
        await asyncio.gather(
            packer.scripts("resources/js", "public/js/app.min.js"),
            packer.styles("resources/css/app.css", "public/css/app.min.css"),
        )
        await packer.version()

    The registry keeps absolute output paths, so ``version`` hashes the files
    that were written even if the working directory changes in between.
    Pipeline failures are logged and never raised; size reports go to stdout.
    """

    def __init__(
        self,
        manifest_path: str | Path = DEFAULT_MANIFEST_PATH,
        fetch_timeout: float | None = None,
    ) -> None:
        self.manifest_path = Path(manifest_path)
        self.fetch_timeout = fetch_timeout
        self.outputs = OutputRegistry()

    def scripts(self, sources: SourceEntry | Sequence[SourceEntry], output: str | Path) -> Awaitable[Packer]:
        if isinstance(sources, (list, tuple)):
            for entry in sources:
                if not isinstance(entry, (str, os.PathLike)):
                    raise TypeError(f"Unknown type for 'scripts' entry: {type(entry).__name__}")
        elif not isinstance(sources, (str, os.PathLike)):
            raise TypeError(f"Unknown type for 'scripts': {type(sources).__name__}")
        _check_output(output)
        return self._pack_scripts(sources, output)

    def styles(self, entry: str | Path, output: str | Path) -> Awaitable[Packer]:
        if not isinstance(entry, (str, os.PathLike)):
            raise TypeError(f"Unknown type for 'styles': {type(entry).__name__}")
        _check_output(output)
        return self._pack_styles(entry, output)

    async def version(self) -> None:
        missing = [kind for kind in ("js", "css") if getattr(self.outputs, kind) is None]
        if missing:
            logger.error("Cannot version assets: no %s bundle has been written", " or ".join(missing))
            return

        results = await asyncio.gather(
            asyncio.to_thread(md5_for_file, Path(self.outputs.js)),
            asyncio.to_thread(md5_for_file, Path(self.outputs.css)),
            return_exceptions=True,
        )
        failures = [result for result in results if isinstance(result, BaseException)]
        if failures:
            for exc in failures:
                logger.error("Cannot hash bundle: %s", exc)
            return

        js_hash, css_hash = results
        manifest = build_manifest(
            [
                ("js", self.outputs.js, js_hash),
                ("css", self.outputs.css, css_hash),
            ]
        )
        try:
            await asyncio.to_thread(write_json, manifest, self.manifest_path)
        except OSError as exc:
            logger.error("Cannot write manifest %s: %s", self.manifest_path, exc)
            return
        logger.debug("Manifest written to %s", self.manifest_path)

    async def _pack_scripts(self, sources: SourceEntry | Sequence[SourceEntry], output: str | Path) -> Packer:
        target = Path(output).resolve()
        try:
            codes = await collect_sources(sources, timeout=self.fetch_timeout)
            bundle = await asyncio.to_thread(minify_scripts, codes)
            await asyncio.to_thread(write_text, bundle, target)
        except PIPELINE_ERRORS as exc:
            logger.error("Script bundle %s failed: %s", output, exc)
            return self

        self.outputs.js = os.fspath(target)
        await self._report_size(target)
        return self

    async def _pack_styles(self, entry: str | Path, output: str | Path) -> Packer:
        source = Path(entry).resolve()
        target = Path(output).resolve()
        try:
            css = await asyncio.to_thread(source.read_text, encoding="utf-8")
            result = await asyncio.to_thread(process_stylesheet, css, source)
            await asyncio.to_thread(write_text, result, target)
        except PIPELINE_ERRORS as exc:
            logger.error("Style bundle %s failed: %s", output, exc)
            return self

        self.outputs.css = os.fspath(target)
        await self._report_size(target)
        return self

    async def _report_size(self, path: Path) -> None:
        try:
            stats = await asyncio.to_thread(path.stat)
        except OSError as exc:
            logger.error("Cannot stat %s: %s", path, exc)
            return
        print(f"{path.name}:\t{format_size(stats.st_size)}")


def _check_output(output: str | Path) -> None:
    if not isinstance(output, (str, os.PathLike)):
        raise TypeError(f"Unknown type for 'output': {type(output).__name__}")
