from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, List

from letspack.config import BuildConfig, load_build_config
from letspack.errors import ConfigError
from letspack.logging import configure_logging
from letspack.packer import Packer


class _ErrorCounter(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.ERROR)
        self.count = 0

    def emit(self, record: logging.LogRecord) -> None:
        self.count += 1


async def run_build(config: BuildConfig, versioning: bool = True) -> Dict[str, Any]:
    """Run every job in ``config`` and version the results.

    Jobs of one kind run in config order so the manifest always covers the
    last script and style job; the two kinds run concurrently.
    """
    packer = Packer(manifest_path=config.manifest, fetch_timeout=config.fetch_timeout)

    async def _scripts() -> None:
        for job in config.scripts:
            await packer.scripts(job.sources, job.output)

    async def _styles() -> None:
        for job in config.styles:
            await packer.styles(job.entry, job.output)

    await asyncio.gather(_scripts(), _styles())

    versioned = bool(versioning and config.versioning and config.scripts and config.styles)
    if versioned:
        await packer.version()

    scripts: List[str] = [job.output for job in config.scripts]
    styles: List[str] = [job.output for job in config.styles]
    return {
        "scripts": scripts,
        "styles": styles,
        "manifest": str(packer.manifest_path) if versioned else None,
    }


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Bundle scripts and styles and write the mix manifest")
    parser.add_argument("--config", default="letspack.yaml")
    parser.add_argument("--log-level", default=None, help="overrides LETSPACK_LOG_LEVEL")
    parser.add_argument("--no-version", action="store_true", help="skip writing the manifest")
    parser.add_argument("--strict", action="store_true", help="exit 1 when any bundle fails")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    try:
        config = load_build_config(args.config)
    except ConfigError as exc:
        print(f"Invalid build config: {exc}", file=sys.stderr)
        return 2

    counter = _ErrorCounter()
    package_logger = logging.getLogger("letspack")
    package_logger.addHandler(counter)
    try:
        summary = asyncio.run(run_build(config, versioning=not args.no_version))
    finally:
        package_logger.removeHandler(counter)

    status = "failed" if counter.count else "done"
    print(json.dumps({"status": status, "errors": counter.count, **summary}, indent=2))
    return 1 if args.strict and counter.count else 0


if __name__ == "__main__":
    raise SystemExit(main())
