from __future__ import annotations

import hashlib
import json
import os
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Any, Dict

KIB = 1024
MIB = 1024 * 1024


def md5_for_file(path: Path) -> str:
    h = hashlib.md5()
    with path.open("rb") as fh:
        for chunk in iter(lambda: fh.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()


def write_text(content: str, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def write_json(payload: Dict[str, Any], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def _round2(value: float) -> str:
    rounded = Decimal(repr(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return format(rounded, "f").rstrip("0").rstrip(".")


def format_size(size: int) -> str:
    if size < KIB:
        return f"{size} byte"
    if size < MIB:
        return f"{_round2(size / KIB)} Kb"
    return f"{_round2(size / MIB)} Mb"


def getenv(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)
