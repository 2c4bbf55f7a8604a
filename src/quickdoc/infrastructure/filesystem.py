"""Filesystem helpers — schema descriptor files and JSON exports."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def read_json(path: Path) -> Any:
    """Parse the JSON file at *path*."""
    return json.loads(path.read_text(encoding="utf-8"))


def write_json(path: Path, payload: str) -> Path:
    """Write an already-serialized JSON *payload*, creating parent dirs.

    Returns the resolved path written.
    """
    path = path.resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(payload if payload.endswith("\n") else payload + "\n", encoding="utf-8")
    return path
