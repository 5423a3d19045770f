"""File-backed cache for Figma JSON and generated HTML.

Layout under the base directory:
    json/<file_key>.json        complete Figma file response
    minimized/<file_key>.json   extraction result
    html/<name>_<ms>.html       generated pages
"""

from __future__ import annotations

import json
import logging
import re
import time
from pathlib import Path
from typing import Any, List, Optional, Union

from figma2html import config

logger = logging.getLogger("figma2html.storage")

_UNSAFE_CHARS_RE = re.compile(r"[^a-z0-9]", re.IGNORECASE)


class StorageError(Exception):
    """Raised when a cached artifact is missing or its key is invalid."""


def _safe_key(key: str) -> str:
    """Reject keys that could escape the storage directory."""
    if not key or "/" in key or "\\" in key or key in (".", ".."):
        raise StorageError(f"Invalid storage key: {key!r}")
    return key


class DesignStorage:
    """JSON/HTML persistence keyed by Figma file key."""

    def __init__(self, base_dir: Optional[Union[str, Path]] = None):
        self.base_dir = Path(base_dir or config.OUTPUT_DIR)
        self.json_dir = self.base_dir / "json"
        self.minimized_dir = self.base_dir / "minimized"
        self.html_dir = self.base_dir / "html"
        for directory in (self.json_dir, self.minimized_dir, self.html_dir):
            if not directory.exists():
                directory.mkdir(parents=True, exist_ok=True)
                logger.info(f"Created output directory: {directory}")

    # --- JSON ---

    def _write_json(self, directory: Path, file_key: str, data: Any) -> str:
        file_name = f"{_safe_key(file_key)}.json"
        path = directory / file_name
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info(f"JSON saved to: {path}")
        return file_name

    def _read_json(self, directory: Path, file_key: str) -> Any:
        path = directory / f"{_safe_key(file_key)}.json"
        if not path.exists():
            raise StorageError(f"JSON file not found: {path.name}")
        return json.loads(path.read_text(encoding="utf-8"))

    def save_complete_json(self, data: Any, file_key: str) -> str:
        return self._write_json(self.json_dir, file_key, data)

    def save_minimized_json(self, data: Any, file_key: str) -> str:
        return self._write_json(self.minimized_dir, file_key, data)

    def read_complete_json(self, file_key: str) -> Any:
        return self._read_json(self.json_dir, file_key)

    def read_minimized_json(self, file_key: str) -> Any:
        return self._read_json(self.minimized_dir, file_key)

    def complete_json_exists(self, file_key: str) -> bool:
        return (self.json_dir / f"{_safe_key(file_key)}.json").exists()

    def minimized_json_exists(self, file_key: str) -> bool:
        return (self.minimized_dir / f"{_safe_key(file_key)}.json").exists()

    # --- HTML ---

    def save_html(self, html: str, name: str) -> str:
        """Save HTML under a sanitized, timestamped name; returns the file name."""
        sanitized = _UNSAFE_CHARS_RE.sub("_", name).lower() or "untitled"
        file_name = f"{sanitized}_{int(time.time() * 1000)}.html"
        path = self.html_dir / file_name
        path.write_text(html, encoding="utf-8")
        logger.info(f"HTML saved to: {path}")
        return file_name

    def read_html(self, file_name: str) -> str:
        path = self.html_dir / _safe_key(file_name)
        if not path.exists():
            raise StorageError(f"File not found: {file_name}")
        return path.read_text(encoding="utf-8")

    def list_html_files(self) -> List[str]:
        return sorted(p.name for p in self.html_dir.glob("*.html"))
