"""JSON documents on disk: reads, backed-up writes and directory helpers."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from pathlib import Path
from shutil import copy2, rmtree
from typing import Any

from .cache import ReadCache
from .errors import NotFound, ParseError, StorageError

logger = logging.getLogger(__name__)

BACKUP_TIMESTAMPED = "timestamped"
BACKUP_SINGLE = "single"


def _now_millis() -> int:
    return int(time.time() * 1000)


def _dump(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False) + "\n"


class DocumentStore:
    """Read and write the JSON documents under one content root."""

    def __init__(self, root: Path, cache: ReadCache | None = None) -> None:
        self.root = Path(root)
        self.cache = cache

    def _changed(self) -> None:
        if self.cache is not None:
            self.cache.invalidate()

    def read(self, path: Path) -> Any:
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise NotFound(f"Document not found: {self.relative(path)}") from exc
        except IsADirectoryError as exc:
            raise NotFound(f"Document not found: {self.relative(path)}") from exc
        except OSError as exc:
            raise StorageError(f"Failed to read {self.relative(path)}: {exc}") from exc
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ParseError(f"Invalid JSON in {self.relative(path)}: {exc}") from exc

    def backup_path(self, path: Path, style: str = BACKUP_TIMESTAMPED) -> Path:
        if style == BACKUP_SINGLE:
            return path.with_name(f"{path.name}.backup")
        stamp = _now_millis()
        candidate = path.with_name(f"{path.name}.backup-{stamp}")
        while candidate.exists():
            stamp += 1
            candidate = path.with_name(f"{path.name}.backup-{stamp}")
        return candidate

    def _backup(self, path: Path, style: str) -> Path | None:
        if not path.exists():
            return None
        backup = self.backup_path(path, style)
        try:
            copy2(path, backup)
        except OSError as exc:
            logger.warning("Could not create backup of %s: %s", self.relative(path), exc)
            return None
        return backup

    def write(self, path: Path, value: Any, backup: str = BACKUP_TIMESTAMPED) -> Path | None:
        """Overwrite `path` with `value`, backing up the previous content first.

        Returns the backup path, or None when there was nothing to back up or
        the backup could not be written.
        """
        backup_path = self._backup(path, backup)
        text = _dump(value)
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(text)
            os.replace(tmp_name, path)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Failed to write {self.relative(path)}: {exc}") from exc
        finally:
            self._changed()
        return backup_path

    def create_if_absent(self, path: Path, default: Any) -> bool:
        if path.exists():
            return False
        self.write(path, default)
        return True

    def merge(self, path: Path, patch: dict[str, Any], backup: str = BACKUP_TIMESTAMPED) -> dict[str, Any]:
        existing = self.read(path)
        if not isinstance(existing, dict):
            raise ParseError(f"{self.relative(path)} must contain a JSON object.")
        merged = {**existing, **patch}
        self.write(path, merged, backup=backup)
        return merged

    def list_dirs(self, path: Path) -> list[str]:
        try:
            return sorted(child.name for child in path.iterdir() if child.is_dir())
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise StorageError(f"Failed to list {self.relative(path)}: {exc}") from exc

    def ensure_dir(self, path: Path) -> None:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Failed to create {self.relative(path)}: {exc}") from exc

    def remove_tree(self, path: Path) -> bool:
        """Recursively delete `path`; returns False if it was already gone."""
        if not path.exists():
            return False
        try:
            rmtree(path)
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StorageError(f"Failed to delete {self.relative(path)}: {exc}") from exc
        finally:
            self._changed()
        return True

    def relative(self, path: Path) -> str:
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return str(path)
