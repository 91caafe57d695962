"""Key-value backends for persisted documents.

A backend stores whole string values under string keys, read and
written synchronously.  There are no partial updates: ``set`` replaces
the previous value.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from psrental.exceptions import RentalStoreError

_logger = logging.getLogger(__name__)


class KeyValueBackend(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryBackend:
    """In-process backend, used for tests and embedding."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


class FileBackend:
    """One ``<key>.json`` file per document under *directory*.

    Writes go to a temporary file in the same directory which then
    replaces the document, so readers never see a half-written value.
    """

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise RentalStoreError(f"invalid document key {key!r}", key=key)
        return self._directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            value = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            _logger.debug("Document %s not found at %s", key, path)
            return None
        except OSError as exc:
            raise RentalStoreError(f"could not read {path}: {exc}", key=key) from exc
        _logger.debug("Loaded document %s (%d bytes)", key, len(value))
        return value

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise RentalStoreError(f"could not write {path}: {exc}", key=key) from exc
        _logger.debug("Saved document %s (%d bytes)", key, len(value))
