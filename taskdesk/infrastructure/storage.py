# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""File storage adapter."""

from __future__ import annotations

import mimetypes
import os
from datetime import UTC, datetime
from pathlib import Path

from taskdesk.domain.files.entities import StoredFile
from taskdesk.domain.files.exceptions import FileAlreadyExistsError, StoredFileNotFoundError
from taskdesk.domain.files.repositories import BlobStorage
from taskdesk.shared.logging import logger


class LocalFileStorage(BlobStorage):
    """Stores files on local filesystem within configured root."""

    def __init__(self, root: Path) -> None:
        self._root = Path(root)
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, relative_path: str) -> Path:
        root = self._root.resolve()
        path = (root / relative_path).resolve()
        if path != root and root not in path.parents:
            logger.warning("storage: rejected path outside root")
            raise StoredFileNotFoundError(relative_path)
        return path

    def _describe(self, path: Path) -> StoredFile:
        stat = path.stat()
        relative = path.relative_to(self._root.resolve()).as_posix()
        content_type, _ = mimetypes.guess_type(path.name)
        return StoredFile(
            name=path.name,
            path=relative,
            type=content_type or "application/octet-stream",
            size=stat.st_size,
            created_at=datetime.fromtimestamp(stat.st_mtime, UTC),
        )

    def read_bytes(self, path: str) -> bytes:
        file_path = self._resolve(path)
        logger.debug(f"storage: read path={path}")
        return file_path.read_bytes()

    def write_bytes(self, path: str, data: bytes, *, overwrite: bool = False) -> StoredFile:
        file_path = self._resolve(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        mode = "wb" if overwrite else "xb"
        try:
            with open(file_path, mode) as fh:
                fh.write(data)
        except FileExistsError as exc:
            raise FileAlreadyExistsError(path) from exc
        logger.debug(f"storage: write path={path} size={len(data)}")
        return self._describe(file_path)

    def delete(self, path: str) -> None:
        file_path = self._resolve(path)
        file_path.unlink(missing_ok=True)
        logger.debug(f"storage: delete path={path}")

    def list_files(self, prefix: str) -> list[StoredFile]:
        directory = self._resolve(prefix)
        if not directory.is_dir():
            return []
        files = []
        for dirpath, _dirnames, filenames in os.walk(directory):
            for filename in filenames:
                files.append(self._describe(Path(dirpath) / filename))
        return files


__all__ = ["LocalFileStorage"]
