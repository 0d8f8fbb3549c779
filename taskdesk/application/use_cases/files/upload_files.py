# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from pathlib import PurePosixPath

from werkzeug.utils import secure_filename

from taskdesk.domain.files.entities import UPLOAD_EXTENSIONS, StoredFile, UploadedFile, file_extension
from taskdesk.domain.files.exceptions import (
    FileAlreadyExistsError,
    NoFilesProvidedError,
    UnsupportedFileTypeError,
)
from taskdesk.domain.files.repositories import BlobStorage
from taskdesk.shared.logging import logger


def owner_prefix(owner_id: int) -> str:
    return f"user_{owner_id}"


def storage_name(name: str) -> str:
    """Filesystem-safe name that keeps the original extension.

    ``secure_filename`` drops non-ASCII characters, so the stem and the
    extension are cleaned separately.
    """
    ext = file_extension(name)
    stem = secure_filename(PurePosixPath(name).stem) or "upload"
    return f"{stem}.{ext}"


def batch_names(names: Sequence[str]) -> list[str]:
    """Storage names for one batch; repeats get a ``-2``, ``-3`` ... suffix."""
    used: set[str] = set()
    result = []
    for name in names:
        candidate = storage_name(name)
        stem, ext = candidate.rsplit(".", 1)
        counter = 1
        while candidate in used:
            counter += 1
            candidate = f"{stem}-{counter}.{ext}"
        used.add(candidate)
        result.append(candidate)
    return result


class UploadFilesUseCase:
    def __init__(
        self,
        *,
        storage: BlobStorage,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._storage = storage
        self._clock = clock or (lambda: datetime.now(UTC))

    def execute(self, owner_id: int, files: Sequence[UploadedFile]) -> list[StoredFile]:
        if not files:
            raise NoFilesProvidedError()
        # reject the whole batch before writing anything
        for upload in files:
            if file_extension(upload.name) not in UPLOAD_EXTENSIONS:
                raise UnsupportedFileTypeError(upload.name)

        stamp = int(self._clock().timestamp() * 1000)
        paths = [
            f"{owner_prefix(owner_id)}/{stamp}-{name}"
            for name in batch_names([upload.name for upload in files])
        ]

        stored: list[StoredFile] = []
        try:
            for upload, path in zip(files, paths):
                stored.append(self._storage.write_bytes(path, upload.data, overwrite=False))
        except FileAlreadyExistsError:
            for item in stored:
                self._storage.delete(item.path)
            logger.warning(f"files.upload: collision user_id={owner_id}, batch rolled back")
            raise

        logger.info(f"files.upload: ok user_id={owner_id} n={len(stored)}")
        return stored


__all__ = ["UploadFilesUseCase", "batch_names", "owner_prefix", "storage_name"]
