# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from taskdesk.domain.files.entities import StoredFile
from taskdesk.domain.files.repositories import BlobStorage

from .upload_files import owner_prefix


class ListFilesUseCase:
    def __init__(self, *, storage: BlobStorage) -> None:
        self._storage = storage

    def execute(self, owner_id: int) -> list[StoredFile]:
        files = self._storage.list_files(owner_prefix(owner_id))
        return sorted(files, key=lambda item: item.path, reverse=True)


__all__ = ["ListFilesUseCase"]
