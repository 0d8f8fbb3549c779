# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from taskdesk.domain.files.entities import ExtractedText, UploadedFile, detect_document_kind
from taskdesk.domain.files.exceptions import StoredFileNotFoundError, UnsupportedFileTypeError
from taskdesk.domain.files.repositories import BlobStorage, TextExtractor
from taskdesk.shared.logging import logger

from .upload_files import owner_prefix

UNSUPPORTED_DOCUMENT_MESSAGE = "Unsupported file type. Please upload a PDF or DOCX file."


class ExtractTextUseCase:
    def __init__(self, *, extractor: TextExtractor, storage: BlobStorage) -> None:
        self._extractor = extractor
        self._storage = storage

    def execute(self, upload: UploadedFile) -> ExtractedText:
        kind = detect_document_kind(upload.name, upload.content_type)
        if kind is None:
            raise UnsupportedFileTypeError(upload.name, message=UNSUPPORTED_DOCUMENT_MESSAGE)
        result = self._extractor.extract(kind, upload.data)
        logger.info(
            f"files.parse: ok kind={kind.value} chars={len(result.text)} pages={result.pages}"
        )
        return result

    def execute_stored(self, owner_id: int, path: str) -> ExtractedText:
        if not path.startswith(f"{owner_prefix(owner_id)}/") or ".." in path.split("/"):
            raise StoredFileNotFoundError(path)
        try:
            data = self._storage.read_bytes(path)
        except FileNotFoundError as exc:
            raise StoredFileNotFoundError(path) from exc
        name = path.rsplit("/", 1)[-1]
        return self.execute(UploadedFile(name=name, content_type=None, data=data))


__all__ = ["ExtractTextUseCase", "UNSUPPORTED_DOCUMENT_MESSAGE"]
