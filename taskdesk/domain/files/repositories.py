# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import DocumentKind, ExtractedText, StoredFile


class BlobStorage(Protocol):
    def write_bytes(self, path: str, data: bytes, *, overwrite: bool = False) -> StoredFile: ...
    def read_bytes(self, path: str) -> bytes: ...
    def list_files(self, prefix: str) -> list[StoredFile]: ...
    def delete(self, path: str) -> None: ...


class TextExtractor(Protocol):
    def extract(self, kind: DocumentKind, data: bytes) -> ExtractedText: ...
