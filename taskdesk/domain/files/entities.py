# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import PurePosixPath
from typing import Any

UPLOAD_EXTENSIONS = frozenset({"pdf", "docx", "jpg", "jpeg", "png"})

PDF_CONTENT_TYPE = "application/pdf"
DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class DocumentKind(str, Enum):
    PDF = "pdf"
    DOCX = "docx"


def file_extension(name: str) -> str:
    return PurePosixPath(name).suffix.lstrip(".").lower()


def detect_document_kind(name: str, content_type: str | None) -> DocumentKind | None:
    if content_type == PDF_CONTENT_TYPE or file_extension(name) == "pdf":
        return DocumentKind.PDF
    if content_type == DOCX_CONTENT_TYPE or file_extension(name) == "docx":
        return DocumentKind.DOCX
    return None


@dataclass(slots=True, frozen=True)
class UploadedFile:

    name: str
    content_type: str | None
    data: bytes


@dataclass(slots=True, frozen=True)
class StoredFile:

    name: str
    path: str
    type: str
    size: int
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "type": self.type,
            "size": self.size,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(slots=True, frozen=True)
class ExtractedText:

    kind: DocumentKind
    text: str
    pages: int | None = None
    warning: str | None = None
