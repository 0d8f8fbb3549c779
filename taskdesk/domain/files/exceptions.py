# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from taskdesk.shared.errors.base import DomainError


class UnsupportedFileTypeError(DomainError):
    code = "unsupported_file_type"
    status = HTTPStatus.UNSUPPORTED_MEDIA_TYPE

    def __init__(self, name: str, *, message: str | None = None) -> None:
        super().__init__(
            message=message or "Only PDF, DOCX, JPG and PNG files can be uploaded",
            context={"name": name},
        )


class NoFilesProvidedError(DomainError):
    code = "no_files"
    status = HTTPStatus.BAD_REQUEST
    message = "No files were provided"


class FileAlreadyExistsError(DomainError):
    code = "file_exists"
    status = HTTPStatus.CONFLICT
    message = "A file with this path already exists"

    def __init__(self, path: str) -> None:
        super().__init__(context={"path": path})


class StoredFileNotFoundError(DomainError):
    code = "file_not_found"
    status = HTTPStatus.NOT_FOUND
    message = "File not found"

    def __init__(self, path: str) -> None:
        super().__init__(context={"path": path})


class DocumentParseError(DomainError):
    code = "document_parse_failed"
    status = HTTPStatus.UNPROCESSABLE_ENTITY

    def __init__(self, kind: str, detail: str) -> None:
        super().__init__(message=f"Failed to parse {kind.upper()}: {detail}")
