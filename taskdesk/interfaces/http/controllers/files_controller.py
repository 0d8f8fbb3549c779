# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request

from taskdesk.application.use_cases.files.extract_text import ExtractTextUseCase
from taskdesk.application.use_cases.files.list_files import ListFilesUseCase
from taskdesk.application.use_cases.files.upload_files import UploadFilesUseCase
from taskdesk.domain.files.entities import ExtractedText, UploadedFile, file_extension
from taskdesk.domain.files.exceptions import NoFilesProvidedError
from taskdesk.infrastructure.auth import AuthGuard, current_user_id
from taskdesk.interfaces.http.dto.files import ParsedTextDTO, UploadedFileDTO
from taskdesk.shared.logging import logger


def _read_upload(storage) -> UploadedFile:
    return UploadedFile(
        name=storage.filename or "",
        content_type=storage.mimetype or None,
        data=storage.read(),
    )


def _parsed_payload(result: ExtractedText) -> dict:
    return ParsedTextDTO(text=result.text, warning=result.warning, pages=result.pages).model_dump()


class FilesController:
    def __init__(
        self,
        *,
        upload_files: UploadFilesUseCase,
        list_files: ListFilesUseCase,
        extract_text: ExtractTextUseCase,
        guard: AuthGuard,
    ) -> None:
        self._upload_files = upload_files
        self._list_files = list_files
        self._extract_text = extract_text
        self._guard = guard

    def upload(self) -> tuple[Response, int]:
        uploads = [_read_upload(item) for item in request.files.getlist("files") if item.filename]
        stored = self._upload_files.execute(current_user_id(), uploads)
        payload = [
            UploadedFileDTO(
                name=upload.name, path=item.path, type=file_extension(upload.name)
            ).model_dump()
            for upload, item in zip(uploads, stored)
        ]
        return jsonify(payload), 201

    def list_files(self) -> tuple[Response, int]:
        files = self._list_files.execute(current_user_id())
        return jsonify({"items": [item.to_dict() for item in files]}), 200

    def parse(self) -> tuple[Response, int]:
        item = request.files.get("file")
        if item is None or not item.filename:
            raise NoFilesProvidedError()
        result = self._extract_text.execute(_read_upload(item))
        logger.debug(f"files.parse: user_id={current_user_id()} warning={bool(result.warning)}")
        return jsonify(_parsed_payload(result)), 200

    def stored_text(self, path: str) -> tuple[Response, int]:
        result = self._extract_text.execute_stored(current_user_id(), path)
        return jsonify(_parsed_payload(result)), 200

    def as_blueprint(self) -> Blueprint:
        guard = self._guard
        bp = Blueprint("files", __name__, url_prefix="/api/files")
        bp.add_url_rule("", view_func=guard(self.upload), methods=["POST"], endpoint="upload")
        bp.add_url_rule("", view_func=guard(self.list_files), methods=["GET"], endpoint="list")
        bp.add_url_rule("/parse", view_func=guard(self.parse), methods=["POST"], endpoint="parse")
        bp.add_url_rule(
            "/<path:path>/text",
            view_func=guard(self.stored_text),
            methods=["GET"],
            endpoint="stored_text",
        )
        return bp
