# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pydantic import BaseModel


class UploadedFileDTO(BaseModel):
    name: str
    path: str
    type: str


class ParsedTextDTO(BaseModel):
    text: str
    warning: str | None = None
    pages: int | None = None
