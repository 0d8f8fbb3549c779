# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""PDF and DOCX text extraction."""

from __future__ import annotations

from io import BytesIO

import docx
from pypdf import PdfReader

from taskdesk.domain.files.entities import DocumentKind, ExtractedText
from taskdesk.domain.files.exceptions import DocumentParseError
from taskdesk.domain.files.repositories import TextExtractor
from taskdesk.shared.logging import logger

EMPTY_PDF_WARNING = "No text found in PDF. The PDF may be scanned or image-based."


class DocumentTextExtractor(TextExtractor):
    def extract(self, kind: DocumentKind, data: bytes) -> ExtractedText:
        try:
            if kind is DocumentKind.PDF:
                return self._extract_pdf(data)
            return self._extract_docx(data)
        except DocumentParseError:
            raise
        except Exception as exc:
            logger.warning(f"files.parse: failed kind={kind.value} {type(exc).__name__}")
            raise DocumentParseError(kind.value, str(exc) or type(exc).__name__) from exc

    @staticmethod
    def _extract_pdf(data: bytes) -> ExtractedText:
        reader = PdfReader(BytesIO(data))
        text = ""
        for page in reader.pages:
            text += (page.extract_text() or "") + "\n"
        warning = EMPTY_PDF_WARNING if not text.strip() else None
        return ExtractedText(
            kind=DocumentKind.PDF, text=text, pages=len(reader.pages), warning=warning
        )

    @staticmethod
    def _extract_docx(data: bytes) -> ExtractedText:
        document = docx.Document(BytesIO(data))
        text = "\n".join(paragraph.text for paragraph in document.paragraphs)
        return ExtractedText(kind=DocumentKind.DOCX, text=text)


__all__ = ["DocumentTextExtractor", "EMPTY_PDF_WARNING"]
