# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from taskdesk.shared.errors.base import ValidationError


class InvariantViolationError(ValidationError):
    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(
            code="invariant_violation",
            message=f"{field}: {message}" if field else message,
            context={"field": field} if field else None,
        )
        self.field = field


InvariantViolation = InvariantViolationError
