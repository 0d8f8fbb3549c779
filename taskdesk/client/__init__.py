# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .api import ApiError, TaskdeskClient
from .session import NotAuthenticatedError, OAuthRedirectError, SessionStore

__all__ = [
    "ApiError",
    "NotAuthenticatedError",
    "OAuthRedirectError",
    "SessionStore",
    "TaskdeskClient",
]
