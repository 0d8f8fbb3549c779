# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .guard import AuthGuard, bearer_token, current_user_id
from .jwt_tokens import JwtTokenService

__all__ = ["AuthGuard", "JwtTokenService", "bearer_token", "current_user_id"]
