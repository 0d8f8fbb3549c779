# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from taskdesk.domain.users.oauth import GitHubEmail, GitHubProfile


class GitHubOAuthPort(Protocol):
    def exchange_code(self, code: str) -> str: ...

    def fetch_profile(self, access_token: str) -> GitHubProfile: ...

    def fetch_emails(self, access_token: str) -> Sequence[GitHubEmail]: ...
