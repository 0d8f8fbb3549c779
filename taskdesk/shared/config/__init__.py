# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .settings import (
    AppConfig,
    ClientConfig,
    DatabaseConfig,
    GitHubConfig,
    SecurityConfig,
    StorageConfig,
    load_config,
)

__all__ = [
    "AppConfig",
    "ClientConfig",
    "DatabaseConfig",
    "GitHubConfig",
    "SecurityConfig",
    "StorageConfig",
    "load_config",
]
