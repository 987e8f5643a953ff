"""Shared domain models for cactiinstaller."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class InstallContext:
    """Values fixed for the whole run, including the generated credentials."""

    db_name: str
    db_user: str
    db_password: str
    db_host: str
    timezone: str
    ram_mb: int
    buffer_pool_mb: int
    log_file: str
    web_root: str
    cacti_dir: str
    web_user: str
    web_group: str


@dataclass(frozen=True)
class SchemaChoice:
    path: str
    origin: str


class PollerMode(Enum):
    CRON = "1"
    DAEMON = "2"
