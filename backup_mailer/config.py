from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv

from .errors import ConfigError

DEFAULT_SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"
LOG_FILE_NAME = "mongo_backup.log"

REQUIRED_VARIABLES = (
    "MONGO_DB_NAME",
    "BACKUP_DIR",
    "SENDGRID_FROM_EMAIL",
    "SENDGRID_TO_EMAIL",
    "SENDGRID_API_KEY",
)
CREDENTIAL_VARIABLES = ("MONGO_USER", "MONGO_PASS", "MONGO_AUTH_DB")


def load_environment() -> None:
    """Seed os.environ from ENV_FILE (default .env); variables already set win."""
    env_path = Path(os.getenv("ENV_FILE", ".env"))
    if env_path.is_file():
        load_dotenv(env_path)


@dataclass(frozen=True)
class MongoCredentials:
    username: str
    password: str = field(repr=False)
    auth_db: str


@dataclass(frozen=True)
class Settings:
    database_name: str
    backup_dir: Path
    from_email: str
    to_email: str
    api_key: str = field(repr=False)
    host: str = "localhost"
    port: str = "27017"
    subject_prefix: str = "MongoDB Backup"
    credentials: MongoCredentials | None = None
    mongodump_bin: str = "mongodump"
    dump_timeout: float = 3600.0
    http_timeout: float = 60.0
    sendgrid_url: str = DEFAULT_SENDGRID_URL
    log_level: str = "INFO"

    @property
    def authenticated(self) -> bool:
        return self.credentials is not None

    @property
    def log_file(self) -> Path:
        return self.backup_dir / LOG_FILE_NAME

    @property
    def secrets(self) -> tuple[str, ...]:
        """Values that must never reach a log line."""
        values = [self.api_key]
        if self.credentials:
            values.append(self.credentials.password)
        return tuple(value for value in values if value)

    @classmethod
    def from_env(cls) -> "Settings":
        load_environment()
        return cls.from_mapping(os.environ)

    @classmethod
    def from_mapping(cls, env: Mapping[str, str]) -> "Settings":
        def get(name: str, default: str | None = None) -> str | None:
            value = env.get(name)
            if value is None or value == "":
                return default
            return value

        missing = [name for name in REQUIRED_VARIABLES if not get(name)]

        # Any one credential variable switches on the authenticated variant,
        # which then needs all three.
        provided = [name for name in CREDENTIAL_VARIABLES if get(name)]
        if provided:
            missing.extend(name for name in CREDENTIAL_VARIABLES if not get(name))

        if missing:
            raise ConfigError(
                f"Missing required environment variable(s): {', '.join(missing)}"
            )

        credentials = None
        if provided:
            credentials = MongoCredentials(
                username=get("MONGO_USER"),
                password=get("MONGO_PASS"),
                auth_db=get("MONGO_AUTH_DB"),
            )

        return cls(
            database_name=get("MONGO_DB_NAME"),
            backup_dir=Path(get("BACKUP_DIR")).expanduser().resolve(),
            from_email=get("SENDGRID_FROM_EMAIL"),
            to_email=get("SENDGRID_TO_EMAIL"),
            api_key=get("SENDGRID_API_KEY"),
            host=get("MONGO_HOST", "localhost"),
            port=get("MONGO_PORT", "27017"),
            subject_prefix=get("SENDGRID_SUBJECT_PREFIX", "MongoDB Backup"),
            credentials=credentials,
            mongodump_bin=get("MONGODUMP_BIN", "mongodump"),
            dump_timeout=_parse_timeout("DUMP_TIMEOUT", get("DUMP_TIMEOUT", "3600")),
            http_timeout=_parse_timeout(
                "SENDGRID_TIMEOUT", get("SENDGRID_TIMEOUT", "60")
            ),
            sendgrid_url=get("SENDGRID_API_URL", DEFAULT_SENDGRID_URL),
            log_level=get("LOG_LEVEL", "INFO").upper(),
        )


def _parse_timeout(name: str, raw: str) -> float:
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number of seconds, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value
