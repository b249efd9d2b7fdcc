"""Runtime configuration for dayledger."""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

from dayledger.domain.errors import ValidationError

DEFAULT_HOME = Path.home() / ".dayledger"


@dataclass(frozen=True)
class Settings:
    """Settings shared by the CLI and the persistence coordinator.

    Timings are in seconds.
    """

    database_path: Optional[str] = None
    cache_dir: Optional[str] = None
    autosave_delay: float = 2.0
    autosave_grace: float = 0.5
    sync_interval: float = 30.0
    remote_timeout: float = 15.0
    default_user: str = "admin"
    meals_token: str = "meals"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from DAYLEDGER_* environment variables.

        Raises:
            ValidationError: If a numeric variable is not a positive number
        """
        if environ is None:
            environ = os.environ

        def seconds(name: str, default: float) -> float:
            raw = environ.get(name)
            if raw is None or not raw.strip():
                return default
            try:
                value = float(raw)
            except ValueError:
                raise ValidationError(f"{name} must be a number of seconds, got '{raw}'")
            if value <= 0:
                raise ValidationError(f"{name} must be positive, got '{raw}'")
            return value

        return cls(
            database_path=environ.get("DAYLEDGER_DB_PATH") or None,
            cache_dir=environ.get("DAYLEDGER_CACHE_DIR") or None,
            autosave_delay=seconds("DAYLEDGER_AUTOSAVE_DELAY", cls.autosave_delay),
            sync_interval=seconds("DAYLEDGER_SYNC_INTERVAL", cls.sync_interval),
            remote_timeout=seconds("DAYLEDGER_REMOTE_TIMEOUT", cls.remote_timeout),
            default_user=environ.get("DAYLEDGER_USER") or cls.default_user,
        )

    def with_overrides(self, **overrides) -> "Settings":
        """Return a copy with non-None overrides applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def resolve_database_path(self) -> str:
        """Return the database file path, creating the default directory."""
        if self.database_path is not None:
            return self.database_path
        DEFAULT_HOME.mkdir(exist_ok=True)
        return str(DEFAULT_HOME / "dayledger.db")

    def resolve_cache_dir(self) -> str:
        """Return the local cache directory path."""
        if self.cache_dir is not None:
            return self.cache_dir
        return str(DEFAULT_HOME / "cache")
