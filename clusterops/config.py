from __future__ import annotations

import os
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class DbConfig:
    url: str
    pool_pre_ping: bool = True
    echo: bool = False
    # Only consulted for sqlite URLs; SQLite ships with FK enforcement off.
    sqlite_foreign_keys: bool = True

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if not self.url:
            raise ValueError("url must be a non-empty SQLAlchemy database URL")

    @classmethod
    def from_env(cls, prefix: str = "CLUSTEROPS_") -> "DbConfig":
        """
        Build a DbConfig from environment variables.

        Reads ``{prefix}DB_URL`` (required) and ``{prefix}DB_ECHO`` (optional).
        """
        url = os.environ.get(f"{prefix}DB_URL", "")
        echo = os.environ.get(f"{prefix}DB_ECHO", "").strip().lower() in _TRUTHY
        return cls(url=url, echo=echo)
