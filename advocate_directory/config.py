from __future__ import annotations

import os
from dataclasses import dataclass


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
    secret_key: str = "change-me"
    database_url: str | None = None  # None -> NullAdvocateStore (no rows)
    strict_query_params: bool = False  # reject malformed query params with 400 instead of defaulting
    log_level: str = "INFO"
    sql_echo: bool = False

    @classmethod
    def from_env(cls) -> Config:
        return cls(
            secret_key=os.getenv("SECRET_KEY", "change-me"),
            database_url=(os.getenv("DATABASE_URL") or "").strip() or None,
            strict_query_params=_flag("STRICT_QUERY_PARAMS"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            sql_echo=_flag("SQL_ECHO"),
        )

    def override(self, d: dict):
        for k, v in d.items():
            if hasattr(self, k):
                setattr(self, k, v)

    def to_flask_dict(self):
        return {
            "SECRET_KEY": self.secret_key,
            "DATABASE_URL": self.database_url,
            "STRICT_QUERY_PARAMS": self.strict_query_params,
            "LOG_LEVEL": self.log_level,
        }
