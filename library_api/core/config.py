from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# library_api/core/config.py -> BASE_DIR == repository root
BASE_DIR = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        extra="ignore",
        env_prefix="",
        case_sensitive=False,
    )

    # Environment
    env: str = Field(default="dev", validation_alias="ENV")

    # Application
    api_name: str = Field(default="library-api", validation_alias="API_NAME")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=3000, validation_alias="PORT")

    # Database
    database_url: str = Field(
        default="sqlite+pysqlite:///./library.db",
        validation_alias="DATABASE_URL",
    )
    database_timeout_secs: float = Field(
        default=15.0, validation_alias="DATABASE_TIMEOUT_SECS"
    )
    auto_create_tables: bool = Field(
        default=True, validation_alias="AUTO_CREATE_TABLES"
    )

    # Catalog behaviour
    borrow_decrement_mode: Literal["atomic", "check_then_set"] = Field(
        default="atomic", validation_alias="BORROW_DECREMENT_MODE"
    )
    book_list_max_limit: int = Field(
        default=1000, validation_alias="BOOK_LIST_MAX_LIMIT"
    )

    @field_validator("borrow_decrement_mode", mode="before")
    @classmethod
    def normalize_decrement_mode(cls, v: Any) -> Literal["atomic", "check_then_set"]:
        if v is None:
            return "atomic"
        if not isinstance(v, str):
            raise TypeError("BORROW_DECREMENT_MODE must be a string")
        s = v.strip().lower().replace("-", "_")
        if s not in {"atomic", "check_then_set"}:
            raise ValueError("BORROW_DECREMENT_MODE must be one of: atomic, check_then_set")
        return s  # type: ignore[return-value]

    # CORS
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["*"],
        validation_alias="CORS_ORIGINS",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Any) -> list[str]:
        """
        Supported env formats:
          - JSON list: '["http://localhost:3000"]'
          - Bracket list (no quotes): '[http://localhost:3000, http://localhost:5173]'
          - Comma-separated: 'http://localhost:3000, http://localhost:5173'
          - '*' wildcard
        """
        if v is None:
            return []
        if isinstance(v, list):
            return [str(x).strip() for x in v if str(x).strip()]
        if not isinstance(v, str):
            raise TypeError("cors_origins must be a string or list of strings")

        s = v.strip()
        if not s:
            return []
        if s == "*":
            return ["*"]

        if s.startswith("[") and s.endswith("]"):
            try:
                parsed = json.loads(s)
                if isinstance(parsed, list):
                    return [str(x).strip() for x in parsed if str(x).strip()]
            except json.JSONDecodeError:
                inner = s[1:-1].strip()
                if not inner:
                    return []
                parts = [p.strip().strip('"').strip("'") for p in inner.split(",")]
                return [p for p in parts if p]

        parts = [p.strip() for p in s.split(",")]
        return [p for p in parts if p]

    # Rate limiting (write endpoints)
    redis_url: str = Field(
        default="redis://localhost:6379/0", validation_alias="REDIS_URL"
    )
    rate_limit_enabled: bool = Field(default=True, validation_alias="RATE_LIMIT_ENABLED")
    rate_limit_window_seconds: int = Field(
        default=60, validation_alias="RATE_LIMIT_WINDOW_SECONDS"
    )
    rate_limit_writes_per_window: int = Field(
        default=120, validation_alias="RATE_LIMIT_WRITES_PER_WINDOW"
    )

    # OpenTelemetry
    otel_enabled: bool = Field(default=False, validation_alias="OTEL_ENABLED")
    otel_otlp_endpoint: str = Field(
        default="http://localhost:4317",
        validation_alias="OTEL_OTLP_ENDPOINT",
    )

    @property
    def is_production(self) -> bool:
        return self.env.strip().lower() in {"prod", "production"}


settings = Settings()
