from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic import ConfigDict, field_validator, model_validator

ENV_BOOL_TRUE = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in ENV_BOOL_TRUE


def _env_int(name: str, default: int | None) -> int | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


def _env_list(name: str, default: str) -> list[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings(BaseModel):
    database_url: str = Field(default_factory=lambda: os.getenv("DATABASE_URL", "sqlite:///payroll.db"))
    database_echo: bool = Field(default_factory=lambda: _env_bool("DATABASE_ECHO", False))
    seed_on_startup: bool = Field(default_factory=lambda: _env_bool("SEED_ON_STARTUP", False))
    seed_employees: bool = Field(default_factory=lambda: _env_bool("SEED_EMPLOYEES", False))
    seed_employee_target: int = Field(default_factory=lambda: _env_int("SEED_EMPLOYEE_TARGET", 50))
    force_seed_employees: bool = Field(default_factory=lambda: _env_bool("FORCE_SEED_EMPLOYEES", False))
    seed_random_seed: int | None = Field(default_factory=lambda: _env_int("SEED_RANDOM_SEED", None))
    feature_tax_override: bool = Field(default_factory=lambda: _env_bool("FEATURE_TAX_OVERRIDE", False))
    cors_origins: list[str] = Field(default_factory=lambda: _env_list("CORS_ORIGINS", "http://localhost:8000"))
    default_page_size: int = Field(default_factory=lambda: _env_int("DEFAULT_PAGE_SIZE", 10))
    max_page_size: int = Field(default_factory=lambda: _env_int("MAX_PAGE_SIZE", 100))
    log_dir: str | None = Field(default_factory=lambda: os.getenv("LOG_DIR", "logs") or None)
    build_version: str = Field(default_factory=lambda: os.getenv("BUILD_VERSION", "dev"))
    build_sha: str = Field(default_factory=lambda: os.getenv("BUILD_SHA", "local"))

    model_config = ConfigDict(frozen=True)

    @field_validator("seed_employee_target")
    @classmethod
    def _validate_target(cls, value: int) -> int:
        if value < 0:
            raise ValueError("SEED_EMPLOYEE_TARGET must not be negative")
        return value

    @field_validator("default_page_size", "max_page_size")
    @classmethod
    def _validate_page_size(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Page sizes must be positive")
        return value

    @model_validator(mode="after")
    def _check_page_sizes(self) -> "Settings":
        if self.default_page_size > self.max_page_size:
            raise ValueError(
                f"DEFAULT_PAGE_SIZE ({self.default_page_size}) exceeds MAX_PAGE_SIZE ({self.max_page_size})"
            )
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
