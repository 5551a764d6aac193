from __future__ import annotations

from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__: list[str] = ["Settings", "get_settings"]


class Settings(BaseSettings):
    """
    Library configuration, loaded from ``RAPITAPIR_*`` environment variables.
    """

    debug: bool = False
    log_json: bool = True

    # Integer/Float targets accept True/False as 1/0 unless switched off.
    coerce_booleans_to_numbers: bool = True

    # Maximum container nesting accepted by coercion; ``None`` disables the guard.
    max_depth: Optional[int] = Field(default=64, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="RAPITAPIR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("max_depth", mode="before")
    @classmethod
    def _coerce_max_depth(cls, v: Any) -> Any:
        """Treat an empty string or ``none``/``off`` as "no limit"."""

        if isinstance(v, str) and v.strip().lower() in {"", "none", "off"}:
            return None
        return v


# Public accessor – manual caching so tests can reset the singleton
_CACHED_SETTINGS: Optional[Settings] = None


def get_settings() -> Settings:  # noqa: D401 – accessor helper
    """Return the process-wide **singleton** Settings instance."""

    global _CACHED_SETTINGS  # noqa: PLW0603 – module-level singleton

    if _CACHED_SETTINGS is None:
        _CACHED_SETTINGS = Settings()

    return _CACHED_SETTINGS


def _clear_settings_cache() -> None:  # noqa: D401 – helper for tests
    """Clear the internal Settings singleton (used by unit-tests)."""

    global _CACHED_SETTINGS
    _CACHED_SETTINGS = None


get_settings.cache_clear = _clear_settings_cache  # type: ignore[attr-defined]
