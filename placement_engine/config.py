"""Runtime settings resolved from the environment (or a local .env file)."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .scheduler import ALERT_SLOTS, DEFAULT_ALERT_ID_MULTIPLIER


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PLACEMENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Alert ids are task_id * multiplier + slot
    alert_id_multiplier: int = DEFAULT_ALERT_ID_MULTIPLIER

    # HTTP notification relay; dispatching is disabled when unset
    webhook_url: Optional[str] = None
    webhook_timeout_s: float = 20.0
    webhook_max_retries: int = 3
    webhook_backoff_s: float = 2.0

    log_level: str = "INFO"

    @field_validator("alert_id_multiplier")
    @classmethod
    def _multiplier_leaves_room_for_slots(cls, v: int) -> int:
        """Reject multipliers that would let two tasks share an alert id."""
        if v < len(ALERT_SLOTS):
            raise ValueError(
                f"alert_id_multiplier must be at least {len(ALERT_SLOTS)} "
                "or alert ids of adjacent tasks collide"
            )
        return v

    @field_validator("webhook_url")
    @classmethod
    def _strip_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip().rstrip("/")
        return v or None

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.strip().upper()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()
