"""Settings for the lead intake form.

Values come from environment variables prefixed with ``LEADFORM_``:

- LEADFORM_WEBHOOK_URL: endpoint receiving the form submission
- LEADFORM_TIMEOUT_SECONDS: request timeout; unset means wait indefinitely
- LEADFORM_FAILURE_POLICY: ``return_to_idle`` or ``hold_failed``
- LEADFORM_FLAG_COST_OTHER_WITHOUT_SELECTION: keep flagging the free cost
  value when no cost option is chosen
"""

import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from leadform.types import FailurePolicy

logger = logging.getLogger(__name__)

DEFAULT_WEBHOOK_URL = (
    "https://n8nwebhook.n8n-n8n-start.u81uve.easypanel.host/webhook/calculadora"
)


class LeadFormSettings(BaseSettings):
    """Runtime configuration for the submission pipeline."""

    model_config = SettingsConfigDict(
        env_prefix="LEADFORM_",
        extra="ignore",
    )

    webhook_url: str = Field(default=DEFAULT_WEBHOOK_URL, description="Submission endpoint")
    timeout_seconds: Optional[float] = Field(
        default=None, description="Request timeout in seconds, None for no timeout"
    )
    failure_policy: FailurePolicy = Field(
        default=FailurePolicy.RETURN_TO_IDLE,
        description="Phase after a failed submission call",
    )
    flag_cost_other_without_selection: bool = Field(
        default=True,
        description="Flag the free cost value when no cost option is selected",
    )

    @field_validator("webhook_url")
    @classmethod
    def validate_webhook_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("webhook_url must be an http(s) URL")
        return v

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("timeout_seconds must be positive")
        return v


@lru_cache()
def get_settings() -> LeadFormSettings:
    """Get cached settings instance."""
    settings = LeadFormSettings()
    logger.debug(
        "Loaded settings: failure_policy=%s timeout=%s",
        settings.failure_policy.value,
        settings.timeout_seconds,
    )
    return settings


__all__ = [
    "DEFAULT_WEBHOOK_URL",
    "LeadFormSettings",
    "get_settings",
]
