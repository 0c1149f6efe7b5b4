"""Driver configuration."""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_API_URL = "https://graph.facebook.com/v2.6/"


class DriverConfig(BaseModel):
    """Parameters the host framework supplies to the Facebook driver."""

    model_config = ConfigDict(frozen=True)

    page_token: str
    verify_token: str
    app_secret: str | None = None
    api_url: str = DEFAULT_API_URL
    timeout: float = Field(default=10.0, gt=0)
    audit_log_path: str | None = None

    @classmethod
    def from_env(cls) -> DriverConfig:
        """Build config from FACEBOOK_* environment variables."""
        return cls(
            page_token=os.environ["FACEBOOK_PAGE_TOKEN"],
            verify_token=os.environ["FACEBOOK_VERIFY_TOKEN"],
            app_secret=os.environ.get("FACEBOOK_APP_SECRET") or None,
            api_url=os.environ.get("FACEBOOK_API_URL", DEFAULT_API_URL),
            timeout=float(os.environ.get("FACEBOOK_TIMEOUT", "10")),
            audit_log_path=os.environ.get("AUDIT_LOG_PATH") or None,
        )

    @staticmethod
    def config_keys() -> tuple[str, ...]:
        return ("page_token", "verify_token", "app_secret")
