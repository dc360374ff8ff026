"""Client configuration with startup validation.

All config is validated at import time via pydantic-settings.
Missing required values cause an immediate, clear error.
In fixture mode, a fixture directory is required.
"""

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "WITHINGS_", "env_file": ".env"}

    # Vendor endpoints
    api_url: str = "https://wbsapi.withings.net/v2"
    oauth_url: str = "https://oauth.withings.com/account"

    # Client mode: "live" or "fixture"
    client_mode: str = "live"
    fixture_dir: str = ""

    # Transport
    request_timeout_seconds: float = 30.0

    # Logging
    log_json: bool = False

    @model_validator(mode="after")
    def validate_client_mode(self) -> "Settings":
        """Fail fast at startup if the client mode is unknown or incomplete."""
        if self.client_mode not in ("live", "fixture"):
            raise ValueError(
                f"client_mode must be 'live' or 'fixture', got '{self.client_mode}'"
            )
        if self.client_mode == "fixture" and not self.fixture_dir:
            raise ValueError(
                "client_mode='fixture' requires a fixture directory. "
                "Missing: WITHINGS_FIXTURE_DIR"
            )
        return self


settings = Settings()
