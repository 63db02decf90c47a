"""
Runtime configuration.

Settings are read from environment variables (optionally loaded from a
`.env` file) the same way the rest of the backend reads its configuration.

Environment variables:
    - ASSET_API_BASE_URL: Base URL of the case-generation asset API
      (default: http://localhost:3000/api/case-generation)
    - ASSET_API_TIMEOUT_SECONDS: Timeout for asset API calls (default: 60)
    - ASSET_RENDER_FALLBACK: Set to `markdown` to disable the slide compiler
    - DEBUG_ASSETS: `true` enables verbose diagnostics panels and the
      `x-debug` header on generation requests
    - BULK_GENERATION_DELAY_SECONDS: Pause between bulk generation requests
      (default: 1.0)
    - LOG_LEVEL: Root log level (default: INFO)
"""

import os
from dotenv import load_dotenv
from pydantic import BaseModel


class Settings(BaseModel):
    """
    Resolved configuration values.

    Example:
        >>> settings = Settings(asset_api_base_url="http://store.local/api")
        >>> settings.slide_compiler_enabled
        True
    """

    asset_api_base_url: str = "http://localhost:3000/api/case-generation"
    """Base URL of the external asset API (list/get/update/generate/health)."""

    asset_api_timeout_seconds: float = 60.0
    """Timeout applied to every call against the asset API."""

    asset_render_fallback: str = ""
    """Presentation-deck toggle. `markdown` disables the slide compiler."""

    debug_assets: bool = False
    """Verbose diagnostics panels and debug header on generation."""

    bulk_generation_delay_seconds: float = 1.0
    """Fixed delay between requests of a bulk generation."""

    log_level: str = "INFO"

    @property
    def slide_compiler_enabled(self) -> bool:
        return self.asset_render_fallback.strip().lower() != "markdown"


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


def get_settings() -> Settings:
    """
    Builds the settings from the current environment.

    The environment is read on every call so that toggles changed at
    runtime (or patched in tests) are honored without a restart.

    Returns:
        Settings: The resolved configuration.
    """

    load_dotenv()

    return Settings(
        asset_api_base_url=os.getenv("ASSET_API_BASE_URL", "http://localhost:3000/api/case-generation"),
        asset_api_timeout_seconds=float(os.getenv("ASSET_API_TIMEOUT_SECONDS", "60")),
        asset_render_fallback=os.getenv("ASSET_RENDER_FALLBACK", ""),
        debug_assets=_env_flag("DEBUG_ASSETS"),
        bulk_generation_delay_seconds=float(os.getenv("BULK_GENERATION_DELAY_SECONDS", "1.0")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
