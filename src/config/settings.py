# src/config/settings.py

"""Central configuration for the shopping search aggregator."""

from pathlib import Path
from typing import Any, ClassVar, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Immutable process-wide configuration.

    Read once at startup from the environment and ``.env`` (existing
    variables win over the file), then handed to every provider so
    business logic never reads the environment itself.
    """

    # --- Credentials / upstream endpoints ---
    scraper_api_key: str | None = None
    walmart_structured_url: str | None = None
    ebay_oauth_token: str | None = None
    openai_api_key: str | None = None   # carried, not used yet

    # --- Affiliate identifiers ---
    amazon_tag: str | None = None
    epn_campaign_id: str | None = None
    epn_custom_id: str | None = None

    # --- Server ---
    host: str = "0.0.0.0"
    port: int = Field(4000, ge=1, le=65535)
    request_timeout: float = Field(30.0, gt=0)  # Seconds per upstream call
    log_level: LogLevel = "WARNING"             # Console handler level

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # --- Upstream constants ---
    AMAZON_SEARCH_URL: ClassVar[str] = (
        "https://api.scraperapi.com/structured/amazon/search"
    )
    EBAY_SEARCH_URL: ClassVar[str] = (
        "https://api.ebay.com/buy/browse/v1/item_summary/search"
    )
    EBAY_RESULT_LIMIT: ClassVar[int] = 20
    DEFAULT_CURRENCY: ClassVar[str] = "$"

    # --- Paths ---
    BASE_DIR: ClassVar[Path] = (
        Path(__file__).resolve().parent.parent.parent
    )
    LOGS_DIR: ClassVar[Path] = BASE_DIR / "logs"

    # --- Sources (fixed merge order for combined search) ---
    AVAILABLE_SOURCES: ClassVar[list[dict[str, str]]] = [
        {
            "id": "amazon",
            "label": "Amazon",
            "provider": "src.providers.amazon_provider.AmazonProvider",
        },
        {
            "id": "walmart",
            "label": "Walmart",
            "provider": "src.providers.walmart_provider.WalmartProvider",
        },
        {
            "id": "ebay",
            "label": "eBay",
            "provider": "src.providers.ebay_provider.EbayProvider",
        },
    ]

    @field_validator(
        "scraper_api_key",
        "walmart_structured_url",
        "ebay_oauth_token",
        "openai_api_key",
        "amazon_tag",
        "epn_campaign_id",
        "epn_custom_id",
        mode="before",
    )
    @classmethod
    def _blank_is_unset(cls, value: Any) -> Any:
        """``KEY=`` in .env means not configured."""
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value
