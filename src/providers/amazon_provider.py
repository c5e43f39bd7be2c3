# src/providers/amazon_provider.py

"""Amazon search through ScraperAPI's structured endpoint."""

from typing import Any

from src.models.product import Product
from src.providers.affiliate import tag_amazon
from src.providers.base_provider import BaseProvider


class AmazonProvider(BaseProvider):
    """Amazon search through ScraperAPI's structured endpoint."""

    source_name = "amazon"
    label = "Amazon"

    def required_settings(self) -> dict[str, str | None]:
        return {"SCRAPER_API_KEY": self.settings.scraper_api_key}

    def fetch_raw(self, query: str) -> dict[str, Any]:
        """Return ScraperAPI's untransformed search payload."""
        self.validate_config()
        self.logger.info("[amazon] Searching '%s'", query)
        return self._fetch_json(
            self.settings.AMAZON_SEARCH_URL,
            params={
                "api_key": self.settings.scraper_api_key,
                "query": query,
            },
        )

    def _parse_item(self, item: dict[str, Any]) -> Product:
        """Map one ``results[]`` entry to a Product."""
        price = item.get("price")
        if not isinstance(price, dict):
            price = {}
        return Product(
            source="amazon",
            id=item.get("asin"),
            title=item.get("title"),
            url=tag_amazon(item.get("url"), self.settings.amazon_tag),
            image=item.get("image"),
            price=self._as_number(price.get("value")),
            price_currency=(
                price.get("currency")
                or self.settings.DEFAULT_CURRENCY
            ),
            stars=self._as_number(item.get("rating")),
            review_count=self._as_count(item.get("reviews_count")),
        )

    def parse_results(self, payload: dict[str, Any]) -> list[Product]:
        return [
            self._parse_item(item)
            for item in self._items(payload, "results")
        ]
