# src/providers/walmart_provider.py

"""Walmart search through a structured-data endpoint."""

from typing import Any

from src.models.product import Product
from src.providers.base_provider import BaseProvider


class WalmartProvider(BaseProvider):
    """Walmart search through a structured-data endpoint.

    The endpoint base URL comes from ``WALMART_STRUCTURED_URL`` and
    shares the ScraperAPI key. Walmart URLs are not affiliate-tagged.
    """

    source_name = "walmart"
    label = "Walmart"

    def required_settings(self) -> dict[str, str | None]:
        return {
            "WALMART_STRUCTURED_URL": (
                self.settings.walmart_structured_url
            ),
            "SCRAPER_API_KEY": self.settings.scraper_api_key,
        }

    def fetch_raw(self, query: str) -> dict[str, Any]:
        """Return the structured endpoint's untransformed payload."""
        self.validate_config()
        self.logger.info("[walmart] Searching '%s'", query)
        return self._fetch_json(
            str(self.settings.walmart_structured_url),
            params={
                "api_key": self.settings.scraper_api_key,
                "query": query,
            },
        )

    def _parse_item(self, item: dict[str, Any]) -> Product:
        """Map one ``items[]`` entry to a Product."""
        rating = item.get("rating")
        if not isinstance(rating, dict):
            rating = {}
        return Product(
            source="walmart",
            id=item.get("id"),
            title=item.get("name"),
            url=item.get("url"),
            image=item.get("image"),
            # Price strings like "$9.99" or "invalid" are not trusted
            price=self._as_number(item.get("price")),
            price_currency=(
                item.get("price_currency")
                or self.settings.DEFAULT_CURRENCY
            ),
            stars=self._as_number(rating.get("average_rating")),
            review_count=self._as_count(rating.get("number_of_reviews")),
            seller=item.get("seller"),
            availability=item.get("availability"),
            brand=item.get("brand"),
        )

    def parse_results(self, payload: dict[str, Any]) -> list[Product]:
        return [
            self._parse_item(item)
            for item in self._items(payload, "items")
        ]
