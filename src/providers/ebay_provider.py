# src/providers/ebay_provider.py

"""eBay search through the Browse API item-summary endpoint."""

from typing import Any

from src.models.product import Product
from src.providers.affiliate import tag_ebay
from src.providers.base_provider import BaseProvider


def _parse_price(value: Any) -> float | None:
    """Browse API prices arrive as decimal strings (``"19.99"``)."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class EbayProvider(BaseProvider):
    """eBay search through the Browse API item-summary endpoint."""

    source_name = "ebay"
    label = "eBay"

    def required_settings(self) -> dict[str, str | None]:
        return {"EBAY_OAUTH_TOKEN": self.settings.ebay_oauth_token}

    def fetch_raw(self, query: str) -> dict[str, Any]:
        """Return the Browse API's untransformed search payload."""
        self.validate_config()
        self.logger.info("[ebay] Searching '%s'", query)
        return self._fetch_json(
            self.settings.EBAY_SEARCH_URL,
            params={
                "q": query,
                "limit": self.settings.EBAY_RESULT_LIMIT,
            },
            headers={
                "Authorization": (
                    f"Bearer {self.settings.ebay_oauth_token}"
                ),
                "Content-Type": "application/json",
            },
        )

    def _parse_item(self, item: dict[str, Any]) -> Product:
        """Map one ``itemSummaries[]`` entry to a Product."""
        price = item.get("price")
        if not isinstance(price, dict):
            price = {}
        image = item.get("image")
        return Product(
            source="ebay",
            id=item.get("itemId"),
            title=item.get("title"),
            url=tag_ebay(
                item.get("itemWebUrl"),
                self.settings.epn_campaign_id,
                self.settings.epn_custom_id,
            ),
            image=(
                image.get("imageUrl")
                if isinstance(image, dict)
                else None
            ),
            price=_parse_price(price.get("value")),
            price_currency=(
                price.get("currency")
                or self.settings.DEFAULT_CURRENCY
            ),
        )

    def parse_results(self, payload: dict[str, Any]) -> list[Product]:
        return [
            self._parse_item(item)
            for item in self._items(payload, "itemSummaries")
        ]
