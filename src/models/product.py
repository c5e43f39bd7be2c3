# src/models/product.py

"""Canonical product record shared by every provider."""

from dataclasses import dataclass
from typing import Any, Literal

SourceId = Literal["amazon", "walmart", "ebay"]


@dataclass(frozen=True)
class Product:
    """A single product listing, normalized from any upstream."""

    source: SourceId
    id: str | None = None
    title: str | None = None
    url: str | None = None
    image: str | None = None
    price: float | None = None
    price_currency: str = "$"
    stars: float | None = None
    review_count: int = 0
    seller: str | None = None
    availability: str | None = None
    brand: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the JSON shape; every key is always present."""
        return {
            "source": self.source,
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "image": self.image,
            "price": self.price,
            "priceCurrency": self.price_currency,
            "stars": self.stars,
            "reviewCount": self.review_count,
            "seller": self.seller,
            "availability": self.availability,
            "brand": self.brand,
        }
