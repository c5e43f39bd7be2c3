# src/services/search_orchestrator.py

"""Fans a query out to the search providers and merges the results."""

import asyncio
import importlib
import logging
from dataclasses import dataclass, field
from typing import Any

from src.config.settings import Settings
from src.models.errors import (
    ConfigurationError,
    UpstreamError,
    ValidationError,
)
from src.models.product import Product
from src.providers.base_provider import BaseProvider

logger = logging.getLogger("shopping_ai.orchestrator")

# Always part of the combined fan-out; eBay joins when configured
REQUIRED_COMBINED_SOURCES: tuple[str, ...] = ("amazon", "walmart")

COMBINED_FAILURE_MESSAGE = "Combined search failed"


@dataclass
class ProviderOutcome:
    """Tagged result of one provider call: products or an error."""

    source: str
    products: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    error: UpstreamError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SearchResult:
    """Container for a completed combined search."""

    query: str
    products: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    by_source: dict[str, int | dict[str, str]] = field(
        default_factory=lambda: dict[str, int | dict[str, str]]()
    )

    @property
    def total(self) -> int:
        return len(self.products)

    @property
    def failed_sources(self) -> list[str]:
        return [
            source
            for source, value in self.by_source.items()
            if isinstance(value, dict)
        ]

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the combined-search JSON envelope."""
        return {
            "query": self.query,
            "total": self.total,
            "products": [p.to_dict() for p in self.products],
            "bySource": dict(self.by_source),
        }


def _load_provider_class(dotted_path: str) -> type[BaseProvider]:
    """Dynamically import a provider class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[BaseProvider] = getattr(module, class_name)
    return cls


def build_providers(settings: Settings) -> dict[str, BaseProvider]:
    """Instantiate every registered provider, keyed by source id."""
    return {
        src["id"]: _load_provider_class(src["provider"])(settings)
        for src in Settings.AVAILABLE_SOURCES
    }


class SearchOrchestrator:
    """Coordinates provider calls for single-source and combined search.

    Combined search isolates failures per provider: a failed provider
    is reported in ``by_source`` as ``{"error": ...}`` and the others
    still contribute. Only when every dispatched provider fails does
    the combined search itself raise.
    """

    def __init__(
        self,
        settings: Settings,
        providers: dict[str, BaseProvider] | None = None,
    ) -> None:
        self.settings = settings
        self.providers = (
            providers
            if providers is not None
            else build_providers(settings)
        )

    # ── Private helpers ──────────────────────────────────

    def _provider(self, source_id: str) -> BaseProvider:
        try:
            return self.providers[source_id]
        except KeyError:
            msg = f"Unknown source: {source_id}"
            raise ValidationError(msg) from None

    def combined_sources(self) -> list[str]:
        """Source ids dispatched by combined search, in merge order."""
        sources = [
            s for s in REQUIRED_COMBINED_SOURCES if s in self.providers
        ]
        ebay = self.providers.get("ebay")
        if ebay is not None and not ebay.missing_settings():
            sources.append("ebay")
        return sources

    async def _run_providers(
        self,
        query: str,
        source_ids: list[str],
    ) -> list[ProviderOutcome]:
        """Dispatch providers concurrently and tag each outcome.

        Outcomes come back in the order of *source_ids*.
        """
        tasks = [
            asyncio.to_thread(self.providers[sid].search, query)
            for sid in source_ids
        ]
        batches = await asyncio.gather(*tasks, return_exceptions=True)

        outcomes: list[ProviderOutcome] = []
        for sid, batch in zip(source_ids, batches):
            if isinstance(batch, UpstreamError):
                logger.error(
                    "Provider %s failed for query '%s': %s",
                    sid,
                    query,
                    batch,
                )
                outcomes.append(ProviderOutcome(sid, error=batch))
            elif isinstance(batch, BaseException):
                # Anything unexpected is a programming error; surface it
                raise batch
            else:
                outcomes.append(ProviderOutcome(sid, products=batch))
        return outcomes

    # ── Public API ───────────────────────────────────────

    async def fetch_raw(
        self, source_id: str, query: str,
    ) -> dict[str, Any]:
        """Return one provider's untransformed upstream payload."""
        provider = self._provider(source_id)
        provider.validate_config()
        return await asyncio.to_thread(provider.fetch_raw, query)

    async def search_source(
        self, source_id: str, query: str,
    ) -> list[Product]:
        """Search a single provider and return normalized products."""
        provider = self._provider(source_id)
        provider.validate_config()
        return await asyncio.to_thread(provider.search, query)

    async def combined_search(self, query: str) -> SearchResult:
        """Search every combined provider concurrently and merge.

        Configuration for all dispatched providers is validated before
        any upstream call. Products keep provider order (Amazon, then
        Walmart, then eBay when enabled).
        """
        source_ids = self.combined_sources()
        missing: list[str] = []
        for sid in source_ids:
            for name in self.providers[sid].missing_settings():
                if name not in missing:
                    missing.append(name)
        if missing:
            raise ConfigurationError(missing)

        outcomes = await self._run_providers(query, source_ids)

        result = SearchResult(query=query)
        for outcome in outcomes:
            if outcome.error is None:
                result.products.extend(outcome.products)
                result.by_source[outcome.source] = len(outcome.products)
            else:
                result.by_source[outcome.source] = {
                    "error": outcome.error.public_message,
                }

        if outcomes and all(not o.ok for o in outcomes):
            raise UpstreamError(
                "combined",
                "; ".join(str(o.error) for o in outcomes),
                public_message=COMBINED_FAILURE_MESSAGE,
            )

        if result.failed_sources:
            logger.warning(
                "Partial result for '%s': failed sources %s",
                query,
                ", ".join(result.failed_sources),
            )
        return result
