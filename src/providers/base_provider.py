# src/providers/base_provider.py

"""Abstract base class for all upstream search providers."""

import logging
from abc import ABC, abstractmethod
from typing import Any

from curl_cffi import CurlError
from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.models.errors import ConfigurationError, UpstreamError
from src.models.product import Product

# Longest upstream body excerpt written to the log on failure
_BODY_EXCERPT = 300


class BaseProvider(ABC):
    """Wraps one upstream search API and maps it to :class:`Product`.

    Each call is a single attempt bounded by
    ``Settings.request_timeout``; there are no retries.
    """

    source_name: str = ""
    label: str = ""

    def __init__(
        self,
        settings: Settings,
        session: curl_requests.Session | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logging.getLogger(
            f"shopping_ai.{self.source_name}"
        )
        self.session = session or curl_requests.Session()

    # ── Configuration ────────────────────────────────────

    @abstractmethod
    def required_settings(self) -> dict[str, str | None]:
        """Map env var names to the configured values this provider needs."""
        ...

    def missing_settings(self) -> list[str]:
        """Return the env var names that are not configured."""
        return [
            name
            for name, value in self.required_settings().items()
            if not value
        ]

    def validate_config(self) -> None:
        """Raise ConfigurationError before any network call is made."""
        missing = self.missing_settings()
        if missing:
            raise ConfigurationError(missing)

    @property
    def public_error(self) -> str:
        """Generic client-facing message for upstream failures."""
        return f"{self.label} API request failed"

    # ── Transport ────────────────────────────────────────

    def _fetch_json(
        self,
        url: str,
        params: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Single GET returning the decoded JSON object.

        Raises UpstreamError on transport errors, non-2xx status, or
        a body that is not a JSON object.
        """
        try:
            resp = self.session.get(
                url,
                params=params,
                headers=headers,
                timeout=self.settings.request_timeout,
            )
        except CurlError as exc:
            self.logger.error(
                "[%s] Request error: %s",
                self.source_name,
                exc,
                exc_info=True,
            )
            raise UpstreamError(
                self.source_name,
                str(exc),
                public_message=self.public_error,
            ) from exc

        if not 200 <= resp.status_code < 300:
            excerpt = (resp.text or "")[:_BODY_EXCERPT]
            self.logger.error(
                "[%s] HTTP %d: %s",
                self.source_name,
                resp.status_code,
                excerpt,
            )
            raise UpstreamError(
                self.source_name,
                excerpt or "non-success status",
                status=resp.status_code,
                public_message=self.public_error,
            )

        try:
            payload = resp.json()
        except ValueError as exc:
            self.logger.error(
                "[%s] Invalid JSON body: %s",
                self.source_name,
                exc,
            )
            raise UpstreamError(
                self.source_name,
                f"invalid JSON: {exc}",
                status=resp.status_code,
                public_message=self.public_error,
            ) from exc

        if not isinstance(payload, dict):
            raise UpstreamError(
                self.source_name,
                f"expected JSON object, got {type(payload).__name__}",
                status=resp.status_code,
                public_message=self.public_error,
            )
        return payload

    # ── Mapping helpers ──────────────────────────────────

    @staticmethod
    def _items(payload: dict[str, Any], key: str) -> list[dict[str, Any]]:
        """Return the dict items under *key*, ignoring anything else."""
        items = payload.get(key)
        if not isinstance(items, list):
            return []
        return [item for item in items if isinstance(item, dict)]

    @staticmethod
    def _as_number(value: Any) -> float | None:
        """Return *value* if it is a real number (not a bool), else None."""
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return value
        return None

    @staticmethod
    def _as_count(value: Any) -> int:
        """Coerce a review count like ``120`` or ``"1,234"`` to int, else 0."""
        if isinstance(value, bool):
            return 0
        if isinstance(value, int):
            return max(value, 0)
        if isinstance(value, float):
            return max(int(value), 0)
        if isinstance(value, str):
            digits = value.strip().replace(",", "")
            if digits.isdigit():
                return int(digits)
        return 0

    # ── Public API ───────────────────────────────────────

    @abstractmethod
    def fetch_raw(self, query: str) -> dict[str, Any]:
        """Perform the upstream call and return its JSON payload."""
        ...

    @abstractmethod
    def parse_results(self, payload: dict[str, Any]) -> list[Product]:
        """Map an upstream payload to canonical products."""
        ...

    def search(self, query: str) -> list[Product]:
        """Search the upstream and return normalized products."""
        payload = self.fetch_raw(query)
        products = self.parse_results(payload)
        self.logger.info(
            "[%s] %d products for query '%s'",
            self.source_name,
            len(products),
            query,
        )
        return products
