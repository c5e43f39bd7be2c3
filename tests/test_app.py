# tests/test_app.py

"""Route tests for the HTTP API using FastAPI's TestClient."""

import unittest
from typing import Any
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from src.api.app import create_app
from src.config.settings import Settings
from src.models.errors import UpstreamError
from src.providers.amazon_provider import AmazonProvider
from src.providers.ebay_provider import EbayProvider
from src.providers.walmart_provider import WalmartProvider
from src.services.search_orchestrator import SearchOrchestrator


def _full_settings() -> Settings:
    """Amazon and Walmart configured; eBay left out."""
    return Settings(
        scraper_api_key="k",
        walmart_structured_url="https://walmart.test/search",
        amazon_tag="mytag-20",
    )


AMAZON_PAYLOAD: dict[str, Any] = {
    "results": [
        {
            "asin": "B001",
            "title": "Mouse X",
            "url": "http://a.co/d/123",
            "price": {"value": 19.99, "currency": "USD"},
            "rating": 4.5,
            "reviews_count": 120,
        },
    ],
}

WALMART_PAYLOAD: dict[str, Any] = {
    "items": [
        {
            "id": "W1",
            "name": "Mouse Y",
            "price": "invalid",
            "rating": {"average_rating": 4.0, "number_of_reviews": 5},
        },
    ],
}


def _session(payload: Any = None, status: int = 200) -> MagicMock:
    """Build a session whose GET returns *payload* as JSON."""
    session = MagicMock()
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = payload if payload is not None else {}
    resp.text = "secret upstream detail"
    session.get.return_value = resp
    return session


class _AppTestCase(unittest.TestCase):
    """Builds an app whose providers talk to mocked sessions."""

    def _client(
        self,
        settings: Settings | None = None,
        amazon: MagicMock | None = None,
        walmart: MagicMock | None = None,
        ebay: MagicMock | None = None,
    ) -> TestClient:
        if settings is None:
            settings = _full_settings()
        self.amazon_session = amazon or _session(AMAZON_PAYLOAD)
        self.walmart_session = walmart or _session(WALMART_PAYLOAD)
        self.ebay_session = ebay or _session({"itemSummaries": []})
        orchestrator = SearchOrchestrator(
            settings,
            providers={
                "amazon": AmazonProvider(settings, self.amazon_session),
                "walmart": WalmartProvider(settings, self.walmart_session),
                "ebay": EbayProvider(settings, self.ebay_session),
            },
        )
        return TestClient(
            create_app(settings, orchestrator),
            raise_server_exceptions=False,
        )

    def _assert_no_upstream_calls(self) -> None:
        self.amazon_session.get.assert_not_called()
        self.walmart_session.get.assert_not_called()
        self.ebay_session.get.assert_not_called()


class TestHealthRoutes(_AppTestCase):
    """Static liveness routes."""

    def test_root(self) -> None:
        """GET / answers with plain text."""
        resp = self._client().get("/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.text, "Shopping AI Backend is running!")

    def test_ping(self) -> None:
        """GET /ping returns pong."""
        resp = self._client().get("/ping")
        self.assertEqual(resp.json(), {"message": "pong"})

    def test_api_test(self) -> None:
        """GET /api/test confirms the API is up."""
        resp = self._client().get("/api/test")
        self.assertEqual(resp.json(), {"message": "API is working!"})

    def test_api_health(self) -> None:
        """GET /api/health lists provider readiness."""
        data = self._client().get("/api/health").json()
        statuses = {p["source"]: p["status"] for p in data["providers"]}
        self.assertEqual(
            statuses,
            {"amazon": "ok", "walmart": "ok", "ebay": "unconfigured"},
        )


class TestMissingQuery(_AppTestCase):
    """400 before any upstream call on every search route."""

    ROUTES = (
        "/api/search/amazon",
        "/api/search/walmart-simple",
        "/api/search/ebay",
        "/api/search",
    )

    def test_missing_query(self) -> None:
        """No query parameter yields 400 Missing query."""
        client = self._client()
        for route in self.ROUTES:
            with self.subTest(route=route):
                resp = client.get(route)
                self.assertEqual(resp.status_code, 400)
                self.assertEqual(resp.json(), {"error": "Missing query"})
        self._assert_no_upstream_calls()

    def test_blank_query(self) -> None:
        """A whitespace-only query is treated as missing."""
        client = self._client()
        for route in self.ROUTES:
            with self.subTest(route=route):
                resp = client.get(route, params={"query": "  "})
                self.assertEqual(resp.status_code, 400)
        self._assert_no_upstream_calls()

    def test_missing_query_wins_over_missing_config(self) -> None:
        """Query validation happens before configuration checks."""
        resp = self._client(settings=Settings()).get("/api/search")
        self.assertEqual(resp.status_code, 400)


class TestAmazonRoute(_AppTestCase):
    """GET /api/search/amazon (raw payload)."""

    def test_success(self) -> None:
        """The raw upstream payload is wrapped in the envelope."""
        resp = self._client().get(
            "/api/search/amazon", params={"query": "mouse"}
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json(),
            {"success": True, "query": "mouse", "data": AMAZON_PAYLOAD},
        )

    def test_missing_key(self) -> None:
        """No SCRAPER_API_KEY yields the documented 500."""
        client = self._client(settings=Settings())
        resp = client.get("/api/search/amazon", params={"query": "mouse"})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(
            resp.json(), {"error": "SCRAPER_API_KEY missing in .env"}
        )
        self._assert_no_upstream_calls()

    def test_upstream_failure_is_generic(self) -> None:
        """Upstream detail is not leaked to the client."""
        client = self._client(amazon=_session(status=502))
        resp = client.get("/api/search/amazon", params={"query": "mouse"})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Amazon API request failed"})
        self.assertNotIn("secret", resp.text)


class TestWalmartRoute(_AppTestCase):
    """GET /api/search/walmart-simple."""

    def test_success(self) -> None:
        """Products are normalized in the per-source envelope."""
        resp = self._client().get(
            "/api/search/walmart-simple", params={"query": "mouse"}
        )
        data = resp.json()
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(data["source"], "walmart")
        self.assertEqual(data["total"], 1)
        self.assertIsNone(data["products"][0]["price"])
        self.assertEqual(data["products"][0]["title"], "Mouse Y")

    def test_missing_base_url(self) -> None:
        """Missing WALMART_STRUCTURED_URL is a 500 naming the var."""
        client = self._client(settings=Settings(scraper_api_key="k"))
        resp = client.get(
            "/api/search/walmart-simple", params={"query": "mouse"}
        )
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(
            resp.json(), {"error": "WALMART_STRUCTURED_URL missing in .env"}
        )

    def test_upstream_failure_message(self) -> None:
        """Walmart upstream errors keep the route's own message."""
        client = self._client(walmart=_session(status=503))
        resp = client.get(
            "/api/search/walmart-simple", params={"query": "mouse"}
        )
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Walmart simple API failed"})
        self.assertNotIn("secret", resp.text)


class TestEbayRoute(_AppTestCase):
    """GET /api/search/ebay."""

    def test_missing_token(self) -> None:
        """No EBAY_OAUTH_TOKEN yields a 500 naming the var."""
        resp = self._client().get(
            "/api/search/ebay", params={"query": "mouse"}
        )
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(
            resp.json(), {"error": "EBAY_OAUTH_TOKEN missing in .env"}
        )

    def test_success(self) -> None:
        """Configured eBay returns normalized products."""
        settings = Settings(ebay_oauth_token="tok")
        ebay = _session(
            {"itemSummaries": [{"itemId": "1", "title": "Old Mouse"}]}
        )
        resp = self._client(settings=settings, ebay=ebay).get(
            "/api/search/ebay", params={"query": "mouse"}
        )
        data = resp.json()
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(data["source"], "ebay")
        self.assertEqual(data["products"][0]["title"], "Old Mouse")


class TestCombinedRoute(_AppTestCase):
    """GET /api/search."""

    def test_example_envelope(self) -> None:
        """The wireless mouse example merges in provider order."""
        resp = self._client().get(
            "/api/search", params={"query": "wireless mouse"}
        )
        data = resp.json()

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(data["query"], "wireless mouse")
        self.assertEqual(data["total"], 2)
        self.assertEqual(data["bySource"], {"amazon": 1, "walmart": 1})
        self.assertEqual(
            [p["source"] for p in data["products"]], ["amazon", "walmart"]
        )
        self.assertEqual(
            data["products"][0]["url"], "http://a.co/d/123?tag=mytag-20"
        )

    def test_amazon_failure_returns_partial(self) -> None:
        """Amazon down, Walmart up: 200 with Amazon marked failed."""
        client = self._client(amazon=_session(status=500))
        data = client.get("/api/search", params={"query": "mouse"}).json()

        self.assertEqual(data["total"], 1)
        self.assertEqual(
            data["bySource"]["amazon"],
            {"error": "Amazon API request failed"},
        )
        self.assertEqual(data["bySource"]["walmart"], 1)

    def test_all_failed(self) -> None:
        """Both providers down yields the combined failure message."""
        client = self._client(
            amazon=_session(status=500), walmart=_session(status=500)
        )
        resp = client.get("/api/search", params={"query": "mouse"})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Combined search failed"})

    def test_missing_config(self) -> None:
        """Missing SCRAPER_API_KEY fails before any upstream call."""
        settings = Settings(walmart_structured_url="https://w.test")
        client = self._client(settings=settings)
        resp = client.get("/api/search", params={"query": "mouse"})

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(
            resp.json(), {"error": "SCRAPER_API_KEY missing in .env"}
        )
        self._assert_no_upstream_calls()

    def test_every_missing_variable_named(self) -> None:
        """With nothing configured the error names both variables."""
        client = self._client(settings=Settings())
        resp = client.get("/api/search", params={"query": "mouse"})

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(
            resp.json(),
            {
                "error": "SCRAPER_API_KEY or WALMART_STRUCTURED_URL"
                " missing in .env",
            },
        )
        self._assert_no_upstream_calls()


class TestUnexpectedErrors(_AppTestCase):
    """Unhandled exceptions map to a generic JSON 500."""

    def test_internal_error(self) -> None:
        """A provider bug surfaces as Internal server error."""
        client = self._client()
        orchestrator = client.app.state.orchestrator  # type: ignore[attr-defined]
        orchestrator.providers["walmart"] = MagicMock()
        orchestrator.providers["walmart"].search.side_effect = RuntimeError
        resp = client.get(
            "/api/search/walmart-simple", params={"query": "mouse"}
        )
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Internal server error"})

    def test_upstream_error_class_maps_to_500(self) -> None:
        """UpstreamError defaults to status 500."""
        self.assertEqual(UpstreamError("x", "y").status_code, 500)


if __name__ == "__main__":
    unittest.main()
