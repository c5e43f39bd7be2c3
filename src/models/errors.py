# src/models/errors.py

"""Error taxonomy for search requests.

Each kind maps to one HTTP status at the API boundary:
``ValidationError`` → 400, ``ConfigurationError`` and
``UpstreamError`` → 500.
"""


class SearchError(Exception):
    """Base class for all expected search failures."""

    status_code: int = 500

    @property
    def public_message(self) -> str:
        """Message safe to return to API clients."""
        return str(self)


class ValidationError(SearchError):
    """A request parameter is missing or invalid."""

    status_code = 400


class ConfigurationError(SearchError):
    """Required configuration is absent.

    The message names the missing environment variable(s).
    """

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"{' or '.join(self.missing)} missing in .env")


class UpstreamError(SearchError):
    """A provider call failed or returned a non-success status.

    ``detail`` carries the upstream message for server-side logs only;
    clients receive :attr:`public_message`.
    """

    def __init__(
        self,
        provider: str,
        detail: str,
        status: int | None = None,
        public_message: str | None = None,
    ) -> None:
        self.provider = provider
        self.detail = detail
        self.status = status
        self._public_message = (
            public_message or f"{provider} request failed"
        )
        status_part = f" (HTTP {status})" if status is not None else ""
        super().__init__(f"[{provider}] {detail}{status_part}")

    @property
    def public_message(self) -> str:
        return self._public_message
