# src/services/health_checker.py

"""Provider configuration readiness checks."""

import logging
from dataclasses import dataclass, field

from src.config.settings import Settings
from src.providers.base_provider import BaseProvider
from src.services.search_orchestrator import (
    REQUIRED_COMBINED_SOURCES,
    build_providers,
)

logger = logging.getLogger("shopping_ai.health")


@dataclass
class HealthResult:
    """Readiness of a single provider."""

    source_id: str
    status: str  # "ok", "unconfigured"
    required: bool
    missing: list[str] = field(
        default_factory=lambda: list[str]()
    )

    def to_dict(self) -> dict[str, object]:
        return {
            "source": self.source_id,
            "status": self.status,
            "required": self.required,
            "missing": list(self.missing),
        }


def probe_provider(source_id: str, provider: BaseProvider) -> HealthResult:
    """Report whether a provider has everything it needs to run.

    No upstream call is made; probing a paid API would cost credits.
    """
    missing = provider.missing_settings()
    return HealthResult(
        source_id=source_id,
        status="unconfigured" if missing else "ok",
        required=source_id in REQUIRED_COMBINED_SOURCES,
        missing=missing,
    )


class HealthChecker:
    """Checks configuration readiness of every registered provider."""

    def __init__(
        self,
        settings: Settings,
        providers: dict[str, BaseProvider] | None = None,
    ) -> None:
        self.providers = (
            providers
            if providers is not None
            else build_providers(settings)
        )

    def check_all(self) -> list[HealthResult]:
        """Probe every provider in registry order."""
        results = [
            probe_provider(sid, provider)
            for sid, provider in self.providers.items()
        ]
        for r in results:
            logger.info(
                "Health check %s: %s %s",
                r.source_id,
                r.status,
                ", ".join(r.missing),
            )
        return results
