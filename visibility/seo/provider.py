"""Pluggable source of external SEO / rating metrics for a domain."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class SeoMetrics:
    domain: str
    domain_authority: float = 0.0  # 0..100
    organic_traffic: int = 0  # monthly visits
    backlinks: int = 0
    customer_rating: float = 0.0  # 0..5
    source: str = "none"

    def to_dict(self) -> dict:
        return {
            "domain": self.domain,
            "domainAuthority": self.domain_authority,
            "organicTraffic": self.organic_traffic,
            "backlinks": self.backlinks,
            "customerRating": self.customer_rating,
            "source": self.source,
        }


class SeoMetricsProvider(ABC):
    """Fetch SEO metrics for one domain. Implementations wrap a real analytics API."""

    name: str = "unknown"

    @abstractmethod
    async def get_metrics(self, domain: str) -> SeoMetrics:
        ...


class NullSeoMetricsProvider(SeoMetricsProvider):
    """Zero metrics for every domain; used when no analytics API is wired in."""

    name = "none"

    async def get_metrics(self, domain: str) -> SeoMetrics:
        return SeoMetrics(domain=normalize_domain(domain), source=self.name)


def normalize_domain(value: str) -> str:
    """``https://www.Example.com/path`` → ``example.com``."""
    host = (value or "").strip().lower()
    for prefix in ("https://", "http://"):
        if host.startswith(prefix):
            host = host[len(prefix):]
    host = host.split("/", 1)[0].split(":", 1)[0]
    return host[4:] if host.startswith("www.") else host
