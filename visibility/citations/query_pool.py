"""Default battery of category questions asked to every LLM backend."""

from __future__ import annotations

from dataclasses import dataclass

_BASE_QUESTIONS: tuple[str, ...] = (
    "top companies in {industry}",
    "best tools in {industry}",
    "leading vendors in {industry}",
    "alternatives and competitors in {industry}",
    "who are the leaders in {industry}",
    "recommended solutions in {industry}",
)

_FALLBACK_INDUSTRY = "this category"


@dataclass
class GeoContext:
    """Location and comparison targets for the geo/product prompt bank."""

    city: str = ""
    region: str = ""
    country: str = ""
    competitor_a: str = ""
    competitor_b: str = ""

    @property
    def label(self) -> str:
        return "/".join(p for p in (self.city, self.region, self.country) if p)


def geo_prompt_bank(
    product: str = "",
    category: str = "",
    geo: GeoContext | None = None,
    competitor_a: str = "",
    competitor_b: str = "",
) -> list[str]:
    """Thirty purchase-intent questions, localized when *geo* is given."""
    loc = geo.label if geo else ""
    loc_in = f" in {loc}" if loc else ""
    loc_for = f" for {loc}" if loc else ""
    p = product or "[product]"
    cat = category or "[product category]"
    a = competitor_a or "[competitor A]"
    b = competitor_b or "[competitor B]"

    return [
        f"Best website to buy {p} online{loc_in}",
        f"Top {cat} ecommerce stores{loc_in}",
        f"Trusted online stores for {p}{loc_in}",
        f"Affordable {p} retailers online{loc_in}",
        f"Where can I buy high-quality {p} with warranty{loc_in}?",
        f"Most reliable ecommerce websites for {cat}{loc_in}",
        f"Which online store has the best reviews for {p}{loc_in}?",
        f"Is {a} a trusted site for {p}{loc_in}?",
        f"Best-rated ecommerce platforms for {p}{loc_for}",
        f"Where do experts recommend buying {p}{loc_in}?",
        f"Cheapest place to buy {p} online{loc_in}",
        f"Best deals on {cat} ecommerce websites{loc_in}",
        f"{p} price comparison: Amazon vs {a} vs others{loc_in}",
        f"Does {a} offer discounts on {p}{loc_in}?",
        f"Best value-for-money online store for {p}{loc_in}",
        f"Fastest delivery for {p}{loc_in}",
        f"Ecommerce websites with free shipping for {p}{loc_in}",
        f"Best return policies for {p} online{loc_in}",
        f"Where can I get same-day delivery for {p}{loc_in}?",
        f"Which online store has the best customer service for {p}{loc_in}?",
        f"Compare {a} vs {b} for {p}{loc_in}",
        f"Is {a} better than Amazon for {p}{loc_in}?",
        f"Which online store is more reliable: {a} or {b} for {p}{loc_in}?",
        f"Best alternatives to {a} for {p}{loc_in}",
        f"Which ecommerce site has the most product variety for {p}{loc_in}?",
        f"Best local online store for {p}{loc_in}",
        f"Where can I buy {p} from local sellers{loc_in}?",
        f"{p} ecommerce websites that deliver to {loc or '[city/country]'}",
        f"Most popular ecommerce site for {p}{loc_in}",
        f"Which online store near me sells {p} with delivery{loc_in}?",
    ]


def default_query_pool(
    industry: str = "",
    geo: GeoContext | None = None,
    company_name: str = "",
    product: str = "",
) -> list[str]:
    """Six base category questions followed by the geo/product bank.

    Duplicates (case-insensitive, trimmed) are dropped, first one wins.
    """
    category = industry.strip() if industry and industry.strip() else _FALLBACK_INDUSTRY
    competitor_a = (geo.competitor_a if geo else "") or company_name or "[competitor name]"
    competitor_b = (geo.competitor_b if geo else "") or "Amazon"

    merged = [q.format(industry=category) for q in _BASE_QUESTIONS]
    merged += geo_prompt_bank(
        product=product or "[product]",
        category=category,
        geo=geo,
        competitor_a=competitor_a,
        competitor_b=competitor_b,
    )

    pool: list[str] = []
    seen: set[str] = set()
    for q in merged:
        key = q.strip().lower()
        if key not in seen:
            seen.add(key)
            pool.append(q)
    return pool
