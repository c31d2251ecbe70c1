"""
Coverage rules - medical coverage, origin filtering and baggage limits.

Pure functions; the thresholds come from FunnelRules (config/funnel_rules.yml).
"""

import re
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from travelfunnel.integrations.contracts.interfaces import PlanCandidate
from travelfunnel.utils.config_loader import BaggageTier, OriginTier

# Plan names carry the coverage as "60", "150" or "1.000.000"; bare numbers are
# read as their first 2-3 digits, in thousands of USD ("1000" is 100 000).
_NAME_AMOUNT_RE = re.compile(r"\d{1,3}(?:[.,]\d{3})+|\d{2,3}")
# Descriptions spell the full amount out.
_DESCRIPTION_AMOUNT_RE = re.compile(r"\d{1,3}(?:[.,]\d{3})+|\d{4,}")


def _to_int(match: str) -> int:
    return int(re.sub(r"[.,]", "", match))


def extract_coverage_value(name: Optional[str], description: Optional[str] = None) -> int:
    """Medical coverage in USD for a listed plan, 0 when neither text has a number."""
    found = _NAME_AMOUNT_RE.search(name or "")
    if found:
        value = _to_int(found.group(0))
        return value * 1000 if value < 1000 else value

    found = _DESCRIPTION_AMOUNT_RE.search(description or "")
    if found:
        return _to_int(found.group(0))
    return 0


def filter_by_origin(
    plans: Iterable[Tuple[PlanCandidate, int]],
    origin: Optional[str],
    tiers: Dict[str, OriginTier],
) -> List[Tuple[PlanCandidate, int]]:
    """Keep (plan, coverage) pairs inside the coverage window of `origin`.

    Unknown or missing origins keep everything.
    """
    tier = tiers.get(origin) if origin else None
    if tier is None:
        return list(plans)
    return [(plan, coverage) for plan, coverage in plans if tier.accepts(coverage)]


def baggage_limit(coverage: int, tiers: Sequence[BaggageTier]) -> int:
    """Limit of the highest threshold reached; tiers are sorted ascending."""
    limit = tiers[0].limit
    for tier in tiers:
        if coverage >= tier.min_coverage:
            limit = tier.limit
    return limit


def baggage_label(coverage: int, tiers: Sequence[BaggageTier]) -> str:
    return format_usd(baggage_limit(coverage, tiers))


def format_usd(amount: int) -> str:
    """60000 -> "USD 60.000" """
    return "USD " + f"{amount:,}".replace(",", ".")
