from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

"""
eSIM catalogue contract.

Defines the bundle shape returned by the provider's price list and the rules
used to pick the bundle sold with every travel policy.

Used by both:
- clients/mocks/esim.py (local price list for development)
- clients/real_http/esim.py (provider REST API)
"""


@dataclass
class EsimBundle:
    bundle_id: Optional[str]
    name: Optional[str] = None
    description: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "EsimBundle":
        return cls(
            bundle_id=str(raw["id"]) if raw.get("id") is not None else None,
            name=raw.get("name"),
            description=raw.get("description"),
            metadata=raw,
        )


@dataclass
class BundleSelector:
    """Exact plan name first, then a keyword match over descriptions."""
    target_plan: str
    fallback_keywords: Sequence[str] = ("Global", "2GB")


def select_bundle(bundles: List[EsimBundle], selector: BundleSelector) -> Optional[EsimBundle]:
    bundles = [bundle for bundle in bundles if bundle.bundle_id]
    for bundle in bundles:
        if bundle.description == selector.target_plan or bundle.name == selector.target_plan:
            return bundle

    for bundle in bundles:
        description = bundle.description or ""
        if description and all(keyword in description for keyword in selector.fallback_keywords):
            return bundle

    return None
