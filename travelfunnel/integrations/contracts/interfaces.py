from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class IssuanceStatus(str, Enum):
    ISSUED = "issued"
    DEGRADED = "degraded"


class ProvisioningStatus(str, Enum):
    PENDING = "pending"
    ISSUED = "issued"
    ERROR = "error"


class LeadStatus(str, Enum):
    PAYMENT_FAILED = "pagamento_falhou"
    COMPLETED = "venda_concluida"


# ---------------------------------------------------------------------------
# Quote side
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class QuoteRequest:
    destination: str
    days: int
    ages: List[int]
    trip_type: Optional[str] = None
    origin: Optional[str] = None          # pricing-origin tag, selects the filter tier


@dataclass(frozen=True)
class AgeBracketTally:
    """Traveller counts per vendor age bracket (<=65, <=70, <=75, <=80, <=85)."""
    pax065: int = 0
    pax070: int = 0
    pax075: int = 0
    pax080: int = 0
    pax085: int = 0

    @classmethod
    def from_ages(cls, ages: List[int]) -> "AgeBracketTally":
        counts = {label: 0 for label in BRACKET_LABELS}
        for age in ages:
            counts[bracket_for_age(age)] += 1
        return cls(**counts)

    def as_params(self) -> Dict[str, int]:
        return {label: getattr(self, label) for label in BRACKET_LABELS}

    @property
    def total(self) -> int:
        return sum(self.as_params().values())


BRACKET_LABELS = ("pax065", "pax070", "pax075", "pax080", "pax085")
_BRACKET_LIMITS = ((65, "pax065"), (70, "pax070"), (75, "pax075"), (80, "pax080"))


def bracket_for_age(age: int) -> str:
    for limit, label in _BRACKET_LIMITS:
        if age <= limit:
            return label
    # anything above 80, including > 85, is priced in the last bracket
    return "pax085"


@dataclass
class PlanCandidate:
    plan_id: str
    name: str
    attributes: Dict[str, str] = field(default_factory=dict)

    @property
    def description(self) -> Optional[str]:
        return self.attributes.get("descricao") or self.attributes.get("dmh")


@dataclass(frozen=True)
class PricedPlan:
    plan_id: str
    name: str
    coverage_amount: int
    coverage_label: str                   # e.g. "USD 60.000"
    baggage_label: str                    # e.g. "USD 1.500"
    total_price: Decimal                  # BRL, all travellers
    trip_type_id: Optional[str] = None
    per_person_price: Optional[Decimal] = None

    def to_dict(self) -> Dict[str, Any]:
        """Storefront shape of a quoted plan."""
        return {
            "id": self.plan_id,
            "nome": self.name,
            "dmh": self.coverage_label,
            "bagagem": self.baggage_label,
            "coverageAmount": self.coverage_amount,
            "originalPriceTotalBRL": float(self.total_price),
            "tripTypeId": self.trip_type_id,
        }


# ---------------------------------------------------------------------------
# Checkout side
# ---------------------------------------------------------------------------

@dataclass
class Buyer:
    name: str
    email: str
    phone: Optional[str] = None
    address: Optional[Dict[str, Any]] = None
    raw: Dict[str, Any] = field(default_factory=dict)   # forwarded untouched to payment ingestion


@dataclass
class Traveler:
    first_name: str
    surname: str
    national_id: str
    birth_date: str                       # YYYY-MM-DD or DD/MM/YYYY
    sex: str
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class TravelDates:
    departure: str
    return_date: str


@dataclass
class CheckoutRequest:
    payment_method_id: str
    lead_id: str
    amount: Decimal                       # BRL
    plan_id: Optional[str] = None
    plan_name: Optional[str] = None
    destination: Optional[str] = None
    buyer: Optional[Buyer] = None
    travelers: List[Traveler] = field(default_factory=list)
    dates: Optional[TravelDates] = None
    contact_phone: Optional[str] = None


@dataclass
class PaymentConfirmation:
    confirmation_id: str
    raw: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.utcnow)


ISSUANCE_FAILED_VOUCHER = "ISSUANCE_FAILED"


@dataclass
class IssuanceResult:
    status: IssuanceStatus
    voucher: str
    download_link: str
    order_id: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def degraded(cls, reason: str) -> "IssuanceResult":
        return cls(
            status=IssuanceStatus.DEGRADED,
            voucher=ISSUANCE_FAILED_VOUCHER,
            download_link="#",
            error=reason,
        )


@dataclass
class ProvisioningResult:
    status: ProvisioningStatus
    payload: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == ProvisioningStatus.ISSUED

    def summary(self) -> str:
        if self.error:
            details = f"Error: {self.error}"
        elif self.payload is not None:
            details = _compact_json(self.payload)
        else:
            details = ""
        return f"eSIM: {self.status.value}. Details: {details[:100]}"


@dataclass
class CheckoutReport:
    lead_id: str
    payment: PaymentConfirmation
    issuance: IssuanceResult
    provisioning: ProvisioningResult

    @property
    def degraded(self) -> bool:
        return self.issuance.status == IssuanceStatus.DEGRADED or not self.provisioning.success

    def to_response(self) -> Dict[str, Any]:
        return {
            "success": True,
            "voucherNumber": self.issuance.voucher,
            "downloadLink": self.issuance.download_link,
            "ezsimStatus": self.provisioning.status.value,
        }


def _compact_json(payload: Any) -> str:
    return json.dumps(payload, default=str, separators=(",", ":"))
