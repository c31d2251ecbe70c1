"""
Integrations layer.
This package contains all code used to communicate with external systems:
- Insurance back-office SOAP service (plan listing, pricing, order record/issue)
- Payment-ingestion endpoint (card charges)
- eSIM provider REST API (auth, price list, cart, sales order)

Key rule:
- Flows MUST NOT call external APIs directly.
- Flows call integration clients (under travelfunnel/integrations/clients).
- MOCK clients are used in development and REAL_HTTP clients in production.

Switching implementations:
- The selection of mock vs real clients happens in ONE place (travelfunnel/api/dependencies.py).
"""

from .contracts.interfaces import (
    AgeBracketTally,
    Buyer,
    CheckoutReport,
    CheckoutRequest,
    IssuanceResult,
    IssuanceStatus,
    LeadStatus,
    PaymentConfirmation,
    PlanCandidate,
    PricedPlan,
    ProvisioningResult,
    ProvisioningStatus,
    QuoteRequest,
    TravelDates,
    Traveler,
    bracket_for_age,
)
from .contracts.payments import amount_to_cents, build_ingestion_payload
from .contracts.esim_catalogue import BundleSelector, EsimBundle, select_bundle

__all__ = [
    # interfaces
    "AgeBracketTally", "Buyer", "CheckoutReport", "CheckoutRequest",
    "IssuanceResult", "IssuanceStatus", "LeadStatus", "PaymentConfirmation",
    "PlanCandidate", "PricedPlan", "ProvisioningResult", "ProvisioningStatus",
    "QuoteRequest", "TravelDates", "Traveler", "bracket_for_age",
    # payments
    "amount_to_cents", "build_ingestion_payload",
    # esim catalogue
    "BundleSelector", "EsimBundle", "select_bundle",
]
