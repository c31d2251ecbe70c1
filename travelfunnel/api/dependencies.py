"""
Dependency providers for the funnel API.

The choice between mock and real integration clients happens here and only
here (INTEGRATIONS_MODE). Endpoints receive ready-built flows through
FastAPI's Depends, and tests swap them with app.dependency_overrides.
"""

import logging
from functools import lru_cache

from fastapi import Depends

from travelfunnel.flows.checkout import CheckoutFlow
from travelfunnel.flows.issuance import InsuranceIssuanceFlow
from travelfunnel.flows.provisioning import EsimProvisioningFlow
from travelfunnel.flows.quotation import QuotationFlow
from travelfunnel.integrations.clients.mocks import MockCorisClient, MockEsimClient, MockPaymentsClient
from travelfunnel.integrations.clients.real_http import CorisSoapClient, EsimClient, PaymentIngestionClient
from travelfunnel.integrations.contracts.esim_catalogue import BundleSelector
from travelfunnel.utils.config_loader import Settings, load_settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


_lead_store = None


def get_lead_store(settings: Settings = Depends(get_settings)):
    """Real Postgres store when DATABASE_URL is set, else the in-memory stub. Built once per process."""
    global _lead_store
    if _lead_store is not None:
        return _lead_store

    if settings.database_url:
        from travelfunnel.database.postgres_real import LeadStore

        _lead_store = LeadStore(connection_string=settings.database_url)
    else:
        from travelfunnel.database.postgres import LeadStore

        logger.info("DATABASE_URL not set; using in-memory LeadStore stub")
        _lead_store = LeadStore()
    return _lead_store


# Mock clients keep their in-memory state for the life of the process.
@lru_cache(maxsize=1)
def _mock_coris() -> MockCorisClient:
    return MockCorisClient()


@lru_cache(maxsize=1)
def _mock_payments() -> MockPaymentsClient:
    return MockPaymentsClient()


@lru_cache(maxsize=1)
def _mock_esim() -> MockEsimClient:
    return MockEsimClient()


def _insurance_client(settings: Settings):
    if settings.use_real_integrations:
        return CorisSoapClient.from_settings(settings)
    return _mock_coris()


def get_quotation_flow(settings: Settings = Depends(get_settings)) -> QuotationFlow:
    settings.require("quotes")
    return QuotationFlow(_insurance_client(settings), settings.rules)


def get_checkout_flow(
    settings: Settings = Depends(get_settings),
    lead_store=Depends(get_lead_store),
) -> CheckoutFlow:
    settings.require("checkout")
    if settings.use_real_integrations:
        payments = PaymentIngestionClient.from_settings(settings)
        esim = EsimClient.from_settings(settings)
    else:
        payments = _mock_payments()
        esim = _mock_esim()

    esim_rules = settings.rules.esim
    return CheckoutFlow(
        payments_client=payments,
        issuance_flow=InsuranceIssuanceFlow(_insurance_client(settings)),
        provisioning_flow=EsimProvisioningFlow(
            esim,
            BundleSelector(target_plan=esim_rules.target_plan, fallback_keywords=esim_rules.fallback_keywords),
        ),
        lead_store=lead_store,
    )
