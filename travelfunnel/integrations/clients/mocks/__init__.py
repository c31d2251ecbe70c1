"""
Mock integration clients.

These clients return fake (but realistic) responses without calling any external API.
They are used when:
- Vendor credentials are not available on a development machine
- We want to walk the storefront through quote and checkout without charging a card

Important:
- Mock clients must follow the SAME interface as real HTTP clients.
- Mock clients should return data shaped according to travelfunnel/integrations/contracts/*

Switching to real:
Set INTEGRATIONS_MODE=real (the default); travelfunnel/api/dependencies.py then
wires clients/real_http/* instead.
"""

from .coris import MockCorisClient
from .esim import MockEsimClient
from .payments import MockPaymentsClient

__all__ = ["MockCorisClient", "MockEsimClient", "MockPaymentsClient"]
