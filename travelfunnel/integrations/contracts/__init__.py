"""
Contracts (data models).

This folder defines the request/response shapes for external integrations:
- quote requests, plan candidates and priced plans (insurance back-office)
- checkout requests and the per-step results of a checkout
- payment-ingestion payloads
- eSIM catalogue bundles

Both mock and real HTTP clients use these contracts, so the flows rely on
stable models rather than on ad-hoc dicts.
"""
