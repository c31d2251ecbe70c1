"""
Integration clients.

- mocks/: in-process clients with canned data, selected with INTEGRATIONS_MODE=mock
- real_http/: httpx clients for the insurance back-office, payment ingestion and eSIM provider
"""
