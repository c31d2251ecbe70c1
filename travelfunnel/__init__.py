"""
Travel funnel backend.

Two request pipelines sit behind the storefront:
- quote aggregation over the insurance back-office SOAP service
- checkout orchestration (payment ingestion -> policy issuance -> eSIM provisioning)

External systems are reached only through travelfunnel.integrations.
"""
