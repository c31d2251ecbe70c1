"""
Funnel flows.

- quotation: list, filter and price plans for the storefront
- checkout: charge, issue the policy, provision the eSIM, update the lead
"""
