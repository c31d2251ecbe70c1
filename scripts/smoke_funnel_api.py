#!/usr/bin/env python3
"""
Smoke test for the funnel API: one quote, then one checkout for the cheapest plan.

Start the API first (in another terminal), in mock mode unless you mean to
charge a real card:
  INTEGRATIONS_MODE=mock uvicorn travelfunnel.api.main:app --host 127.0.0.1 --port 8000

Then run this script:
  python scripts/smoke_funnel_api.py
  python scripts/smoke_funnel_api.py --base-url http://127.0.0.1:8000 --origin index
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Dict

import requests


def post_json(url: str, data: Dict[str, Any], timeout: int = 60) -> Any:
    r = requests.post(url, json=data, timeout=timeout)
    r.raise_for_status()
    return r.json()


def get_json(url: str, timeout: int = 30) -> Dict[str, Any]:
    r = requests.get(url, timeout=timeout)
    r.raise_for_status()
    return r.json()


def main() -> int:
    parser = argparse.ArgumentParser(description="Quote and checkout through the funnel API")
    parser.add_argument("--base-url", default="http://localhost:8000", help="API base URL")
    parser.add_argument("--destination", default="1", help="Back-office destination code")
    parser.add_argument("--days", type=int, default=10, help="Trip length in days")
    parser.add_argument("--origin", default=None, help="Pricing-origin tag (sempre_unico, index, ...)")
    parser.add_argument("--lead-id", default="smoke-lead-001", help="Lead identifier")
    parser.add_argument("--payment-method", default="pm_card_visa", help="Payment method token")
    parser.add_argument("--skip-checkout", action="store_true", help="Only request quotes")
    args = parser.parse_args()
    base = args.base_url.rstrip("/")

    print("=== Funnel API smoke test ===\n")
    print(f"Base URL: {base}\n")

    print("1) GET /health")
    try:
        health = get_json(f"{base}/health")
        print(f"   mode: {health.get('integrations_mode')}\n")
    except requests.RequestException as e:
        print(f"   FAIL: {e}")
        if "Connection refused" in str(e) or "Failed to establish" in str(e):
            print("   → Start the API first: uvicorn travelfunnel.api.main:app --host 127.0.0.1 --port 8000")
        return 1

    print("2) POST /api/v1/quotes")
    quote_body: Dict[str, Any] = {"destination": args.destination, "days": args.days, "ages": [34, 67], "tripType": "1"}
    if args.origin:
        quote_body["origin"] = args.origin
    try:
        plans = post_json(f"{base}/api/v1/quotes", quote_body)
    except requests.RequestException as e:
        print(f"   FAIL: {e}\n")
        return 1
    print(f"   {len(plans)} plan(s)")
    for plan in plans[:5]:
        print(f"   - {plan['nome']:<30} {plan['dmh']:<14} bagagem {plan['bagagem']:<10} R$ {plan['originalPriceTotalBRL']:.2f}")
    print()

    if args.skip_checkout or not plans:
        return 0

    cheapest = plans[0]
    print(f"3) POST /api/v1/checkout (plan {cheapest['id']})")
    checkout_body = {
        "paymentMethodId": args.payment_method,
        "leadId": args.lead_id,
        "planId": cheapest["id"],
        "planName": cheapest["nome"],
        "amountBRL": cheapest["originalPriceTotalBRL"],
        "destination": args.destination,
        "dates": {"departure": "2026-12-01", "return": "2026-12-10"},
        "comprador": {"nome": "Maria Silva", "email": "maria@example.com", "telefone": "(11) 98888-7777"},
        "passageiros": [
            {"nome": "Maria", "sobrenome": "Silva", "cpf": "12345678909", "nascimento": "15/03/1991", "sexo": "F"},
            {"nome": "Jose", "sobrenome": "Silva", "cpf": "98765432100", "nascimento": "02/07/1958", "sexo": "M"},
        ],
    }
    try:
        out = post_json(f"{base}/api/v1/checkout", checkout_body)
    except requests.RequestException as e:
        print(f"   FAIL: {e}\n")
        return 1
    print(f"   voucher: {out.get('voucherNumber')}")
    print(f"   link:    {out.get('downloadLink')}")
    print(f"   eSIM:    {out.get('ezsimStatus')}\n")

    print("=== Done ===")
    return 0


if __name__ == "__main__":
    sys.exit(main())
