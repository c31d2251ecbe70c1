"""Request validation for the two storefront endpoints.

The storefront posts JSON objects. These helpers turn them into contract
objects, collecting every problem into `field_errors` before raising
`ValidationError`, so the API can answer HTTP 400 with all of them at once.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from travelfunnel.errors import ValidationError
from travelfunnel.integrations.contracts.interfaces import (
    Buyer,
    CheckoutRequest,
    QuoteRequest,
    TravelDates,
    Traveler,
)


def _as_str(v: Any) -> str:
    return "" if v is None else str(v)


def _strip(v: Any) -> str:
    return _as_str(v).strip()


def add_error(errors: Dict[str, str], field: str, message: str) -> None:
    if field not in errors:
        errors[field] = message


def require_str(payload: Dict[str, Any], field: str, errors: Dict[str, str], *, label: Optional[str] = None) -> str:
    value = _strip(payload.get(field))
    if not value:
        add_error(errors, field, f"{label or field} is required")
    return value


def optional_str(payload: Dict[str, Any], field: str) -> Optional[str]:
    value = _strip(payload.get(field))
    return value or None


def _to_int(raw: Any) -> int:
    if isinstance(raw, bool):
        raise ValueError("booleans are not numbers")
    if isinstance(raw, float):
        if not raw.is_integer():
            raise ValueError("not a whole number")
        return int(raw)
    return int(_strip(raw))


def parse_int(payload: Dict[str, Any], field: str, errors: Dict[str, str], *, min_value: Optional[int] = None, required: bool = False) -> int:
    raw = payload.get(field)
    if raw is None or _strip(raw) == "":
        if required:
            add_error(errors, field, f"{field} is required")
        return 0
    try:
        val = _to_int(raw)
    except (TypeError, ValueError):
        add_error(errors, field, f"{field} must be a whole number")
        return 0
    if min_value is not None and val < min_value:
        add_error(errors, field, f"{field} must be at least {min_value}")
    return val


def parse_int_list(payload: Dict[str, Any], field: str, errors: Dict[str, str], *, min_value: Optional[int] = None) -> List[int]:
    raw = payload.get(field)
    if not isinstance(raw, list) or not raw:
        add_error(errors, field, f"{field} must be a non-empty list")
        return []
    values: List[int] = []
    for item in raw:
        try:
            val = _to_int(item)
        except (TypeError, ValueError):
            add_error(errors, field, f"{field} must contain whole numbers only")
            return []
        if min_value is not None and val < min_value:
            add_error(errors, field, f"{field} values must be at least {min_value}")
            return []
        values.append(val)
    return values


MAX_AMOUNT = Decimal("1000000000")


def parse_amount(payload: Dict[str, Any], field: str, errors: Dict[str, str]) -> Decimal:
    raw = payload.get(field)
    if raw is None or isinstance(raw, bool) or _strip(raw) == "":
        add_error(errors, field, f"{field} is required")
        return Decimal("0")
    try:
        val = Decimal(_strip(raw))
    except InvalidOperation:
        add_error(errors, field, f"{field} must be a number")
        return Decimal("0")
    if not val.is_finite() or val <= 0:
        add_error(errors, field, f"{field} must be greater than zero")
    elif val > MAX_AMOUNT:
        add_error(errors, field, f"{field} must not exceed {MAX_AMOUNT}")
    return val


def digits_only(value: Any) -> str:
    return re.sub(r"\D", "", _as_str(value))


def raise_if_errors(errors: Dict[str, str], message: str = "Incomplete data") -> None:
    if errors:
        raise ValidationError(field_errors=errors, message=message)


# ---------------------------------------------------------------------------
# Endpoint payloads
# ---------------------------------------------------------------------------

def parse_quote_request(payload: Dict[str, Any]) -> QuoteRequest:
    errors: Dict[str, str] = {}
    destination = require_str(payload, "destination", errors)
    days = parse_int(payload, "days", errors, min_value=1, required=True)
    ages = parse_int_list(payload, "ages", errors, min_value=0)
    raise_if_errors(errors)

    return QuoteRequest(
        destination=destination,
        days=days,
        ages=ages,
        trip_type=optional_str(payload, "tripType"),
        origin=optional_str(payload, "origin"),
    )


def _parse_buyer(raw: Any, errors: Dict[str, str]) -> Optional[Buyer]:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        add_error(errors, "comprador", "comprador must be an object")
        return None
    address = raw.get("endereco")
    return Buyer(
        name=_strip(raw.get("nome")),
        email=_strip(raw.get("email")),
        phone=optional_str(raw, "telefone"),
        address=address if isinstance(address, dict) else None,
        raw=dict(raw),
    )


def _parse_travelers(raw: Any, errors: Dict[str, str]) -> List[Traveler]:
    if raw is None:
        return []
    if not isinstance(raw, list) or not all(isinstance(item, dict) for item in raw):
        add_error(errors, "passageiros", "passageiros must be a list of objects")
        return []
    return [
        Traveler(
            first_name=_strip(item.get("nome")),
            surname=_strip(item.get("sobrenome")),
            national_id=_strip(item.get("cpf")),
            birth_date=_strip(item.get("nascimento")),
            sex=_strip(item.get("sexo")),
            raw=dict(item),
        )
        for item in raw
    ]


def _parse_dates(raw: Any, errors: Dict[str, str]) -> Optional[TravelDates]:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        add_error(errors, "dates", "dates must be an object")
        return None
    return TravelDates(departure=_strip(raw.get("departure")), return_date=_strip(raw.get("return")))


def parse_checkout_request(payload: Dict[str, Any]) -> CheckoutRequest:
    errors: Dict[str, str] = {}
    payment_method_id = require_str(payload, "paymentMethodId", errors, label="Payment method")
    lead_id = require_str(payload, "leadId", errors, label="Lead id")
    amount = parse_amount(payload, "amountBRL", errors)
    buyer = _parse_buyer(payload.get("comprador"), errors)
    travelers = _parse_travelers(payload.get("passageiros"), errors)
    dates = _parse_dates(payload.get("dates"), errors)
    raise_if_errors(errors, message="Invalid checkout payload")

    return CheckoutRequest(
        payment_method_id=payment_method_id,
        lead_id=lead_id,
        amount=amount,
        plan_id=optional_str(payload, "planId"),
        plan_name=optional_str(payload, "planName"),
        destination=optional_str(payload, "destination"),
        buyer=buyer,
        travelers=travelers,
        dates=dates,
        contact_phone=optional_str(payload, "contactPhone"),
    )
