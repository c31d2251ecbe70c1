from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError

from travelfunnel.integrations.contracts.interfaces import PlanCandidate
from travelfunnel.integrations.contracts.payments import confirmation_id_from


class IntegrationResponseError(ValueError):
    def __init__(self, message: str, *, payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.payload = payload or {}


class PaymentDeclinedError(IntegrationResponseError):
    pass


class PriceQuoteModel(BaseModel):
    total: Decimal
    per_person: Optional[Decimal] = None
    raw: Dict[str, str] = Field(default_factory=dict)


class PaymentIngestionResponseModel(BaseModel):
    confirmation_id: str
    message: str = ""
    raw: Dict[str, Any] = Field(default_factory=dict)


def normalize_plan_record(raw: Dict[str, str]) -> PlanCandidate:
    plan_id = _first_non_empty(raw, "id", "idplano")
    name = _first_non_empty(raw, "nome", "name", default="")
    return PlanCandidate(plan_id=str(plan_id), name=str(name), attributes=dict(raw))


def normalize_price_record(raw: Optional[Dict[str, str]]) -> PriceQuoteModel:
    """Pricing record -> totals. `totalrs` already covers every traveller."""
    if not raw:
        raise IntegrationResponseError("Pricing response has no buscaPrecos record.")
    total = parse_brl(_first_non_empty(raw, "totalrs"), "total price")
    per_person_raw = raw.get("precoindividualrs")
    per_person = parse_brl(per_person_raw, "per-person price") if per_person_raw else None

    return _build_model(
        PriceQuoteModel,
        {"total": total, "per_person": per_person, "raw": raw},
        raw,
    )


def normalize_ingestion_response(raw: Dict[str, Any]) -> PaymentIngestionResponseModel:
    message = str(_first_non_empty(raw, "message", "mensagem", "detail", default=""))
    return _build_model(
        PaymentIngestionResponseModel,
        {"confirmation_id": confirmation_id_from(raw), "message": message, "raw": raw},
        raw,
    )


_MONEY_RE = re.compile(r"^-?[\d.,]+$")


def parse_brl(value: Any, label: str = "amount") -> Decimal:
    """Vendor money text -> Decimal. Accepts "123,45", "1.234,56" and "99.90"."""
    text = str(value if value is not None else "").strip()
    if not _MONEY_RE.match(text):
        raise IntegrationResponseError(f"Invalid {label}: {value!r}")
    if "," in text:
        text = text.replace(".", "").replace(",", ".")
    try:
        return Decimal(text)
    except InvalidOperation as exc:
        raise IntegrationResponseError(f"Invalid {label}: {value!r}") from exc


def _first_non_empty(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    if default is not None:
        return default
    raise IntegrationResponseError(f"Missing required field. Checked keys: {', '.join(keys)}", payload=data)


def _build_model(model_type, payload: Dict[str, Any], raw: Dict[str, Any]):
    try:
        return model_type(**payload)
    except ValidationError as exc:
        raise IntegrationResponseError(f"Response validation failed: {exc}", payload=raw) from exc
