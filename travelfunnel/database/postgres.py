"""
Lightweight in-memory LeadStore replacement for local development.

Same interface as travelfunnel.database.postgres_real, so the checkout can run
without a database. Every update is kept in `updates` for inspection. It is
NOT intended for production use.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from travelfunnel.database.models import UPDATABLE_COLUMNS

logger = logging.getLogger(__name__)


@dataclass
class Lead:
    id: str
    status: Optional[str] = None
    last_error_message: Optional[str] = None
    insurance_voucher: Optional[str] = None
    insurance_order_id: Optional[str] = None
    ticket_link: Optional[str] = None
    payment_confirmation_id: Optional[str] = None
    recovery_notes: Optional[str] = None
    updated_at: datetime = field(default_factory=datetime.utcnow)


class LeadStore:
    def __init__(self) -> None:
        self.leads: Dict[str, Lead] = {}
        self.updates: List[Tuple[str, Dict[str, Any]]] = []

    def create_tables(self) -> None:
        return None

    def add_lead(self, lead_id: str) -> Lead:
        return self.leads.setdefault(lead_id, Lead(id=lead_id))

    def get_lead(self, lead_id: str) -> Optional[Lead]:
        return self.leads.get(lead_id)

    def update_lead(self, lead_id: str, updates: Dict[str, Any]) -> bool:
        unknown = set(updates) - UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Unknown lead columns: {', '.join(sorted(unknown))}")

        self.updates.append((lead_id, dict(updates)))
        lead = self.leads.get(lead_id)
        if lead is None:
            logger.debug("In-memory lead %s not found; update recorded only", lead_id)
            return False
        for key, value in updates.items():
            setattr(lead, key, value)
        lead.updated_at = datetime.utcnow()
        return True
