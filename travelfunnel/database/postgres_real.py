"""
Real Postgres-backed LeadStore for production when DATABASE_URL is set.
Implements the same interface as travelfunnel.database.postgres (in-memory stub).
"""

from __future__ import annotations

import re
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import create_engine, select, update
from sqlalchemy.orm import Session, sessionmaker

from travelfunnel.database.models import UPDATABLE_COLUMNS, Base, LeadRecord


def _normalize_connection_string(s: str) -> str:
    """Strip common mistakes: 'psql \'...\'', extra quotes, whitespace."""
    s = s.strip()
    if re.match(r"^psql\s+", s, re.IGNORECASE):
        s = re.sub(r"^psql\s+", "", s, flags=re.IGNORECASE).strip()
    if len(s) >= 2 and s[0] == s[-1] and s[0] in ("'", '"'):
        s = s[1:-1].strip()
    # SQLAlchemy 2 dropped the "postgres://" alias that hosted databases still hand out
    if s.startswith("postgres://"):
        s = "postgresql://" + s[len("postgres://"):]
    return s


class LeadStore:
    """
    Lead data access using SQLAlchemy. Keyed updates only: the row must
    already exist, nothing is inserted on update.
    """

    def __init__(self, connection_string: str) -> None:
        connection_string = _normalize_connection_string(connection_string)
        engine_options: Dict[str, Any] = {"pool_pre_ping": True}
        if not connection_string.startswith("sqlite"):
            engine_options.update(pool_size=5, max_overflow=10)
        self.engine = create_engine(connection_string, **engine_options)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine, expire_on_commit=False)

    def create_tables(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def _session(self) -> Session:
        s = self.SessionLocal()
        try:
            yield s
            s.commit()
        except Exception:
            s.rollback()
            raise
        finally:
            s.close()

    def add_lead(self, lead_id: str) -> LeadRecord:
        with self._session() as s:
            lead = s.get(LeadRecord, lead_id)
            if lead:
                return lead
            lead = LeadRecord(id=lead_id)
            s.add(lead)
            s.flush()
            s.refresh(lead)
            return lead

    def get_lead(self, lead_id: str) -> Optional[LeadRecord]:
        with self._session() as s:
            return s.execute(select(LeadRecord).where(LeadRecord.id == lead_id)).scalar_one_or_none()

    def update_lead(self, lead_id: str, updates: Dict[str, Any]) -> bool:
        """Apply `updates` to one lead row; returns whether the row exists."""
        unknown = set(updates) - UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Unknown lead columns: {', '.join(sorted(unknown))}")

        values = dict(updates, updated_at=datetime.utcnow())
        with self._session() as s:
            result = s.execute(update(LeadRecord).where(LeadRecord.id == lead_id).values(**values))
            return result.rowcount > 0
