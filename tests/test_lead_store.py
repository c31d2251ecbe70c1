"""Tests for the in-memory and SQLAlchemy lead stores."""

import pytest

from travelfunnel.database.postgres import LeadStore as MemoryLeadStore
from travelfunnel.database.postgres_real import LeadStore, _normalize_connection_string


def test_memory_store_updates_known_lead():
    store = MemoryLeadStore()
    store.add_lead("lead-1")

    assert store.update_lead("lead-1", {"status": "venda_concluida", "insurance_voucher": "V1"}) is True

    lead = store.get_lead("lead-1")
    assert lead.status == "venda_concluida"
    assert lead.insurance_voucher == "V1"


def test_memory_store_records_updates_for_unknown_lead():
    store = MemoryLeadStore()

    assert store.update_lead("missing", {"status": "pagamento_falhou"}) is False
    assert store.updates == [("missing", {"status": "pagamento_falhou"})]
    assert store.get_lead("missing") is None


def test_memory_store_rejects_unknown_columns():
    with pytest.raises(ValueError, match="coris_voucher"):
        MemoryLeadStore().update_lead("lead-1", {"coris_voucher": "V1"})


@pytest.fixture
def sql_store(tmp_path):
    store = LeadStore(f"sqlite:///{tmp_path / 'leads.db'}")
    store.create_tables()
    return store


def test_sql_store_keyed_update(sql_store):
    sql_store.add_lead("lead-1")

    assert sql_store.update_lead("lead-1", {"status": "venda_concluida", "recovery_notes": "eSIM: issued. Details: "}) is True

    lead = sql_store.get_lead("lead-1")
    assert lead.status == "venda_concluida"
    assert lead.recovery_notes == "eSIM: issued. Details: "


def test_sql_store_does_not_insert_on_update(sql_store):
    assert sql_store.update_lead("missing", {"status": "pagamento_falhou"}) is False
    assert sql_store.get_lead("missing") is None


def test_sql_store_rejects_unknown_columns(sql_store):
    with pytest.raises(ValueError):
        sql_store.update_lead("lead-1", {"id": "other"})


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("psql 'postgresql://u:p@h/db'", "postgresql://u:p@h/db"),
        ('  "postgres://u:p@h/db"  ', "postgresql://u:p@h/db"),
        ("sqlite:///leads.db", "sqlite:///leads.db"),
    ],
)
def test_normalize_connection_string(raw, expected):
    assert _normalize_connection_string(raw) == expected
