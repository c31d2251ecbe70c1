"""
Lead datastore.

- postgres.py: in-memory LeadStore for local development and tests
- postgres_real.py: SQLAlchemy LeadStore used when DATABASE_URL is set
"""
