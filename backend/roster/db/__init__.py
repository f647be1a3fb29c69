"""Database Infrastructure: SQLAlchemy Base and standalone session factory.

Invariants:
    - Single async engine per process for the API (initialized via init_db)
    - All sessions are async (AsyncSession)
"""
