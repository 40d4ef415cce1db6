"""
Integration tests.

Run against SQLite (aiosqlite, in-memory) through the real SQL adapters:
- repositories and the transaction manager
- the booking lifecycle over SQL
- deadlock retry
- health probes

Run only these:
    pytest tests/integration/ -v
"""
