"""
Infrastructure layer.

Concrete adapters for the application ports:
- db/: SQLAlchemy tables, SQL repositories, engine and transaction manager
- gateways/: Stripe payment gateway
- in_memory/: in-memory adapters for development and tests
- messaging/: background status sweep worker
- services/: system clock
"""
