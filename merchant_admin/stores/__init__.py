"""Data stores for persistence and short-lived state.

Stores handle:
- PostgreSQL: DB session, ORM operations
- Redis: login throttling counters, TTL policies

No business/authorization logic in stores - that belongs in services.
"""
