"""Record repository, queries, schema and seeding helpers for the local store.

Every function here takes an open SQLAlchemy ``Session``; transactions are
owned by the caller (normally ``store.TutoringStore.session_scope``).
"""
