"""
Service layer.

Each service encapsulates the business logic for one domain and talks
to SQLite through ``core.db``.  Services raise the exceptions from
``core.errors``; translating them to HTTP status codes is left to the
endpoints.
"""
