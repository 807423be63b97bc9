"""
Notekeep: Application Package
==============================

Layers:

    ┌─────────────────────────────────────┐
    │  client/   Notes client (httpx)     │  ← view derivation, local cache
    ├─────────────────────────────────────┤
    │  routes/   FastAPI handlers         │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │  services/ Note store operations    │  ← lifecycle rules
    ├─────────────────────────────────────┤
    │  models/ + schemas/                 │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │  database.py                        │  ← async sessions
    └─────────────────────────────────────┘

normalization.py and exceptions.py are shared by the server and the client.
"""

__version__ = "1.0.0"
