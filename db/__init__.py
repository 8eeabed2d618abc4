"""
db/ - Database Layer
====================
Data sources (PostgreSQL pool, SQLite), the named-parameter statement helper
and demo schema initialization.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
