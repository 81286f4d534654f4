"""Database package — declarative base, standalone session factory and seed data.

Invariants:
    - Every ORM model inherits from db.base.Base
"""
