"""Database Package — declarative Base shared by ORM models and migrations.

Invariants:
    - Holds table metadata only; engines and sessions live in infrastructure/database.py
"""
