"""Services Layer — repositories over SQLAlchemy and the workflows that use them.

Invariants:
    - Repositories implement the protocols in core/repository_protocols.py
    - Workflows depend on the protocols, never on the concrete repositories

Design Decisions:
    - One file per repository/workflow for locality
"""
