"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the only aggregate root; requests and connections reference users by id

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all/autogenerate
"""

from app.models.user import User  # noqa: F401
from app.models.connection_request import ConnectionRequest  # noqa: F401
from app.models.connection import Connection  # noqa: F401
