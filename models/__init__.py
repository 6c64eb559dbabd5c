"""
Models Package

This file ensures the SQLAlchemy models are imported and registered on
Base.metadata before tables are created.
"""

from models.base import Base
from models.cart import CartSnapshotRecord

__all__ = [
    'Base',
    'CartSnapshotRecord',
]
