"""
Models package - imports all models so their tables are registered on
``Base.metadata`` before ``create_all`` runs.
"""

from app.models.owner import Owner

__all__ = [
    "Owner",
]
