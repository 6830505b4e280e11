"""
Database package for the Artwork Indexer.
"""

from .base import Base, get_engine, get_session_local, init_database
from .models import AccountModel, ArtworkModel, BidLogModel, UInt256
from .services import SqlEntityStore

__all__ = [
    "Base",
    "get_engine",
    "get_session_local",
    "init_database",
    "AccountModel",
    "ArtworkModel",
    "BidLogModel",
    "UInt256",
    "SqlEntityStore",
]
