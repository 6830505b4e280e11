"""
Database services for the Artwork Indexer.
"""

from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Type

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..store import EntityStore, ModelT
from .base import Base
from .models import AccountModel, ArtworkModel, BidLogModel


class SqlEntityStore(EntityStore):
    """Entity store backed by a SQLAlchemy session.

    Usage:
        store = SqlEntityStore(db_session)
        with store.transaction():
            artwork = store.load(ArtworkModel, "42")
    """

    def __init__(self, db: Session):
        self.db = db

    def load(self, model: Type[ModelT], entity_id: str) -> Optional[ModelT]:
        """Get an entity by primary key."""
        return self.db.get(model, entity_id)

    def save(self, entity: Base) -> None:
        """Add an entity to the session and flush it.

        Flushing on every save keeps INSERT order equal to save order, so
        accounts always land before the rows that reference them.
        """
        self.db.add(entity)
        self.db.flush()

    def all(self, model: Type[ModelT]) -> List[ModelT]:
        """Get all entities of a model."""
        return self.db.query(model).order_by(model.id).all()

    @contextmanager
    def transaction(self) -> Iterator["SqlEntityStore"]:
        """Commit on success, roll back everything on error."""
        try:
            yield self
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def counts(self) -> Dict[str, int]:
        """Number of persisted rows per entity kind."""
        return {
            "artworks": self.db.query(func.count(ArtworkModel.id)).scalar() or 0,
            "accounts": self.db.query(func.count(AccountModel.id)).scalar() or 0,
            "bid_logs": self.db.query(func.count(BidLogModel.id)).scalar() or 0,
        }

    def bids_for_artwork(self, artwork_id: str) -> List[BidLogModel]:
        """Bid history of one artwork, oldest first."""
        bids = self.db.query(BidLogModel).filter(BidLogModel.item_id == artwork_id).all()
        # timestamps are stored as decimal strings; order numerically
        return sorted(bids, key=lambda b: (b.timestamp, b.id))
