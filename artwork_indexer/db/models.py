"""
SQLAlchemy models for the Artwork Indexer.

Chain integers (token ids, wei amounts, block timestamps) are stored through
``UInt256`` so that values beyond 64 bits survive every backend unchanged.
"""

from typing import Any, Dict, Optional

from sqlalchemy import JSON, Boolean, Column, ForeignKey, Index, String, Text
from sqlalchemy.types import TypeDecorator

from .base import Base


class UInt256(TypeDecorator):
    """Arbitrary-precision non-negative integer persisted as a decimal string."""

    impl = String(78)
    cache_ok = True

    def process_bind_param(self, value: Optional[int], dialect) -> Optional[str]:
        if value is None:
            return None
        return str(int(value))

    def process_result_value(self, value: Optional[str], dialect) -> Optional[int]:
        if value is None:
            return None
        return int(value)


class AccountModel(Base):
    """An address that has received a token or placed a bid."""

    __tablename__ = "accounts"

    id = Column(String(42), primary_key=True)

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary."""
        return {"id": self.id}


class ArtworkModel(Base):
    """Denormalized state of a single token."""

    __tablename__ = "artworks"

    # Primary fields
    id = Column(String(78), primary_key=True)
    token_id = Column(UInt256, nullable=False, unique=True)
    creator_id = Column(String(42), ForeignKey("accounts.id"), nullable=False, index=True)
    owner_id = Column(String(42), ForeignKey("accounts.id"), nullable=False, index=True)

    # Lifecycle timestamps (block time, seconds)
    creation_date = Column(UInt256, nullable=False)
    modified = Column(UInt256, nullable=True)
    removed = Column(UInt256, nullable=True)

    # Flags
    burned = Column(Boolean, nullable=False, default=False)
    for_sale = Column(Boolean, nullable=False, default=False)
    broken = Column(Boolean, nullable=False, default=False)

    # Metadata
    metadata_uri = Column(Text, nullable=True)
    metadata_hash = Column(String(128), nullable=True)
    name = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    media_uri = Column(Text, nullable=True)
    media_hash = Column(String(128), nullable=True)
    mime_type = Column(String(255), nullable=True)
    size = Column(UInt256, nullable=True)
    tags = Column(JSON, nullable=True)
    tags_string = Column(Text, nullable=True)

    # Open bid; kept as a plain id because bid_logs already points back here
    current_bid_id = Column(String(255), nullable=True)

    __table_args__ = (
        Index("ix_artworks_burned_for_sale", "burned", "for_sale"),
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary."""
        return {
            "id": self.id,
            "token_id": self.token_id,
            "creator": self.creator_id,
            "owner": self.owner_id,
            "creation_date": self.creation_date,
            "modified": self.modified,
            "removed": self.removed,
            "burned": self.burned,
            "for_sale": self.for_sale,
            "broken": self.broken,
            "metadata_uri": self.metadata_uri,
            "metadata_hash": self.metadata_hash,
            "name": self.name,
            "description": self.description,
            "media_uri": self.media_uri,
            "media_hash": self.media_hash,
            "mime_type": self.mime_type,
            "size": self.size,
            "tags": list(self.tags) if self.tags is not None else None,
            "tags_string": self.tags_string,
            "current_bid": self.current_bid_id,
        }


class BidLogModel(Base):
    """One bid placed on an artwork. Rows are never deleted."""

    __tablename__ = "bid_logs"

    id = Column(String(255), primary_key=True)
    amount = Column(UInt256, nullable=False)
    bidder_id = Column(String(42), ForeignKey("accounts.id"), nullable=False, index=True)
    item_id = Column(String(78), ForeignKey("artworks.id"), nullable=False, index=True)
    timestamp = Column(UInt256, nullable=False)

    # Terminal flags, mutually exclusive
    accepted = Column(Boolean, nullable=False, default=False)
    canceled = Column(Boolean, nullable=False, default=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary."""
        return {
            "id": self.id,
            "amount": self.amount,
            "bidder": self.bidder_id,
            "item": self.item_id,
            "timestamp": self.timestamp,
            "accepted": self.accepted,
            "canceled": self.canceled,
        }
