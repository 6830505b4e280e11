"""
Artwork Indexer

Reconciles an NFT contract's events and IPFS metadata into queryable
artwork, account and bid records.
"""

import importlib.metadata

__version__ = importlib.metadata.version("artwork-indexer")

from .accounts import AccountRegistry
from .bids import BidLedger, BidOutcome
from .dispatcher import EventDispatcher
from .metadata import IpfsClient, MetadataResolver, extract_content_id
from .reconciler import ArtworkReconciler
from .store import EntityStore, InMemoryEntityStore

__all__ = [
    "AccountRegistry",
    "ArtworkReconciler",
    "BidLedger",
    "BidOutcome",
    "EntityStore",
    "EventDispatcher",
    "InMemoryEntityStore",
    "IpfsClient",
    "MetadataResolver",
    "extract_content_id",
]
