"""Test configuration and fixtures."""

import json
from typing import Dict, List, Optional, Tuple

import pytest
import structlog
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from artwork_indexer.chain import ContractReader
from artwork_indexer.data.models.events import (
    AcceptBidEvent,
    ApprovalEvent,
    BidEvent,
    CancelBidEvent,
    TransferEvent,
)
from artwork_indexer.db.base import Base
from artwork_indexer.db.services import SqlEntityStore
from artwork_indexer.metadata.ipfs import ContentFetcher
from artwork_indexer.metadata.resolver import MetadataResolver
from artwork_indexer.reconciler import ArtworkReconciler
from artwork_indexer.store import InMemoryEntityStore

CONTRACT = "0x5f7b3e1bd7c1d1e6f4b7c2a1d9e8f7a6b5c4d3e2"
NULL = "0x0000000000000000000000000000000000000000"
ALICE = "0x1111111111111111111111111111111111111111"
BOB = "0x2222222222222222222222222222222222222222"
CAROL = "0x3333333333333333333333333333333333333333"

METADATA_CID = "QmMetadata1111111111111111111111111111111111"
MEDIA_CID = "QmMedia22222222222222222222222222222222222222"


class FakeContractReader(ContractReader):
    """Serves tokenURI values from a dict and records every call."""

    def __init__(self, uris: Optional[Dict[int, str]] = None):
        self.uris = uris or {}
        self.calls: List[Tuple[str, int, int]] = []

    def token_uri(self, contract_address, token_id, block_number):
        self.calls.append((contract_address, token_id, block_number))
        return self.uris.get(token_id)


class FakeFetcher(ContentFetcher):
    """Serves IPFS documents from a dict and records every fetch."""

    def __init__(self, documents: Optional[Dict[str, bytes]] = None):
        self.documents = documents or {}
        self.fetched: List[str] = []

    def add_json(self, content_id: str, document) -> None:
        self.documents[content_id] = json.dumps(document).encode("utf-8")

    def fetch(self, content_id):
        self.fetched.append(content_id)
        return self.documents.get(content_id)


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any logging configuration a test applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def db_session():
    """Create a fresh in-memory database for each test."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def sql_store(db_session) -> SqlEntityStore:
    return SqlEntityStore(db_session)


@pytest.fixture
def memory_store() -> InMemoryEntityStore:
    return InMemoryEntityStore()


@pytest.fixture(params=["sql", "memory"])
def store(request):
    """Run a test against both store implementations."""
    if request.param == "sql":
        return request.getfixturevalue("sql_store")
    return request.getfixturevalue("memory_store")


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def reader() -> FakeContractReader:
    return FakeContractReader()


@pytest.fixture
def resolver(fetcher) -> MetadataResolver:
    return MetadataResolver(fetcher, gateway_url="https://ipfs.io/ipfs")


@pytest.fixture
def reconciler(store, reader, resolver) -> ArtworkReconciler:
    return ArtworkReconciler(store, reader, resolver)


def transfer(token_id, from_address, to_address, timestamp=1000, block=10):
    return TransferEvent(
        contract_address=CONTRACT,
        block_number=block,
        block_timestamp=timestamp,
        from_address=from_address,
        to_address=to_address,
        token_id=token_id,
    )


def mint(token_id, to_address=ALICE, timestamp=1000, block=10):
    return transfer(token_id, NULL, to_address, timestamp=timestamp, block=block)


def approval(token_id, timestamp=1100):
    return ApprovalEvent(
        contract_address=CONTRACT,
        block_number=11,
        block_timestamp=timestamp,
        owner=ALICE,
        approved=BOB,
        token_id=token_id,
    )


def bid(token_id, bidder, amount, timestamp=1200):
    return BidEvent(
        contract_address=CONTRACT,
        block_number=12,
        block_timestamp=timestamp,
        bidder=bidder,
        new_bid=amount,
        token_id=token_id,
    )


def accept_bid(token_id, timestamp=1300):
    return AcceptBidEvent(
        contract_address=CONTRACT,
        block_number=13,
        block_timestamp=timestamp,
        token_id=token_id,
    )


def cancel_bid(token_id, timestamp=1300):
    return CancelBidEvent(
        contract_address=CONTRACT,
        block_number=13,
        block_timestamp=timestamp,
        token_id=token_id,
    )
