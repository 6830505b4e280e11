"""
Artwork reconciler - applies contract events to per-token state.

Token lifecycle: non-existent -> minted -> (optionally) burned.

Each event is handled inside one store transaction: either every entity
the handler touched is saved, or (on any exception) none of it is.
Missing artworks are not errors. Transfers on them log a warning, all
other events skip them silently.
"""
from __future__ import annotations

from typing import Callable, Dict, Optional, Type

import structlog

from .accounts import AccountRegistry
from .bids import BidLedger, BidOutcome
from .chain import ContractReader, is_null_address
from .data.models.events import (
    AcceptBidEvent,
    ApprovalEvent,
    ApprovalForAllEvent,
    BidEvent,
    CancelBidEvent,
    ContractEvent,
    OwnershipTransferredEvent,
    TransferEvent,
)
from .db.models import ArtworkModel
from .metadata.resolver import MetadataResolver
from .store import EntityStore

logger = structlog.get_logger()


class ArtworkReconciler:
    """State machine over the artwork contract's events."""

    def __init__(
        self,
        store: EntityStore,
        contract_reader: ContractReader,
        resolver: MetadataResolver,
    ):
        self.store = store
        self.contract_reader = contract_reader
        self.resolver = resolver
        self.accounts = AccountRegistry(store)
        self.bids = BidLedger(store)

        self._handlers: Dict[Type[ContractEvent], Callable[..., Optional[ArtworkModel]]] = {
            TransferEvent: self.handle_transfer,
            ApprovalEvent: self.handle_approval,
            BidEvent: self.handle_bid,
            AcceptBidEvent: self.handle_accept_bid,
            CancelBidEvent: self.handle_cancel_bid,
            # Contract-level events, outside token scope
            ApprovalForAllEvent: self._ignore,
            OwnershipTransferredEvent: self._ignore,
        }

    def handle(self, event: ContractEvent) -> Optional[ArtworkModel]:
        """Apply one event atomically.

        Returns the artwork the event touched, or None when the event was
        ignored or referenced a missing token.

        Raises:
            TypeError: for event classes without a handler.
        """
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"No handler for event type {type(event).__name__}")

        with self.store.transaction():
            return handler(event)

    def _load(self, token_id: int) -> Optional[ArtworkModel]:
        return self.store.load(ArtworkModel, str(token_id))

    def _ignore(self, event: ContractEvent) -> None:
        logger.debug("event_ignored", event_type=event.event, block=event.block_number)
        return None

    # ------------------------------------------------------------------
    # Transfer
    # ------------------------------------------------------------------

    def handle_transfer(self, event: TransferEvent) -> Optional[ArtworkModel]:
        log = logger.bind(token_id=event.token_id, block=event.block_number)

        if is_null_address(event.from_address):
            return self._mint(event, log)

        artwork = self._load(event.token_id)
        if artwork is None:
            log.warning("artwork_not_exists")
            return None

        if artwork.burned:
            log.warning("transfer_on_burned_artwork", removed=artwork.removed)
            return artwork

        if is_null_address(event.to_address):
            artwork.burned = True
            artwork.removed = event.block_timestamp
            log.info("artwork_burned")
        else:
            owner = self.accounts.get_or_create(event.to_address)
            artwork.owner_id = owner.id
            artwork.modified = event.block_timestamp
            log.info("artwork_transferred", owner=owner.id)

        self.store.save(artwork)
        return artwork

    def _mint(self, event: TransferEvent, log) -> Optional[ArtworkModel]:
        if self._load(event.token_id) is not None:
            log.warning("artwork_already_minted")
            return None

        creator = self.accounts.get_or_create(event.to_address)
        artwork = ArtworkModel(
            id=str(event.token_id),
            token_id=event.token_id,
            creator_id=creator.id,
            owner_id=creator.id,
            creation_date=event.block_timestamp,
            burned=False,
            for_sale=False,
            broken=False,
        )

        locator = self.contract_reader.token_uri(
            event.contract_address, event.token_id, event.block_number
        )
        if locator:
            artwork.metadata_uri = locator
            self.resolver.resolve(artwork, locator)
        else:
            artwork.broken = True

        self.store.save(artwork)
        log.info(
            "artwork_minted",
            creator=creator.id,
            metadata_hash=artwork.metadata_hash,
            broken=artwork.broken,
        )
        return artwork

    # ------------------------------------------------------------------
    # Marketplace
    # ------------------------------------------------------------------

    def handle_approval(self, event: ApprovalEvent) -> Optional[ArtworkModel]:
        artwork = self._load(event.token_id)
        if artwork is None:
            return None

        artwork.for_sale = True
        self.store.save(artwork)
        return artwork

    def handle_bid(self, event: BidEvent) -> Optional[ArtworkModel]:
        artwork = self._load(event.token_id)
        if artwork is None:
            return None

        bidder = self.accounts.get_or_create(event.bidder)
        bid = self.bids.record_bid(
            event.token_id, bidder, event.new_bid, event.block_timestamp
        )
        artwork.current_bid_id = bid.id
        self.store.save(artwork)

        logger.info(
            "bid_recorded", token_id=event.token_id, bid_id=bid.id, amount=bid.amount
        )
        return artwork

    def handle_accept_bid(self, event: AcceptBidEvent) -> Optional[ArtworkModel]:
        artwork = self._load(event.token_id)
        if artwork is None:
            return None

        artwork.for_sale = False
        self.store.save(artwork)
        self.bids.resolve_current(artwork, BidOutcome.ACCEPTED)
        return artwork

    def handle_cancel_bid(self, event: CancelBidEvent) -> Optional[ArtworkModel]:
        artwork = self._load(event.token_id)
        if artwork is None:
            return None

        self.bids.resolve_current(artwork, BidOutcome.CANCELED)
        return artwork
