"""
Bid ledger.

Bids are append-only history. Only the bid an artwork currently points
at (``ArtworkModel.current_bid_id``) can still be accepted or canceled;
superseded bids are never touched again.
"""

from enum import Enum
from typing import Optional

import structlog

from .db.models import AccountModel, ArtworkModel, BidLogModel
from .store import EntityStore

logger = structlog.get_logger()


class BidOutcome(str, Enum):
    """Terminal states of a bid."""

    ACCEPTED = "accepted"
    CANCELED = "canceled"


def bid_log_id(token_id: int, bidder_id: str, timestamp: int) -> str:
    return f"{token_id}-{bidder_id}-{timestamp}"


class BidLedger:
    """Records bids and resolves the open bid of an artwork."""

    def __init__(self, store: EntityStore):
        self.store = store

    def record_bid(
        self,
        token_id: int,
        bidder: AccountModel,
        amount: int,
        timestamp: int,
    ) -> Optional[BidLogModel]:
        """Append a bid for ``token_id``.

        Returns None without writing anything when the artwork does not
        exist. A second bid from the same bidder in the same block reuses
        the entry and takes the later amount.
        """
        artwork = self.store.load(ArtworkModel, str(token_id))
        if artwork is None:
            return None

        bid_id = bid_log_id(token_id, bidder.id, timestamp)
        bid = self.store.load(BidLogModel, bid_id)
        if bid is None:
            bid = BidLogModel(
                id=bid_id,
                amount=amount,
                bidder_id=bidder.id,
                item_id=artwork.id,
                timestamp=timestamp,
                accepted=False,
                canceled=False,
            )
        else:
            logger.info("bid_replaced_in_same_block", bid_id=bid_id, amount=amount)
            bid.amount = amount

        self.store.save(bid)
        return bid

    def current_bid(self, artwork: ArtworkModel) -> Optional[BidLogModel]:
        """The open bid of ``artwork``, if any."""
        if not artwork.current_bid_id:
            return None
        return self.store.load(BidLogModel, artwork.current_bid_id)

    def resolve_current(
        self, artwork: ArtworkModel, outcome: BidOutcome
    ) -> Optional[BidLogModel]:
        """Mark the open bid of ``artwork`` as accepted or canceled.

        No-op when there is no open bid. A bid already holding the other
        terminal flag is left as it is.
        """
        bid = self.current_bid(artwork)
        if bid is None:
            logger.debug(
                "no_open_bid", artwork_id=artwork.id, outcome=outcome.value
            )
            return None

        if outcome is BidOutcome.ACCEPTED:
            if bid.canceled:
                logger.warning("accept_on_canceled_bid", bid_id=bid.id)
                return bid
            bid.accepted = True
        else:
            if bid.accepted:
                logger.warning("cancel_on_accepted_bid", bid_id=bid.id)
                return bid
            bid.canceled = True

        self.store.save(bid)
        return bid
