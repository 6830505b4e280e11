"""
Contract event models for the Artwork Indexer.

Every event carries the block it was emitted in and the emitting contract.
The ``event`` literal doubles as the discriminator when events are read
back from JSON Lines.
"""

from __future__ import annotations

import json
from typing import Annotated, Any, Dict, Iterable, Iterator, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, conint


class ContractEvent(BaseModel):
    """Fields shared by all events delivered by the event source."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    contract_address: str
    block_number: conint(ge=0)
    block_timestamp: conint(ge=0)
    transaction_hash: Optional[str] = None
    log_index: Optional[conint(ge=0)] = None

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(block={self.block_number}, log={self.log_index})"


class TransferEvent(ContractEvent):
    """ERC-721 Transfer. Mints come from the null address, burns go to it."""

    event: Literal["Transfer"] = "Transfer"
    from_address: str = Field(..., alias="from")
    to_address: str = Field(..., alias="to")
    token_id: conint(ge=0) = Field(..., alias="tokenId")


class ApprovalEvent(ContractEvent):
    """ERC-721 Approval. The marketplace treats it as putting a token on sale."""

    event: Literal["Approval"] = "Approval"
    owner: Optional[str] = None
    approved: Optional[str] = None
    token_id: conint(ge=0) = Field(..., alias="tokenId")


class ApprovalForAllEvent(ContractEvent):
    event: Literal["ApprovalForAll"] = "ApprovalForAll"
    owner: str
    operator: str
    approved: bool


class OwnershipTransferredEvent(ContractEvent):
    event: Literal["OwnershipTransferred"] = "OwnershipTransferred"
    previous_owner: str = Field(..., alias="previousOwner")
    new_owner: str = Field(..., alias="newOwner")


class BidEvent(ContractEvent):
    """A new bid on a token; it becomes the token's open bid."""

    event: Literal["Bid"] = "Bid"
    bidder: str
    new_bid: conint(ge=0) = Field(..., alias="_newBid")
    token_id: conint(ge=0) = Field(..., alias="_tokenId")


class AcceptBidEvent(ContractEvent):
    event: Literal["AcceptBid"] = "AcceptBid"
    token_id: conint(ge=0) = Field(..., alias="_tokenId")


class CancelBidEvent(ContractEvent):
    event: Literal["CancelBid"] = "CancelBid"
    token_id: conint(ge=0) = Field(..., alias="_tokenId")


AnyContractEvent = Annotated[
    Union[
        TransferEvent,
        ApprovalEvent,
        ApprovalForAllEvent,
        OwnershipTransferredEvent,
        BidEvent,
        AcceptBidEvent,
        CancelBidEvent,
    ],
    Field(discriminator="event"),
]

_event_adapter: TypeAdapter = TypeAdapter(AnyContractEvent)


def parse_event(data: Dict[str, Any]) -> ContractEvent:
    """Build a typed event from a dictionary with an ``event`` key."""
    return _event_adapter.validate_python(data)


def load_events(lines: Iterable[str]) -> Iterator[ContractEvent]:
    """Parse JSON Lines into events, skipping blank lines.

    Raises:
        ValueError: on a line that is not valid JSON or not a known event,
            with the 1-based line number in the message.
    """
    for number, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            yield parse_event(json.loads(line))
        except ValueError as e:
            raise ValueError(f"line {number}: {e}") from e
