"""Data models for contract events."""

from .events import (
    AcceptBidEvent,
    AnyContractEvent,
    ApprovalEvent,
    ApprovalForAllEvent,
    BidEvent,
    CancelBidEvent,
    ContractEvent,
    OwnershipTransferredEvent,
    TransferEvent,
    load_events,
    parse_event,
)

__all__ = [
    "AcceptBidEvent",
    "AnyContractEvent",
    "ApprovalEvent",
    "ApprovalForAllEvent",
    "BidEvent",
    "CancelBidEvent",
    "ContractEvent",
    "OwnershipTransferredEvent",
    "TransferEvent",
    "load_events",
    "parse_event",
]
