"""
Chain access for the Artwork Indexer.

The reconciler needs exactly one thing from the chain beyond the event
payload: the token's metadata locator at the block a mint happened in.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union

from web3 import Web3
from web3.exceptions import ContractLogicError

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Only the ERC-721 metadata read is needed
TOKEN_URI_ABI: List[Dict[str, Any]] = [
    {
        "inputs": [{"internalType": "uint256", "name": "tokenId", "type": "uint256"}],
        "name": "tokenURI",
        "outputs": [{"internalType": "string", "name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function",
    }
]


def normalize_address(address: Union[str, bytes]) -> str:
    """Return the canonical lower-case hex form of an address.

    Raises:
        ValueError: if ``address`` is not a 20-byte address.
    """
    return Web3.to_checksum_address(address).lower()


def is_null_address(address: Union[str, bytes]) -> bool:
    return normalize_address(address) == ZERO_ADDRESS


class ContractReader(ABC):
    """Reads contract state at a given block."""

    @abstractmethod
    def token_uri(
        self, contract_address: str, token_id: int, block_number: int
    ) -> Optional[str]:
        """Return the metadata locator of a token, or None if it has none."""
        pass


class NullContractReader(ContractReader):
    """Reader for runs without an RPC endpoint; every token has no locator."""

    def token_uri(
        self, contract_address: str, token_id: int, block_number: int
    ) -> Optional[str]:
        return None


class Web3ContractReader(ContractReader):
    """``tokenURI`` reads through a web3 JSON-RPC provider."""

    def __init__(self, rpc_url: str, w3: Optional[Web3] = None):
        self.rpc_url = rpc_url
        self.w3 = w3 or Web3(Web3.HTTPProvider(rpc_url))
        self._contracts: Dict[str, Any] = {}

    def _contract(self, contract_address: str):
        address = Web3.to_checksum_address(contract_address)
        contract = self._contracts.get(address)
        if contract is None:
            contract = self.w3.eth.contract(address=address, abi=TOKEN_URI_ABI)
            self._contracts[address] = contract
        return contract

    def token_uri(
        self, contract_address: str, token_id: int, block_number: int
    ) -> Optional[str]:
        """Call ``tokenURI(token_id)`` at ``block_number``.

        A revert means the contract has no locator for the token and is
        reported as None. Transport errors propagate.
        """
        contract = self._contract(contract_address)
        try:
            uri = contract.functions.tokenURI(token_id).call(
                block_identifier=block_number
            )
        except ContractLogicError as e:
            logger.warning(
                f"tokenURI reverted for token {token_id} at block {block_number}: {e}"
            )
            return None

        return uri or None
