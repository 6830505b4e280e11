"""Tests for chain helpers and the web3 contract reader."""

from unittest.mock import MagicMock

import pytest
from web3.exceptions import ContractLogicError

from artwork_indexer.chain import (
    ZERO_ADDRESS,
    NullContractReader,
    Web3ContractReader,
    is_null_address,
    normalize_address,
)

from conftest import CONTRACT


class TestNormalizeAddress:
    """Tests for normalize_address()."""

    def test_lowercases_checksummed(self):
        address = "0xAbCdEf0123456789aBcDeF0123456789AbCdEf01"
        assert normalize_address(address) == address.lower()

    def test_null_address(self):
        assert is_null_address("0x" + "0" * 40)
        assert not is_null_address("0x" + "0" * 39 + "1")
        assert normalize_address(bytes(20)) == ZERO_ADDRESS

    def test_invalid(self):
        with pytest.raises(ValueError):
            normalize_address("0xnothex")


def make_reader(call_result=None, call_error=None):
    w3 = MagicMock()
    call = w3.eth.contract.return_value.functions.tokenURI.return_value.call
    if call_error is not None:
        call.side_effect = call_error
    else:
        call.return_value = call_result
    return Web3ContractReader("http://localhost:8545", w3=w3), w3


class TestWeb3ContractReader:
    """Tests for Web3ContractReader.token_uri()."""

    def test_reads_at_event_block(self):
        reader, w3 = make_reader(call_result="ipfs://QmToken")

        assert reader.token_uri(CONTRACT, 5, 1234) == "ipfs://QmToken"

        functions = w3.eth.contract.return_value.functions
        functions.tokenURI.assert_called_once_with(5)
        functions.tokenURI.return_value.call.assert_called_once_with(block_identifier=1234)

    def test_contract_is_cached(self):
        reader, w3 = make_reader(call_result="ipfs://QmToken")

        reader.token_uri(CONTRACT, 1, 1)
        reader.token_uri(CONTRACT, 2, 2)

        assert w3.eth.contract.call_count == 1

    def test_empty_uri_is_absent(self):
        reader, _ = make_reader(call_result="")

        assert reader.token_uri(CONTRACT, 1, 1) is None

    def test_revert_is_absent(self):
        reader, _ = make_reader(call_error=ContractLogicError("execution reverted"))

        assert reader.token_uri(CONTRACT, 1, 1) is None

    def test_transport_errors_propagate(self):
        reader, _ = make_reader(call_error=ConnectionError("rpc down"))

        with pytest.raises(ConnectionError):
            reader.token_uri(CONTRACT, 1, 1)


def test_null_reader():
    assert NullContractReader().token_uri(CONTRACT, 1, 1) is None
