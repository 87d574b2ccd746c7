import pytest
from eth_abi import encode
from eth_utils import event_signature_to_log_topic, function_signature_to_4byte_selector

from evmfmt.dapp.info import DappInfo

FOO_HASH = 0xf00
FOO_NAME = "src/Foo.sol:Foo"
ADDRESS = "0x" + "11" * 20

FOO_ABI = [
    {
        "type": "function",
        "name": "bar",
        "inputs": [{"name": "x", "type": "uint256"}],
        "outputs": [{"name": "", "type": "bool"}],
    },
    {
        "type": "function",
        "name": "poke",
        "inputs": [],
        "outputs": [],
    },
    {
        "type": "function",
        "name": "baz",
        "inputs": [{
            "name": "s",
            "type": "tuple",
            "components": [{"name": "a", "type": "uint256"}, {"name": "b", "type": "bool"}],
        }],
        "outputs": [],
    },
    {
        "type": "function",
        "name": "greet",
        "inputs": [{"name": "who", "type": "string"}, {"name": "n", "type": "uint8"}],
        "outputs": [{"name": "", "type": "string"}],
    },
    {
        "type": "event",
        "name": "Transfer",
        "anonymous": False,
        "inputs": [
            {"name": "from", "type": "address", "indexed": True},
            {"name": "value", "type": "uint256", "indexed": False},
        ],
    },
]


def selector(signature: str) -> int:
    return int.from_bytes(function_signature_to_4byte_selector(signature), 'big')


def topic(signature: str) -> int:
    return int.from_bytes(event_signature_to_log_topic(signature), 'big')


def calldata(signature: str, types, values) -> bytes:
    return function_signature_to_4byte_selector(signature) + encode(types, values)


@pytest.fixture
def foo_dapp() -> DappInfo:
    return DappInfo.from_abi(FOO_NAME, FOO_HASH, FOO_ABI)
