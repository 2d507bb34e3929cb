import pytest

from fuelwallet.protocol.config.params import BASE_ASSET_ID
from fuelwallet.protocol.crypto.hash import EMPTY_ROOT, hash_leaf, hash_node, merkle_root, sha256
from fuelwallet.protocol.types.common import InvalidKey, InvalidPredicateData, NoProviderConfigured
from fuelwallet.wallet.account import Account
from fuelwallet.wallet.predicate import PredicateAccount, chunk_and_pad, predicate_root
from fuelwallet.wallet.test_utils import InMemoryLedger, generate_test_wallet

BYTECODE = bytes.fromhex("1a403000504100301a445000ba49000032400481504100205d490000")

MAIN_ABI = {
    "types": [
        {"typeId": 0, "type": "bool", "components": None, "typeParameters": None},
        {"typeId": 1, "type": "u64", "components": None, "typeParameters": None},
    ],
    "functions": [
        {
            "inputs": [{"name": "value", "type": 1, "typeArguments": None}],
            "name": "main",
            "output": {"name": "", "type": 0, "typeArguments": None},
            "attributes": None,
        }
    ],
    "loggedTypes": [],
    "configurables": [],
}


def test_merkle_root_shapes():
    a, b, c = b"a" * 8, b"b" * 8, b"c" * 8

    assert merkle_root([]) == EMPTY_ROOT == sha256(b"")
    assert merkle_root([a]) == hash_leaf(a)
    assert merkle_root([a, b]) == hash_node(hash_leaf(a), hash_leaf(b))
    # Odd node is promoted without rehashing
    assert merkle_root([a, b, c]) == hash_node(hash_node(hash_leaf(a), hash_leaf(b)), hash_leaf(c))


def test_chunk_and_pad():
    assert chunk_and_pad(b"") == []
    assert chunk_and_pad(b"\x01" * 5) == [b"\x01" * 5 + b"\x00" * 3]
    chunks = chunk_and_pad(b"\x02" * (16 * 1024 + 1))
    assert len(chunks) == 2
    assert len(chunks[0]) == 16 * 1024
    assert chunks[1] == b"\x02" + b"\x00" * 7


def test_predicate_address_is_bytecode_root():
    predicate = PredicateAccount(BYTECODE)

    assert predicate.address.to_bytes() == predicate_root(BYTECODE)
    assert predicate.get_address() == predicate.address
    assert predicate.bytecode == BYTECODE
    assert PredicateAccount("0x" + BYTECODE.hex()).address == predicate.address


def test_predicate_address_ignores_input_data():
    plain = PredicateAccount(BYTECODE)
    with_data = PredicateAccount(BYTECODE, abi=MAIN_ABI, input_data=[1337])

    assert plain.address == with_data.address
    assert with_data.set_data(7).address == plain.address
    assert with_data.set_data(7).input_data == [7]
    assert with_data.input_data == [1337]


def test_predicate_padding_is_canonical():
    assert PredicateAccount(b"\x01" * 7).address == PredicateAccount(b"\x01" * 7 + b"\x00").address
    assert PredicateAccount(b"\x01" * 8).address != PredicateAccount(b"\x02" * 8).address


def test_configurables_change_address():
    base = PredicateAccount(BYTECODE)
    configured = PredicateAccount(BYTECODE, configurables={8: (42).to_bytes(8, "big")})

    assert configured.address != base.address
    assert configured.bytecode[8:16] == (42).to_bytes(8, "big")
    with pytest.raises(InvalidPredicateData):
        PredicateAccount(BYTECODE, configurables={len(BYTECODE) - 2: b"\x00" * 8})


def test_abi_argument_count_checked():
    with pytest.raises(InvalidPredicateData, match="expects 1"):
        PredicateAccount(BYTECODE, abi=MAIN_ABI, input_data=[1, 2])
    with pytest.raises(InvalidPredicateData, match="no 'main'"):
        PredicateAccount(BYTECODE, abi={"functions": []})


def test_predicate_is_not_key_controlled():
    predicate = PredicateAccount(BYTECODE)
    assert predicate.is_locked
    assert predicate.lock() is predicate
    with pytest.raises(InvalidKey):
        predicate.unlock(Account.generate().private_key)


def test_predicate_requires_provider_for_queries():
    predicate = PredicateAccount(BYTECODE)
    with pytest.raises(NoProviderConfigured):
        predicate.get_balance()
    with pytest.raises(NoProviderConfigured):
        predicate.get_coins()


def test_predicate_transfer_attaches_bytecode_and_data():
    seen = []

    def evaluator(predicate_data, tx_id):
        seen.append(predicate_data)
        return predicate_data.input_data == [1337]

    ledger = InMemoryLedger(predicate_evaluator=evaluator)
    funder = generate_test_wallet(ledger, [(1000, BASE_ASSET_ID)])
    receiver = Account.generate(provider=ledger)
    predicate = PredicateAccount(BYTECODE, abi=MAIN_ABI, input_data=[1337], provider=ledger)

    funder.transfer(predicate.address, 500).wait_for_result()
    assert predicate.get_balance() == 500

    predicate.transfer(receiver.address, 100).wait_for_result()

    assert receiver.get_balance() == 100
    assert predicate.get_balance() == 400
    assert seen[0].bytecode == BYTECODE
    assert seen[0].abi == MAIN_ABI


def test_predicate_transfer_rejected_by_evaluator():
    from fuelwallet.protocol.types.common import TransactionFailed

    ledger = InMemoryLedger(predicate_evaluator=lambda data, tx_id: data.input_data == [1337])
    funder = generate_test_wallet(ledger, [(1000, BASE_ASSET_ID)])
    predicate = PredicateAccount(BYTECODE, abi=MAIN_ABI, input_data=[1], provider=ledger)
    funder.transfer(predicate.address, 500).wait_for_result()

    handle = predicate.transfer(funder.address, 100)

    with pytest.raises(TransactionFailed, match="evaluated to false"):
        handle.wait_for_result()
    assert predicate.get_balance() == 500
