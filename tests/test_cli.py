import json
import pytest

from fuelwallet.cli.main import main
from fuelwallet.protocol.crypto.signer import hash_message, recover_address
from fuelwallet.wallet.account import Account
from fuelwallet.wallet.predicate import PredicateAccount

ADDRESS_B256 = "0xf1e92c42b90934aa6372e30bc568a326f6e66a1a0288595e6e3fbd392a4f3e6e"
ADDRESS_BECH32 = "fuel1785jcs4epy625cmjuv9u269rymmwv6s6q2y9jhnw877nj2j08ehqce3rxf"


def test_address_convert(capsys):
    main(["address", "convert", ADDRESS_BECH32])
    out = capsys.readouterr().out
    assert ADDRESS_B256 in out
    assert ADDRESS_BECH32 in out


def test_address_convert_invalid(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["address", "convert", "0x1234"])
    assert exc.value.code == 1
    assert "Error:" in capsys.readouterr().out


def test_keys_new(capsys):
    main(["keys", "new"])
    out = capsys.readouterr().out
    data = json.loads(out[:out.rindex("}") + 1])
    assert Account.from_private_key(data["private_key"]).address.to_b256() == data["b256"]


def test_sign_and_recover(capsys):
    account = Account.generate()
    address = str(account.address)

    main(["sign", account.private_key, "hello"])
    signature = capsys.readouterr().out.strip()
    assert recover_address(hash_message("hello"), signature) == account.address

    main(["recover", "hello", signature, "--expect", address])
    out = capsys.readouterr().out
    assert address in out
    assert "matches" in out

    with pytest.raises(SystemExit):
        main(["recover", "bye", signature, "--expect", address])


def test_predicate_address(capsys, tmp_path):
    bytecode = bytes(range(40))
    path = tmp_path / "predicate.bin"
    path.write_bytes(bytecode)

    main(["predicate", "address", str(path)])
    out = capsys.readouterr().out
    assert PredicateAccount(bytecode).address.to_b256() in out

    main(["predicate", "address", bytecode.hex()])
    assert PredicateAccount(bytecode).address.to_b256() in capsys.readouterr().out


def test_network(capsys, monkeypatch):
    monkeypatch.setenv("FUEL_PROVIDER_URL", "http://node.example:4000/graphql")
    main(["network", "local"])
    data = json.loads(capsys.readouterr().out)
    assert data["provider_url"] == "http://node.example:4000/graphql"
    assert data["bech32_prefix"] == "fuel"

    with pytest.raises(SystemExit):
        main(["network", "nope"])
