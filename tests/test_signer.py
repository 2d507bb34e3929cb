import hashlib
import pytest

from fuelwallet.protocol.config.params import MESSAGE_PREFIX
from fuelwallet.protocol.crypto.addresses import Address
from fuelwallet.protocol.crypto.keys import (
    CURVE_ORDER, SecretKey, generate_private_key, public_key_from_private,
)
from fuelwallet.protocol.crypto.signer import (
    Signer, hash_message, recover_address, recover_public_key, sign, verify_message,
)
from fuelwallet.protocol.types.common import InvalidKey, InvalidSignature
from fuelwallet.observability import export_metrics

PRIVATE_KEY = "a1447cd75accc6b71a976fd3401a1f6ce318d27ba660b0315ee6ac347bf39568"


def test_hash_message_is_domain_separated():
    message = "doc-test-message"
    expected = hashlib.sha256(MESSAGE_PREFIX + b"16" + message.encode()).digest()

    assert hash_message(message) == expected
    assert hash_message(message.encode()) == expected
    # A raw sha256 of the text (as a transaction id would be) differs
    assert hash_message(message) != hashlib.sha256(message.encode()).digest()
    assert len(hash_message("")) == 32


def test_signer_address_matches_public_key():
    signer = Signer(PRIVATE_KEY)

    assert signer.address == Address.from_public_key(signer.public_key)
    assert len(bytes.fromhex(signer.public_key[2:])) == 64
    assert len(bytes.fromhex(signer.compressed_public_key[2:])) == 33
    assert signer.private_key == "0x" + PRIVATE_KEY
    # Prefixed and unprefixed keys are the same key
    assert Signer("0x" + PRIVATE_KEY).address == signer.address


def test_sign_and_recover():
    signer = Signer(PRIVATE_KEY)
    digest = hash_message("doc-test-message")

    signature = signer.sign(digest)

    assert len(signature) == 64
    assert Signer.recover_address(digest, signature) == signer.address
    assert recover_public_key(digest, signature).hex() == signer.public_key[2:]


def test_signature_is_deterministic():
    digest = hash_message("same message")
    assert sign(digest, PRIVATE_KEY) == sign(digest, PRIVATE_KEY)
    assert sign(digest, PRIVATE_KEY) != sign(hash_message("other message"), PRIVATE_KEY)


def test_signature_is_low_s():
    for i in range(10):
        signature = sign(hash_message(f"message {i}"), PRIVATE_KEY)
        s = int.from_bytes(bytes([signature[32] & 0x7F]) + signature[33:], "big")
        assert s <= CURVE_ORDER // 2


def test_soundness_over_many_keys():
    for i in range(10):
        priv = generate_private_key()
        address = Address.from_public_key(public_key_from_private(priv))
        digest = hash_message(f"message {i}")

        assert recover_address(digest, sign(digest, priv)) == address


def test_different_keys_give_different_signatures():
    digest = hash_message("shared message")
    priv1 = generate_private_key()
    priv2 = generate_private_key()

    sig1 = sign(digest, priv1)
    sig2 = sign(digest, priv2)

    assert sig1 != sig2
    assert recover_address(digest, sig1) != recover_address(digest, sig2)


def test_wrong_digest_recovers_other_address_without_error():
    signer = Signer(PRIVATE_KEY)
    signature = signer.sign(hash_message("signed"))

    recovered = recover_address(hash_message("not signed"), signature)

    assert recovered != signer.address
    assert not verify_message(signer.address, "not signed", signature)
    assert verify_message(signer.address, "signed", signature)


def test_recover_accepts_hex_signature():
    signer = Signer(PRIVATE_KEY)
    digest = hash_message("hex")
    signature = "0x" + signer.sign(digest).hex()
    assert recover_address(digest, signature) == signer.address


def test_malformed_signatures():
    digest = hash_message("x")
    with pytest.raises(InvalidSignature):
        recover_address(digest, b"\x01" * 63)
    with pytest.raises(InvalidSignature):
        recover_address(digest, b"\x00" * 64)
    with pytest.raises(InvalidSignature):
        recover_address(digest, "0xzz")
    # r >= curve order
    with pytest.raises(InvalidSignature):
        recover_address(digest, b"\xff" * 32 + b"\x01" * 32)
    assert not verify_message(Address.from_random(), "x", b"\x01" * 10)


def test_digest_length_checked():
    with pytest.raises(ValueError):
        sign(b"\x01" * 31, PRIVATE_KEY)


@pytest.mark.parametrize("bad_key", [
    "nothex",
    "0x1234",
    " " + PRIVATE_KEY,
    PRIVATE_KEY[:2] + " " + PRIVATE_KEY[2:],
    PRIVATE_KEY + "\n",
    "00" * 32,
    CURVE_ORDER.to_bytes(32, "big").hex(),
])
def test_invalid_private_keys(bad_key):
    with pytest.raises(InvalidKey):
        Signer(bad_key)


def test_secret_key_wipe():
    secret = SecretKey(PRIVATE_KEY)
    buf = secret._buf

    secret.wipe()

    assert secret.wiped
    assert bytes(buf) == b"\x00" * 32
    with pytest.raises(InvalidKey):
        secret.hex()


def test_secret_key_wiped_on_error_exit():
    secret = SecretKey.generate()
    with pytest.raises(RuntimeError):
        with secret:
            raise RuntimeError("boom")
    assert secret.wiped


def test_signer_wipe_disables_signing():
    signer = Signer(generate_private_key())
    signer.wipe()
    with pytest.raises(InvalidKey):
        signer.sign(hash_message("x"))


def test_signatures_are_counted():
    Signer(PRIVATE_KEY).sign(hash_message("metrics"))
    assert b"fuelwallet_signatures_total" in export_metrics()


def test_hex_signature_with_whitespace_rejected():
    signer = Signer(PRIVATE_KEY)
    digest = hash_message("spaced")
    hex_sig = signer.sign(digest).hex()

    with pytest.raises(InvalidSignature, match="hex"):
        recover_address(digest, " " + hex_sig)
    with pytest.raises(InvalidSignature, match="hex"):
        recover_address(digest, hex_sig[:64] + " " + hex_sig[64:])
    assert recover_address(digest, hex_sig) == signer.address
