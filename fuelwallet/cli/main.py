# MIT License
# Copyright (c) 2025 Hashborn

import argparse
import json
import logging
import os
import sys

from ..protocol.config.params import get_network
from ..protocol.crypto.addresses import Address
from ..protocol.crypto.signer import hash_message, recover_address, verify_message
from ..protocol.types.common import FuelError
from ..wallet.account import Account
from ..wallet.predicate import PredicateAccount


def fail(message: str):
    print(f"Error: {message}")
    sys.exit(1)

# --- Address Commands ---
def cmd_address_convert(args):
    try:
        address = Address.from_string(args.address)
    except FuelError as e:
        fail(e.message)
    print(f"B256:   {address.to_b256()}")
    print(f"Bech32: {address.to_address()}")

def cmd_address_from_pubkey(args):
    try:
        address = Address.from_public_key(args.public_key)
    except FuelError as e:
        fail(e.message)
    print(f"B256:   {address.to_b256()}")
    print(f"Bech32: {address.to_address()}")

# --- Keys Commands ---
def cmd_keys_new(args):
    account = Account.generate()
    print(json.dumps({
        "address": str(account.address),
        "b256": account.address.to_b256(),
        "public_key": account.public_key,
        "private_key": account.private_key,
    }, indent=2))
    print("Important: Private key is shown once and not stored. Do not share!")
    account.lock()

def cmd_keys_show(args):
    try:
        account = Account.from_private_key(args.private_key)
    except FuelError as e:
        fail(e.message)
    print(json.dumps({
        "address": str(account.address),
        "b256": account.address.to_b256(),
        "public_key": account.public_key,
    }, indent=2))
    account.lock()

# --- Signing Commands ---
def cmd_sign(args):
    try:
        account = Account.from_private_key(args.private_key)
    except FuelError as e:
        fail(e.message)
    signature = account.sign_message(args.message)
    account.lock()
    print("0x" + signature.hex())

def cmd_recover(args):
    try:
        address = recover_address(hash_message(args.message), args.signature)
    except FuelError as e:
        fail(e.message)
    print(f"Signer: {address}")
    if args.expect:
        try:
            expected = Address.from_string(args.expect)
        except FuelError as e:
            fail(e.message)
        if not verify_message(expected, args.message, args.signature):
            fail(f"signature was not made by {expected}")
        print("Signature matches expected address.")

# --- Predicate Commands ---
def cmd_predicate_address(args):
    source = args.bytecode
    try:
        if os.path.isfile(source):
            with open(source, "rb") as f:
                bytecode = f.read()
        else:
            bytecode = source
        predicate = PredicateAccount(bytecode)
    except (FuelError, ValueError) as e:
        fail(str(e))
    print(f"B256:   {predicate.address.to_b256()}")
    print(f"Bech32: {predicate.address.to_address()}")

# --- Network Commands ---
def cmd_network(args):
    try:
        config = get_network(args.name)
    except KeyError as e:
        fail(e.args[0])
    print(json.dumps({
        "network_id": config.network_id,
        "provider_url": config.provider_url,
        "chain_id": config.chain_id,
        "bech32_prefix": config.bech32_prefix,
        "base_asset_id": config.base_asset_id,
    }, indent=2))

def main(argv=None):
    parser = argparse.ArgumentParser(prog="fuelwallet", description="Fuel wallet core CLI")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Sub-commands")

    # address
    p_addr = subparsers.add_parser("address", help="Convert and derive addresses")
    sp_addr = p_addr.add_subparsers(dest="subcommand")

    pa_conv = sp_addr.add_parser("convert", help="Show both encodings of an address")
    pa_conv.add_argument("address", help="B256 (0x...) or Bech32 (fuel1...) address")

    pa_pub = sp_addr.add_parser("from-pubkey", help="Derive address from public key")
    pa_pub.add_argument("public_key", help="Hex public key (64 bytes)")

    # keys
    p_keys = subparsers.add_parser("keys", help="Generate and inspect keys")
    sp_keys = p_keys.add_subparsers(dest="subcommand")

    sp_keys.add_parser("new", help="Generate a new key pair")

    pk_show = sp_keys.add_parser("show", help="Show address of a private key")
    pk_show.add_argument("private_key", help="Hex private key")

    # sign / recover
    p_sign = subparsers.add_parser("sign", help="Sign a message")
    p_sign.add_argument("private_key", help="Hex private key")
    p_sign.add_argument("message", help="Message text")

    p_rec = subparsers.add_parser("recover", help="Recover the signer of a message")
    p_rec.add_argument("message", help="Message text")
    p_rec.add_argument("signature", help="Hex signature (64 bytes)")
    p_rec.add_argument("--expect", help="Fail unless the signer is this address")

    # predicate
    p_pred = subparsers.add_parser("predicate", help="Predicate tools")
    sp_pred = p_pred.add_subparsers(dest="subcommand")

    pp_addr = sp_pred.add_parser("address", help="Compute predicate address")
    pp_addr.add_argument("bytecode", help="Hex bytecode or path to a binary file")

    # network
    p_net = subparsers.add_parser("network", help="Show network configuration")
    p_net.add_argument("name", nargs="?", help="Network name (default: $FUEL_NETWORK or local)")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    if args.command == "address":
        if args.subcommand == "convert": cmd_address_convert(args)
        elif args.subcommand == "from-pubkey": cmd_address_from_pubkey(args)
        else: p_addr.print_help()

    elif args.command == "keys":
        if args.subcommand == "new": cmd_keys_new(args)
        elif args.subcommand == "show": cmd_keys_show(args)
        else: p_keys.print_help()

    elif args.command == "sign":
        cmd_sign(args)

    elif args.command == "recover":
        cmd_recover(args)

    elif args.command == "predicate":
        if args.subcommand == "address": cmd_predicate_address(args)
        else: p_pred.print_help()

    elif args.command == "network":
        cmd_network(args)

    else:
        parser.print_help()

if __name__ == "__main__":
    main()
