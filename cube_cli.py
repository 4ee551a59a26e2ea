#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Command line front end for the cube cipher.

    python cube_cli.py encrypt "HELLO" --key "U R' F2" --out cipher.txt
    python cube_cli.py decrypt --file cipher.txt
    python cube_cli.py demo
"""
import argparse
import sys

from cube_cipher import (
    CipherError,
    CubeCipher,
    DEFAULT_KEY_LENGTH,
    generate_key,
    load_ciphertext,
    parse_key,
    save_ciphertext,
)


def cmd_encrypt(args) -> int:
    cipher = CubeCipher(strict=not args.lenient)
    key = parse_key(args.key) if args.key else generate_key(args.key_length, cipher.table)
    encrypted = cipher.encrypt(args.message, key)
    if args.out:
        save_ciphertext(args.out, encrypted)
        print(f"Ciphertext written to {args.out}")
    print("Key: " + " ".join(key))
    print("Encrypted: " + encrypted)
    return 0

def cmd_decrypt(args) -> int:
    if args.file:
        ciphertext = load_ciphertext(args.file)
    elif args.ciphertext:
        ciphertext = args.ciphertext
    else:
        print("ERROR: give a ciphertext or --file", file=sys.stderr)
        return 2
    cipher = CubeCipher(strict=not args.lenient)
    print("Decrypted: " + cipher.decrypt(ciphertext))
    return 0

def cmd_demo(args) -> int:
    """Prompt for a message, encrypt with a random key, save, reload and decrypt."""
    plaintext = input("Enter message: ")

    cipher = CubeCipher()
    key = generate_key(args.key_length, cipher.table)
    encrypted = cipher.encrypt(plaintext, key)
    save_ciphertext(args.out, encrypted)

    loaded = load_ciphertext(args.out)
    # Fresh instance: nothing but the ciphertext carries over
    decrypted = CubeCipher().decrypt(loaded)

    print("Key: " + " ".join(key) + "\n")
    print("Encrypted: " + encrypted + "\n")
    print("Decrypted: " + decrypted + "\n")
    return 0

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Encrypt and decrypt text with cube moves.")
    sub = parser.add_subparsers(dest="command", required=True)

    enc = sub.add_parser("encrypt", help="Encrypt a message.")
    enc.add_argument("message", type=str, help="The message to encrypt.")
    enc.add_argument("--key", type=str, default=None, help="Moves, e.g. \"U R' F2\". Random if omitted.")
    enc.add_argument("--key-length", type=int, default=DEFAULT_KEY_LENGTH, help="Length of a generated key.")
    enc.add_argument("--out", type=str, default=None, help="Write the ciphertext to this file.")
    enc.add_argument("--lenient", action="store_true", help="Skip unknown moves instead of failing.")
    enc.set_defaults(func=cmd_encrypt)

    dec = sub.add_parser("decrypt", help="Decrypt a ciphertext.")
    dec.add_argument("ciphertext", type=str, nargs="?", default=None, help="The ciphertext to decrypt.")
    dec.add_argument("--file", type=str, default=None, help="Read the ciphertext from this file.")
    dec.add_argument("--lenient", action="store_true", help="Skip unknown moves instead of failing.")
    dec.set_defaults(func=cmd_decrypt)

    demo = sub.add_parser("demo", help="Interactive round trip through a file.")
    demo.add_argument("--key-length", type=int, default=DEFAULT_KEY_LENGTH, help="Length of the random key.")
    demo.add_argument("--out", type=str, default="cipher.txt", help="File used for the round trip.")
    demo.set_defaults(func=cmd_demo)

    return parser

def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except CipherError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

if __name__ == "__main__":
    sys.exit(main())
