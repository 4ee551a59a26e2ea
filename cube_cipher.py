#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Cube permutation cipher.

A message is laid out on a 54-position "cube" state, scrambled by a key of
cube moves, and emitted as

    <54-character state>|<base64("<length>:<move>,<move>,...")>

Everything needed to undo the scramble travels inside the ciphertext, so
decrypting needs nothing but the ciphertext string itself.
"""
import base64
import binascii
import os
import re
import secrets
from typing import List, Optional, Sequence, Tuple

from cube_moves import (
    STATE_SIZE,
    CipherError,
    InvalidMoveError,
    Modifier,
    MoveTable,
    UnknownMoveError,
    apply_move,
    get_move_table,
    invert_move,
    parse_move,
)

DEBUG_MODE = os.environ.get('DEBUG', 'false').lower() == 'true'

SENTINEL = '_'
DELIMITER = '|'
DEFAULT_KEY_LENGTH = 6

# Modifiers the key generator picks from ('2 only ever appears via inversion)
GENERATED_MODIFIERS = (Modifier.NORMAL, Modifier.REVERSED, Modifier.DOUBLE)

# Decimal digits only, at most nine of them
_LENGTH_RE = re.compile(r'[0-9]{1,9}')


class CiphertextFormatError(CipherError):
    """Ciphertext is not '<state>|<metadata>' or the state has the wrong size."""


class MetadataError(CipherError):
    """Embedded metadata could not be decoded."""


class InvalidMessageError(CipherError):
    """Message cannot be represented in a ciphertext."""


# ============================================================================
# STATE ENCODING
# ============================================================================

def encode_message(message: str, size: int = STATE_SIZE) -> List[str]:
    """Truncate to size characters, then right-pad with the sentinel."""
    return list(message[:size].ljust(size, SENTINEL))

def decode_state(state: Sequence[str]) -> str:
    """State back to text, sentinel padding included."""
    return ''.join(state)

def load_state(body: str, size: int = STATE_SIZE) -> List[str]:
    """
    Load a ciphertext body as a state.

    Short bodies are padded with the sentinel. A body longer than the state
    cannot have come from encrypt(), so it is rejected.
    """
    if len(body) > size:
        raise CiphertextFormatError(
            f"Cipher body has {len(body)} characters, the state holds {size}"
        )
    return list(body.ljust(size, SENTINEL))


# ============================================================================
# METADATA
# ============================================================================

def encode_metadata(length: int, key: Sequence) -> str:
    """(length, key) -> base64 of "<length>:<tok1,tok2,...>"."""
    if length < 0:
        raise MetadataError(f"Message length must be non-negative, got {length}")
    tokens = ','.join(str(parse_move(token)) for token in key)
    plain = f"{length}:{tokens}"
    return base64.b64encode(plain.encode('utf-8')).decode('ascii')

def decode_metadata(blob: str) -> Tuple[int, List[str]]:
    """Inverse of encode_metadata. Raises MetadataError on anything malformed."""
    try:
        plain = base64.b64decode(blob.encode('ascii'), validate=True).decode('utf-8')
    except (binascii.Error, UnicodeError) as e:
        raise MetadataError(f"Metadata is not valid base64 text: {e}") from e

    length_str, sep, tokens = plain.partition(':')
    if not sep:
        raise MetadataError("Metadata is missing the ':' separator")
    if not _LENGTH_RE.fullmatch(length_str):
        raise MetadataError(f"Message length is not a non-negative integer: {length_str!r}")

    key = tokens.split(',') if tokens else []
    return int(length_str), key


# ============================================================================
# KEYS
# ============================================================================

def generate_key(length: int = DEFAULT_KEY_LENGTH, table: Optional[MoveTable] = None) -> List[str]:
    """Random key of `length` tokens: a move name plus '', ' or 2."""
    if length < 0:
        raise ValueError("Key length must be non-negative")
    names = (table or get_move_table()).names
    return [
        secrets.choice(names) + secrets.choice(GENERATED_MODIFIERS).value
        for _ in range(length)
    ]

def parse_key(key) -> List[str]:
    """
    Accept a key as a list of tokens or a single string separated by spaces
    and/or commas ("U R' F2", "U,R',F2").
    """
    if isinstance(key, str):
        return [token for token in re.split(r'[\s,]+', key) if token]
    return [str(parse_move(token)) for token in key]


# ============================================================================
# CIPHER
# ============================================================================

class CubeCipher:
    """
    Encrypt/decrypt facade.

    Each call builds its own state, so a single instance may be shared; the
    move table is shared read-only between all instances.

    With strict=True every key token must name a known move (UnknownMoveError
    otherwise). With strict=False unknown moves are skipped silently.
    """

    def __init__(self, table: Optional[MoveTable] = None, strict: bool = True):
        self.table = table or get_move_table()
        self.strict = strict

    @property
    def size(self) -> int:
        return self.table.size

    def validate_key(self, key: Sequence) -> List[str]:
        """Parse every token; in strict mode also check the move names."""
        tokens = []
        for token in key:
            move = parse_move(token)
            if self.strict and move.name not in self.table:
                raise UnknownMoveError(f"Unknown move: {move.name!r}")
            tokens.append(str(move))
        return tokens

    def apply_key(self, state: List[str], key: Sequence) -> List[str]:
        for token in key:
            applied = apply_move(state, token, self.table, strict=self.strict)
            if not applied and DEBUG_MODE:
                print(f"DEBUG: Skipping unknown move {token!r}")
        return state

    def unapply_key(self, state: List[str], key: Sequence) -> List[str]:
        # Inverses in reverse order
        for token in reversed(key):
            applied = apply_move(state, invert_move(token), self.table, strict=self.strict)
            if not applied and DEBUG_MODE:
                print(f"DEBUG: Skipping unknown move {token!r}")
        return state

    def encrypt(self, message: str, key: Sequence) -> str:
        """
        1. Lay the message out on the state (truncate/pad to the state size)
        2. Apply each key token in order
        3. Append the base64 metadata block
        """
        if DELIMITER in message:
            raise InvalidMessageError(f"Message may not contain the {DELIMITER!r} delimiter")
        tokens = self.validate_key(key)

        if DEBUG_MODE and len(message) > self.size:
            print(f"DEBUG: Message truncated from {len(message)} to {self.size} characters")

        state = encode_message(message, self.size)
        self.apply_key(state, tokens)
        body = decode_state(state)
        meta = encode_metadata(len(message), tokens)

        if DEBUG_MODE:
            print(f"DEBUG: Encrypted {len(message)} characters with key {' '.join(tokens)}")
        return body + DELIMITER + meta

    def decrypt(self, ciphertext: str) -> str:
        """
        1. Split body and metadata (exactly one delimiter)
        2. Recover length and key from the metadata
        3. Apply inverted key tokens in reverse order
        4. Cut the result to the recorded length
        """
        parts = ciphertext.split(DELIMITER)
        if len(parts) != 2:
            raise CiphertextFormatError(
                f"Invalid ciphertext format: expected one {DELIMITER!r} separator, found {len(parts) - 1}"
            )
        body, meta = parts

        length, key = decode_metadata(meta)
        tokens = self.validate_key(key)
        state = load_state(body, self.size)
        self.unapply_key(state, tokens)

        decoded = decode_state(state)
        if DEBUG_MODE:
            print(f"DEBUG: Decrypted with key {' '.join(tokens)}, length={length}")
        return decoded[:min(length, len(decoded))]

    def inspect(self, ciphertext: str) -> dict:
        """Body, length and key of a ciphertext without decrypting it."""
        parts = ciphertext.split(DELIMITER)
        if len(parts) != 2:
            raise CiphertextFormatError("Invalid ciphertext format.")
        length, key = decode_metadata(parts[1])
        return {'body': parts[0], 'length': length, 'key': key}


# ============================================================================
# FILES
# ============================================================================

def save_ciphertext(path: str, text: str) -> None:
    with open(path, 'w', encoding='utf-8', newline='') as f:
        f.write(text)

def load_ciphertext(path: str) -> str:
    with open(path, 'r', encoding='utf-8', newline='') as f:
        return f.read()


def encrypt(message: str, key: Sequence, strict: bool = True) -> str:
    return CubeCipher(strict=strict).encrypt(message, key)

def decrypt(ciphertext: str, strict: bool = True) -> str:
    return CubeCipher(strict=strict).decrypt(ciphertext)

