# Cube move table for the permutation cipher
# Six named bijections over 54 state positions, plus their exact inverses

import hashlib
import re
from enum import Enum
from functools import lru_cache
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

STATE_SIZE = 54
MOVE_NAMES = ("U", "R", "L", "F", "D", "B")
TABLE_SEED = 42


class CipherError(ValueError):
    """Base class for every error raised by the cube cipher."""


class InvalidMoveError(CipherError):
    """Raised when a move token does not follow the token grammar."""


class UnknownMoveError(InvalidMoveError):
    """Raised in strict mode when a token names a move that is not in the table."""


def _to_bytes(n):
    """Seed as big-endian bytes; zero becomes a single NUL byte."""
    return n.to_bytes((n.bit_length() + 7) // 8, 'big') if n > 0 else b'\x00'

def _sha256_int(data):
    """SHA256 digest of data read as one big unsigned integer."""
    return int(hashlib.sha256(data).hexdigest(), 16)

def _shuffled_positions(seed: int, name: str, size: int) -> List[int]:
    """
    Deterministic Fisher-Yates shuffle of range(size).

    Every swap index comes from SHA256(seed || name || step), so any process
    that uses the same seed builds exactly the same table.
    """
    seed_b = _to_bytes(seed)
    name_b = name.encode('utf-8')
    positions = list(range(size))
    for i in range(size - 1, 0, -1):
        j = _sha256_int(seed_b + b':' + name_b + b':' + i.to_bytes(2, 'big')) % (i + 1)
        positions[i], positions[j] = positions[j], positions[i]
    return positions

def invert_permutation(forward: Sequence[int]) -> Tuple[int, ...]:
    """Return the permutation inv with inv[forward[i]] == i."""
    inverse = [0] * len(forward)
    for i, target in enumerate(forward):
        inverse[target] = i
    return tuple(inverse)


class MoveTable:
    """
    Read-only table of forward/inverse permutations keyed by move name.

    Permutations are stored as tuples and the table exposes no way to change
    them after construction.
    """

    def __init__(self, seed: int = TABLE_SEED, names: Sequence[str] = MOVE_NAMES, size: int = STATE_SIZE):
        self._seed = seed
        self._size = size
        self._forward: Dict[str, Tuple[int, ...]] = {}
        self._inverse: Dict[str, Tuple[int, ...]] = {}
        for name in names:
            forward = tuple(_shuffled_positions(seed, name, size))
            self._forward[name] = forward
            self._inverse[name] = invert_permutation(forward)

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def size(self) -> int:
        return self._size

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(self._forward)

    def __contains__(self, name) -> bool:
        return name in self._forward

    def lookup(self, name: str) -> Optional[Tuple[Tuple[int, ...], Tuple[int, ...]]]:
        """Return (forward, inverse) for name, or None if the move is unknown."""
        if name not in self._forward:
            return None
        return self._forward[name], self._inverse[name]

    def as_dict(self) -> dict:
        """JSON-friendly copy of the table (used by the API and the inspection script)."""
        return {
            name: {'forward': list(self._forward[name]), 'inverse': list(self._inverse[name])}
            for name in self._forward
        }


@lru_cache(maxsize=None)
def get_move_table() -> MoveTable:
    """Shared move table, built once on first use."""
    return MoveTable()


# ============================================================================
# MOVE TOKENS
# ============================================================================

class Modifier(Enum):
    NORMAL = ""
    REVERSED = "'"
    DOUBLE = "2"
    # Only produced by inverting a DOUBLE token; the key generator never emits it
    REVERSED_DOUBLE = "'2"

    @property
    def reversed(self) -> bool:
        return self in (Modifier.REVERSED, Modifier.REVERSED_DOUBLE)

    @property
    def times(self) -> int:
        return 2 if self in (Modifier.DOUBLE, Modifier.REVERSED_DOUBLE) else 1


_INVERTED_MODIFIER = {
    Modifier.NORMAL: Modifier.REVERSED,
    Modifier.REVERSED: Modifier.NORMAL,
    Modifier.DOUBLE: Modifier.REVERSED_DOUBLE,
    Modifier.REVERSED_DOUBLE: Modifier.DOUBLE,
}

# name, then optional reversed marker, then optional double marker (in that order)
_TOKEN_RE = re.compile(r"^(?P<name>[^'2,:|\s]+)(?P<modifier>'?2?)$")


class MoveToken(NamedTuple):
    name: str
    modifier: Modifier = Modifier.NORMAL

    def __str__(self):
        return self.name + self.modifier.value


def parse_move(token) -> MoveToken:
    """
    Split a token such as "R'" or "F2" into (name, modifier).

    Unknown names are allowed here; whether they are an error is decided by
    the caller (see apply_move / CubeCipher strict mode).
    """
    if isinstance(token, MoveToken):
        return token
    if not isinstance(token, str):
        raise InvalidMoveError(f"Move token must be a string, got {type(token).__name__}")
    match = _TOKEN_RE.match(token)
    if match is None:
        raise InvalidMoveError(f"Invalid move token: {token!r}")
    return MoveToken(match.group('name'), Modifier(match.group('modifier')))

def invert_move(token) -> MoveToken:
    """X -> X', X' -> X, X2 -> X'2, X'2 -> X2"""
    move = parse_move(token)
    return MoveToken(move.name, _INVERTED_MODIFIER[move.modifier])

def apply_permutation(state: List[str], permutation: Sequence[int]) -> None:
    """Gather in place: state'[i] = state[permutation[i]]."""
    if len(state) != len(permutation):
        raise ValueError(f"State has {len(state)} positions, permutation has {len(permutation)}")
    state[:] = [state[p] for p in permutation]

def apply_move(state: List[str], token, table: Optional[MoveTable] = None, strict: bool = False) -> bool:
    """
    Apply one move token to state in place.

    Returns True if the move was applied. An unknown move name leaves the
    state unchanged and returns False, or raises UnknownMoveError when
    strict is set.
    """
    move = parse_move(token)
    table = table or get_move_table()
    entry = table.lookup(move.name)
    if entry is None:
        if strict:
            raise UnknownMoveError(f"Unknown move: {move.name!r}")
        return False

    forward, inverse = entry
    permutation = inverse if move.modifier.reversed else forward
    for _ in range(move.modifier.times):
        apply_permutation(state, permutation)
    return True
