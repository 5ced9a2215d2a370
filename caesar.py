"""
Caesar (rotation) cipher primitives.

Every ASCII letter moves back `key` places around its own case's alphabet.
Rotations form a cyclic group of order 26, so undoing a shift by `key` is
the same as shifting by `26 - key`.
"""

import string

ALPHABET = string.ascii_lowercase

# Caesar keys outside this range are rejected, not wrapped
CAESAR_MIN_KEY = 1
CAESAR_MAX_KEY = 25


def check_caesar_key(key) -> None:
    """Raise ValueError unless key is an int in [CAESAR_MIN_KEY, CAESAR_MAX_KEY]."""
    # bool is an int subclass but never a meaningful shift
    if isinstance(key, bool) or not isinstance(key, int):
        raise ValueError(f"Caesar key must be an integer, got {key!r}")
    if not CAESAR_MIN_KEY <= key <= CAESAR_MAX_KEY:
        raise ValueError(
            f"Caesar key must be in [{CAESAR_MIN_KEY}, {CAESAR_MAX_KEY}], got {key}"
        )


def caesar_encrypt(text: str, key: int) -> str:
    """Shift every ASCII letter back by `key` places, keeping its case."""
    check_caesar_key(key)
    result = []
    for char in text:
        if 'a' <= char <= 'z':
            result.append(chr((ord(char) - ord('a') - key) % 26 + ord('a')))
        elif 'A' <= char <= 'Z':
            result.append(chr((ord(char) - ord('A') - key) % 26 + ord('A')))
        else:
            result.append(char)
    return ''.join(result)


def caesar_decrypt(text: str, key: int) -> str:
    """Undo caesar_encrypt: a backward shift by 26 - key is a forward shift by key."""
    check_caesar_key(key)
    return caesar_encrypt(text, 26 - key)
