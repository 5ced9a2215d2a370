"""
Letter-frequency tools for attacking monoalphabetic ciphers.

A substitution only renames letters, so the sorted list of letter counts
(the rank profile) of a ciphertext is the same as its plaintext's. Lining
up the most frequent ciphertext letters with the most frequent English
letters gives a first guess at the key; for a Caesar cipher the 25
candidate keys can simply be scored against English statistics.
"""

import math
from collections import Counter
from typing import Dict, List, Tuple

from caesar import ALPHABET, CAESAR_MAX_KEY, CAESAR_MIN_KEY, caesar_decrypt

# Standard English letter frequencies (%)
ENGLISH_LETTER_FREQUENCIES = {
    'e': 12.70, 't': 9.06, 'a': 8.17, 'o': 7.51, 'i': 6.97, 'n': 6.75,
    's': 6.33, 'h': 6.09, 'r': 5.99, 'd': 4.25, 'l': 4.03, 'c': 2.78,
    'u': 2.76, 'm': 2.41, 'w': 2.36, 'f': 2.23, 'g': 2.02, 'y': 1.97,
    'p': 1.93, 'b': 1.29, 'v': 0.98, 'k': 0.77, 'j': 0.15, 'x': 0.15,
    'q': 0.10, 'z': 0.07
}
ENGLISH_FREQUENCY_ORDER = "".join(
    letter for letter, _ in sorted(ENGLISH_LETTER_FREQUENCIES.items(), key=lambda item: item[1], reverse=True)
)


def letter_counts(text: str) -> Counter:
    """Count a-z letters in text, case-folded. Other characters are ignored."""
    return Counter(char.lower() for char in text if char.isascii() and char.isalpha())


def frequency_ranking(text: str) -> List[str]:
    """Letters present in text, most frequent first (ties alphabetical)."""
    counts = letter_counts(text)
    return sorted(counts, key=lambda letter: (-counts[letter], letter))


def letter_frequencies(text: str) -> Dict[str, float]:
    """Percentage of each letter present in text, most frequent first."""
    counts = letter_counts(text)
    total = sum(counts.values())
    if not total:
        return {}
    return {letter: counts[letter] / total * 100 for letter in frequency_ranking(text)}


def rank_profile(text: str) -> List[int]:
    """Letter counts sorted descending, with the letter identities dropped."""
    return sorted(letter_counts(text).values(), reverse=True)


def chi_squared(text: str) -> float:
    """Chi-squared distance between the letters of text and English. Lower is more English-like."""
    counts = letter_counts(text)
    total = sum(counts.values())
    if not total:
        return math.inf
    score = 0.0
    for letter, percent in ENGLISH_LETTER_FREQUENCIES.items():
        expected = total * percent / 100
        score += (counts[letter] - expected) ** 2 / expected
    return score


def crack_caesar(ciphertext: str) -> Tuple[int, str]:
    """
    Recover the Caesar key by trying every key and keeping the decryption
    closest to English.

    Returns:
        (key, plaintext). Ties, including ciphertext without letters,
        go to the smallest key.
    """
    best_key, best_text, best_score = CAESAR_MIN_KEY, ciphertext, math.inf
    for key in range(CAESAR_MIN_KEY, CAESAR_MAX_KEY + 1):
        candidate = caesar_decrypt(ciphertext, key)
        score = chi_squared(candidate)
        if score < best_score:
            best_key, best_text, best_score = key, candidate, score
    if best_score == math.inf:
        best_text = caesar_decrypt(ciphertext, best_key)
    return best_key, best_text


def guess_decoding_table(ciphertext: str) -> Dict[str, str]:
    """
    Guess a cipher->plain mapping by aligning frequency ranks with English.

    Letters missing from the ciphertext are paired with the leftover
    English letters in order, so the guess is always a full bijection.
    """
    ranking = frequency_ranking(ciphertext)
    unseen = [letter for letter in ALPHABET if letter not in ranking]
    return dict(zip(ranking + unseen, ENGLISH_FREQUENCY_ORDER))


def apply_partial_key(ciphertext: str, mapping: Dict[str, str], unknown: str = "_") -> str:
    """Decrypt with a (possibly partial) cipher->plain mapping; unmapped letters become `unknown`."""
    result = []
    for char in ciphertext:
        lower = char.lower()
        if char.isascii() and lower in ALPHABET:
            plain = mapping.get(lower)
            if plain is None:
                result.append(unknown)
            else:
                result.append(plain.upper() if char.isupper() else plain.lower())
        else:
            result.append(char)
    return ''.join(result)
