import math
import string

import pytest

from classical_engine import SubstitutionCipher, caesar_encrypt
from frequency_analysis import (
    ENGLISH_FREQUENCY_ORDER,
    ENGLISH_LETTER_FREQUENCIES,
    apply_partial_key,
    chi_squared,
    crack_caesar,
    frequency_ranking,
    guess_decoding_table,
    letter_counts,
    letter_frequencies,
    rank_profile,
)

ENGLISH = (
    "Cryptography is the practice of hiding the meaning of a message from "
    "everyone except the people it is meant for. The oldest ciphers simply "
    "replaced every letter of the message with another letter, and for a long "
    "time this was considered good enough. Then someone noticed that in any "
    "long piece of writing the letter e turns up far more often than the "
    "letter z, and that the same holds true after the letters have been "
    "swapped around."
)


def test_english_tables_are_consistent():
    assert sorted(ENGLISH_FREQUENCY_ORDER) == list(string.ascii_lowercase)
    assert ENGLISH_FREQUENCY_ORDER.startswith("etaoin")
    assert math.isclose(sum(ENGLISH_LETTER_FREQUENCIES.values()), 100, abs_tol=0.5)


def test_letter_counts_fold_case_and_skip_non_letters():
    assert letter_counts("AaB b! 9 é") == {"a": 2, "b": 2}


def test_frequency_ranking_breaks_ties_alphabetically():
    assert frequency_ranking("ccc bb aa d") == ["c", "a", "b", "d"]


def test_letter_frequencies_are_percentages():
    frequencies = letter_frequencies("aaab")
    assert list(frequencies) == ["a", "b"]
    assert frequencies["a"] == pytest.approx(75.0)
    assert frequencies["b"] == pytest.approx(25.0)


def test_letter_frequencies_of_letterless_text():
    assert letter_frequencies("123 !!") == {}


def test_rank_profile_matches_between_plaintext_and_ciphertext():
    for key in (3, 11, 25):
        assert rank_profile(caesar_encrypt(ENGLISH, key)) == rank_profile(ENGLISH)
    for key in (0, 9, 314):
        assert rank_profile(SubstitutionCipher(key).encrypt(ENGLISH)) == rank_profile(ENGLISH)


def test_substitution_permutes_letter_identities_not_counts():
    cipher = SubstitutionCipher(21)
    plain_counts = letter_counts(ENGLISH)
    cipher_counts = letter_counts(cipher.encrypt(ENGLISH))
    for letter, count in plain_counts.items():
        encoded = cipher.encoding_table[ord(letter) - ord("a")]
        assert cipher_counts[encoded] == count


def test_chi_squared_prefers_english():
    assert chi_squared(ENGLISH) < chi_squared(caesar_encrypt(ENGLISH, 7))
    assert chi_squared("") == math.inf


@pytest.mark.parametrize("key", [1, 3, 13, 25])
def test_crack_caesar_recovers_key(key):
    recovered_key, plaintext = crack_caesar(caesar_encrypt(ENGLISH, key))
    assert recovered_key == key
    assert plaintext == ENGLISH


def test_crack_caesar_without_letters_picks_smallest_key():
    assert crack_caesar("1234 !!") == (1, "1234 !!")


def test_guess_decoding_table_is_bijection():
    table = guess_decoding_table("xxxx yyy zz w")
    assert sorted(table) == list(string.ascii_lowercase)
    assert sorted(table.values()) == list(string.ascii_lowercase)
    assert table["x"] == "e"
    assert table["y"] == "t"
    assert table["z"] == "a"
    assert table["w"] == "o"


def test_guess_decoding_table_for_empty_text():
    table = guess_decoding_table("")
    assert "".join(table[letter] for letter in string.ascii_lowercase) == ENGLISH_FREQUENCY_ORDER


def test_apply_partial_key():
    assert apply_partial_key("Xyz, XY!", {"x": "t", "y": "h"}) == "Th_, TH!"
    assert apply_partial_key("abc", {}, unknown="?") == "???"


def test_apply_full_key_decrypts():
    cipher = SubstitutionCipher(4)
    ciphertext = cipher.encrypt(ENGLISH)
    mapping = {cipher.encoding_table[i]: plain for i, plain in enumerate(string.ascii_lowercase)}
    assert apply_partial_key(ciphertext, mapping) == ENGLISH
