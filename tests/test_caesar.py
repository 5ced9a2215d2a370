import pytest

import classical_engine
import frequency_analysis
from caesar import CAESAR_MAX_KEY, CAESAR_MIN_KEY, caesar_decrypt, caesar_encrypt
from classical_engine import CaesarCipher

PANGRAM = "THE QUICK BROWN FOX JUMPS OVER THE LAZY DOG"


def test_known_vector_shifts_back_by_key():
    assert caesar_encrypt(PANGRAM, 3) == "QEB NRFZH YOLTK CLU GRJMP LSBO QEB IXWV ALD"


def test_known_vector_decrypts():
    assert caesar_decrypt("QEB NRFZH YOLTK CLU GRJMP LSBO QEB IXWV ALD", 3) == PANGRAM


@pytest.mark.parametrize("key", range(CAESAR_MIN_KEY, CAESAR_MAX_KEY + 1))
def test_round_trip_every_valid_key(key):
    text = "Hello, World! 123 zebra ZEBRA"
    assert caesar_decrypt(caesar_encrypt(text, key), key) == text


def test_case_is_kept_and_wraps_within_case():
    assert caesar_encrypt("abcABC", 1) == "zabZAB"


def test_non_letters_pass_through():
    assert caesar_encrypt("1234 !?-_\n\té", 7) == "1234 !?-_\n\té"


def test_decrypt_is_encrypt_with_complementary_key():
    text = "Meet me at the usual place"
    assert caesar_decrypt(text, 5) == caesar_encrypt(text, 21)


@pytest.mark.parametrize("key", [0, 26, -1, 100])
def test_out_of_range_key_is_rejected(key):
    with pytest.raises(ValueError):
        caesar_encrypt("abc", key)
    with pytest.raises(ValueError):
        caesar_decrypt("abc", key)


@pytest.mark.parametrize("key", ["3", 3.0, None, True])
def test_non_integer_key_is_rejected(key):
    with pytest.raises(ValueError):
        caesar_encrypt("abc", key)


def test_empty_text():
    assert caesar_encrypt("", 13) == ""


def test_strategy_wraps_functions():
    cipher = CaesarCipher(3)
    assert cipher.encode(PANGRAM) == caesar_encrypt(PANGRAM, 3)
    assert cipher.decode(cipher.encode(PANGRAM)) == PANGRAM


def test_strategy_validates_key_on_construction():
    with pytest.raises(ValueError):
        CaesarCipher(26)


def test_engine_and_analysis_share_one_implementation():
    assert classical_engine.caesar_encrypt is caesar_encrypt
    assert frequency_analysis.caesar_decrypt is caesar_decrypt
    assert not hasattr(frequency_analysis, "classical_engine")
    assert not hasattr(frequency_analysis, "CIPHER_REGISTRY")
