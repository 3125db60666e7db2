"""
Tests for the finale ciphers.
"""

import pytest

from arena_riddles.utils.cipher import (
    caesar_decrypt,
    caesar_encrypt,
    normalize_letters,
    vigenere_decrypt,
    vigenere_encrypt,
)


class TestCaesar:

    def test_traversal_finale(self):
        assert caesar_encrypt('PROFMS', 5) == 'UWTKRX'
        assert caesar_decrypt('UWTKRX', 5) == 'PROFMS'

    def test_wraps_alphabet(self):
        assert caesar_encrypt('XYZ', 3) == 'ABC'

    def test_strips_non_letters(self):
        assert caesar_encrypt('a-b c1', 1) == 'BCD'


class TestVigenere:

    def test_known_vector(self):
        assert vigenere_encrypt('ATTACKATDAWN', 'LEMON') == 'LXFOPVEFRNHR'

    @pytest.mark.parametrize("plaintext,key", [
        ('ALLLIGHT', 'LANTERN'),
        ('THREECOLORS', 'REGISTER'),
        ('FINALTRIAL', 'FORGE'),
    ])
    def test_finale_messages_decrypt(self, plaintext, key):
        assert vigenere_decrypt(vigenere_encrypt(plaintext, key), key) == plaintext

    def test_key_letters_only(self):
        assert vigenere_encrypt('HELLO', 'a b') == vigenere_encrypt('HELLO', 'AB')

    def test_empty_key(self):
        with pytest.raises(ValueError):
            vigenere_encrypt('HELLO', '123')


def test_normalize_letters():
    assert normalize_letters('Hello, World 42!') == 'HELLOWORLD'
