"""
Finale Ciphers
==============

Classical ciphers used by the finale terminals. Only the letters A-Z take
part; ``normalize_letters`` strips everything else before encryption and
answer checks.
"""

import string

ALPHABET = string.ascii_uppercase


def normalize_letters(text: str) -> str:
    return ''.join(ch for ch in text.upper() if ch in ALPHABET)


def _shift_letter(ch: str, shift: int) -> str:
    return ALPHABET[(ALPHABET.index(ch) + shift) % 26]


def vigenere_encrypt(plaintext: str, key: str) -> str:
    """A=0..Z=25 additive Vigenere; the key repeats over the plaintext."""
    letters = normalize_letters(plaintext)
    key = normalize_letters(key)
    if not key:
        raise ValueError("Vigenere key must contain at least one letter")
    return ''.join(
        _shift_letter(ch, ALPHABET.index(key[i % len(key)]))
        for i, ch in enumerate(letters)
    )


def vigenere_decrypt(ciphertext: str, key: str) -> str:
    letters = normalize_letters(ciphertext)
    key = normalize_letters(key)
    if not key:
        raise ValueError("Vigenere key must contain at least one letter")
    return ''.join(
        _shift_letter(ch, -ALPHABET.index(key[i % len(key)]))
        for i, ch in enumerate(letters)
    )


def caesar_encrypt(plaintext: str, shift: int) -> str:
    return ''.join(_shift_letter(ch, shift) for ch in normalize_letters(plaintext))


def caesar_decrypt(ciphertext: str, shift: int) -> str:
    return caesar_encrypt(ciphertext, -shift)
