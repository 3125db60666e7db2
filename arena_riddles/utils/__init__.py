"""
Utility helpers: finale ciphers and puzzle graph queries.
"""

from .cipher import (
    normalize_letters,
    vigenere_encrypt,
    vigenere_decrypt,
    caesar_encrypt,
    caesar_decrypt,
)
from .graph_utils import count_triangles, is_two_colorable, neighbors_csv

__all__ = [
    'normalize_letters',
    'vigenere_encrypt',
    'vigenere_decrypt',
    'caesar_encrypt',
    'caesar_decrypt',
    'count_triangles',
    'is_two_colorable',
    'neighbors_csv',
]
