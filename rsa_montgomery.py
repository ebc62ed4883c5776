"""
RSA Encryption/Decryption using Montgomery Algorithm

Textbook (unpadded) RSA on integers, with every modular exponentiation
running through the bit-serial Montgomery engine in montgomery.py.
"""

import logging

from montgomery import DEFAULT_WIDTH, MontgomeryContext

logger = logging.getLogger(__name__)


class MontgomeryRSA:
    """RSA implementation using Montgomery algorithm for modular arithmetic."""

    def __init__(self, n, e, d=None, width=None):
        """
        Initialize RSA with given keys.

        Args:
            n (int): RSA modulus (odd)
            e (int): Public exponent
            d (int): Private exponent (optional, needed for decryption)
            width (int): Register width; defaults to n's bit length
                rounded up to a multiple of 32
        """
        self.n = n
        self.e = e
        self.d = d

        self.width = width if width is not None else self._find_width(n)
        self.context = MontgomeryContext(n, self.width)
        logger.debug("RSA key: %d-bit modulus, width %d, m=%d",
                     n.bit_length(), self.width, self.context.m)

    @staticmethod
    def _find_width(n):
        """Round the modulus bit length up to a multiple of 32 (at least 32)."""
        return max(DEFAULT_WIDTH, ((n.bit_length() + 31) // 32) * 32)

    def encrypt(self, message):
        """
        Raise message to e in the Montgomery domain of n.

        The public exponent has to fit the context width; a wider one
        raises WidthUnsupported from the exponentiation.

        Args:
            message (int): Plaintext residue in [0, n)

        Returns:
            int: message^e mod n
        """
        if message >= self.n:
            raise ValueError(f"Message {message} is not a residue mod n={self.n}")

        return self.context.pow(message, self.e)

    def decrypt(self, ciphertext):
        """
        Raise ciphertext to d in the Montgomery domain of n.

        Args:
            ciphertext (int): Ciphertext residue in [0, n)

        Returns:
            int: ciphertext^d mod n

        Raises:
            ValueError: no private exponent, or ciphertext >= n
            WidthUnsupported: d wider than the context width
        """
        if self.d is None:
            raise ValueError("Private key (d) not provided for decryption")

        if ciphertext >= self.n:
            raise ValueError(f"Ciphertext {ciphertext} is not a residue mod n={self.n}")

        return self.context.pow(ciphertext, self.d)
