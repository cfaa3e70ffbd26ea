"""
Symbol generation strategies for the shortlink service.
Uses Strategy Pattern so the allocator never depends on a concrete algorithm.
"""

import hashlib
import hmac
import logging
from abc import ABC, abstractmethod
from typing import Iterator

from shortlink_app.errors import MissingSecretError

logger = logging.getLogger(__name__)


def increment_symbol(alphabet: str, symbol: str) -> str:
    """
    Return the symbol following `symbol` in odometer order.

    The symbol is read as a numeral whose digits are the alphabet characters
    (first character = 0). When the carry runs past the leftmost digit a new
    first character is prepended, so with digits "9" -> "00" and "99" -> "000".
    An empty symbol increments to the first character.
    """
    first, last = alphabet[0], alphabet[-1]
    result = []
    carry = True

    for char in reversed(symbol):
        if not carry:
            result.append(char)
            continue

        position = alphabet.find(char)
        if position == -1:
            logger.warning("Unsupported character %r in symbol %r, using last", char, symbol)
            result.append(last)
        elif position == len(alphabet) - 1:
            result.append(first)
        else:
            result.append(alphabet[position + 1])
            carry = False

    if carry:
        result.append(first)

    return "".join(reversed(result))


class SymbolStrategy(ABC):
    """Abstract base class for symbol generation strategies"""

    def __init__(self, alphabet: str):
        self.alphabet = alphabet

    @abstractmethod
    def candidates(self, last_symbol: str) -> Iterator[str]:
        """
        Produce candidate symbols following the last issued one.

        Args:
            last_symbol: The current cursor value

        Returns:
            A fresh iterator; the allocator takes the first candidate
            not already present in the redirect table
        """
        pass


class SequentialSymbolStrategy(SymbolStrategy):
    """
    Odometer strategy.
    Walks the alphabet like a counter, each taken candidate seeding the next.

    Pros: Shortest possible symbols, never runs out
    Cons: Next symbol is trivially guessable
    """

    def candidates(self, last_symbol: str) -> Iterator[str]:
        symbol = last_symbol
        while True:
            symbol = increment_symbol(self.alphabet, symbol)
            yield symbol


class KeyedSymbolStrategy(SymbolStrategy):
    """
    HMAC strategy.
    Derives a pseudo-random string from the last symbol and a secret, then
    offers growing prefixes of it.

    Pros: No guessable sequence, still deterministic and collision-checked
    Cons: Finite candidates per allocation, longer symbols
    """

    # Symbols of 1-3 characters are left for custom links
    MIN_LENGTH = 4

    def __init__(self, alphabet: str, secret: str):
        super().__init__(alphabet)
        if not secret:
            raise MissingSecretError("SYMBOL_SECRET is required for the keyed symbol strategy")
        self._key = secret.encode("utf-8")

    def derive_symbol(self, last_symbol: str) -> str:
        """Map every HMAC-SHA256 byte of the last symbol onto the alphabet"""
        digest = hmac.new(self._key, last_symbol.encode("utf-8"), hashlib.sha256).digest()
        return "".join(self.alphabet[byte % len(self.alphabet)] for byte in digest)

    def candidates(self, last_symbol: str) -> Iterator[str]:
        derived = self.derive_symbol(last_symbol)
        for length in range(self.MIN_LENGTH, len(derived)):
            yield derived[:length]
