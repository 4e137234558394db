"""
Alias generation strategies.
Uses Strategy Pattern to allow different random sources.

Strategies only produce candidates. Uniqueness is the UrlStore's job: it
inserts the candidate and regenerates when the unique index rejects it.
"""

import random
import secrets
import string
from abc import ABC, abstractmethod


DEFAULT_ALPHABET = string.ascii_letters + string.digits


class AliasStrategy(ABC):
    """Abstract base class for alias generation strategies"""

    def __init__(self, length: int = 6, alphabet: str = DEFAULT_ALPHABET):
        if length < 1:
            raise ValueError("Alias length must be at least 1")
        if not alphabet:
            raise ValueError("Alias alphabet must not be empty")
        self.length = length
        self.alphabet = alphabet

    @abstractmethod
    def generate(self) -> str:
        """
        Generate an alias candidate.

        Returns:
            A string of `length` characters drawn uniformly from `alphabet`
        """
        pass


class RandomAliasStrategy(AliasStrategy):
    """
    System PRNG strategy.

    Pros: Fast, unpredictable enough for public aliases
    Cons: Not suitable where aliases must be unguessable
    """

    def __init__(self, length: int = 6, alphabet: str = DEFAULT_ALPHABET, rng: random.Random = None):
        super().__init__(length, alphabet)
        self._rng = rng or random.Random()

    def generate(self) -> str:
        return ''.join(self._rng.choice(self.alphabet) for _ in range(self.length))


class SecureAliasStrategy(AliasStrategy):
    """
    CSPRNG strategy backed by the secrets module.

    Use when aliases double as capability links and must not be guessable.
    """

    def generate(self) -> str:
        return ''.join(secrets.choice(self.alphabet) for _ in range(self.length))
