"""Abstract key-value storage — port for state kept across a login redirect."""

from abc import ABC, abstractmethod


class KeyValueStorage(ABC):
    """String-keyed, string-valued persistence (nonce, id token, discovery JSON)."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove ``key``; a missing key is not an error."""
        ...
