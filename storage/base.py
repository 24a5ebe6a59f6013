"""Abstract key-value interface for the storage layer."""

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Abstract interface for storing opaque string blobs by key."""

    # Whether values outlive the process
    persistent = True

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Read a value.

        Args:
            key: The key to look up.

        Returns:
            The stored value, or None if the key is absent.
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one.

        Args:
            key: The key to write.
            value: The blob to store.
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key. Missing keys are ignored."""
        pass


class InMemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store; nothing survives the process."""

    persistent = False

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
