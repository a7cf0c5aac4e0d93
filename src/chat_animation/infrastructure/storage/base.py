from abc import ABC, abstractmethod
from typing import Dict, Optional


class KeyValueStore(ABC):
    """Opaque byte storage keyed by string. A missing key reads as None."""

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        pass

    @abstractmethod
    def set(self, key: str, value: bytes) -> bool:
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        pass


class MemoryKeyValueStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self._values: Dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self._values.get(key)

    def set(self, key: str, value: bytes) -> bool:
        self._values[key] = bytes(value)
        return True

    def delete(self, key: str) -> bool:
        return self._values.pop(key, None) is not None
