"""Key-value storage adapters for state kept across a login redirect.

``PrefixedStorage`` namespaces keys so several applications (or API
hosts) can share one underlying store:

    <prefix><host>-<name>   e.g. mds-core-api.example.com-nonce
    <prefix><name>          without a host
"""

import json
import logging
from pathlib import Path

from mds_core.application.interfaces import KeyValueStorage

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "mds-core-"


class InMemoryKeyValueStorage(KeyValueStorage):
    """Process-local storage; state is lost when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStorage(KeyValueStorage):
    """Storage persisted as one JSON object in a file.

    The file is read on every access and rewritten on every change, so
    separate processes see each other's writes.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable storage file %s", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data), encoding="utf-8")


class PrefixedStorage(KeyValueStorage):
    """Namespacing wrapper around another storage."""

    def __init__(
        self,
        backend: KeyValueStorage,
        prefix: str = DEFAULT_PREFIX,
        host: str | None = None,
    ):
        self._backend = backend
        self._prefix = prefix
        self._host = host

    def key_for(self, name: str) -> str:
        if self._host:
            return f"{self._prefix}{self._host}-{name}"
        return f"{self._prefix}{name}"

    def get(self, key: str) -> str | None:
        return self._backend.get(self.key_for(key))

    def set(self, key: str, value: str) -> None:
        self._backend.set(self.key_for(key), value)

    def remove(self, key: str) -> None:
        self._backend.remove(self.key_for(key))
