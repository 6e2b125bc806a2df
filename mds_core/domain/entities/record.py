"""Base record type for API objects — a read-only mapping with capabilities."""

from collections.abc import Iterator, Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from mds_core.application.services.store import Store


class Capability(str, Enum):
    """Lookups a record kind supports through the store helpers."""

    TRANSLATABLE = "translatable"
    URL_CAPABLE = "url_capable"


class Record(Mapping[str, Any]):
    """An API object parsed from a JSON response.

    Holds a copy of every source field and a back-reference to the owning
    store. Cross-references to other records are looked up through the
    store at access time; a record never embeds another record.

    Records are read-only. A newer record parsed under the same uuid
    replaces this one in the store.
    """

    resource_name: ClassVar[str] = ""
    capabilities: ClassVar[frozenset[Capability]] = frozenset()

    def __init__(self, store: "Store | None", properties: Mapping[str, Any]):
        self._properties = dict(properties)
        self.store = store

    def __getitem__(self, key: str) -> Any:
        return self._properties[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._properties)

    def __len__(self) -> int:
        return len(self._properties)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(uuid={self.uuid!r})"

    @property
    def uuid(self) -> Any:
        return self._properties.get("uuid")

    @classmethod
    def plural_name(cls) -> str:
        """Top-level key of this kind in API responses, e.g. ``auth_items``."""
        return f"{cls.resource_name}s"

    @classmethod
    def supports(cls, capability: Capability) -> bool:
        return capability in cls.capabilities
