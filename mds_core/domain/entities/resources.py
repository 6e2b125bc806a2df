"""Record kinds that carry no behaviour beyond their capabilities."""

from .record import Capability, Record

_TRANSLATABLE_WITH_URLS = frozenset({Capability.TRANSLATABLE, Capability.URL_CAPABLE})


class IdProvider(Record):
    """An identity provider that AuthItems authenticate against."""

    resource_name = "id_provider"
    capabilities = _TRANSLATABLE_WITH_URLS


class Metadata(Record):
    """A unified metadata record, polymorphic by ``type``.

    ``type == "translation"``: ``subtype1`` is the language and
    ``json_data`` maps field names to translated values.
    ``type == "url"``: ``subtype1`` is the url type and ``json_data`` holds
    the URL object; ``model_uuid`` is the owning object's uuid.
    """

    resource_name = "metadata"
    capabilities = _TRANSLATABLE_WITH_URLS

    @property
    def type(self) -> str | None:
        return self.get("type")

    @property
    def subtype(self) -> str | None:
        return self.get("subtype1")

    @property
    def json_data(self) -> dict:
        return self.get("json_data") or {}


class Translation(Record):
    """A single translated field (legacy schema)."""

    resource_name = "translation"


class Url(Record):
    """A URL belonging to a url group (legacy schema)."""

    resource_name = "url"
    capabilities = frozenset({Capability.TRANSLATABLE})
