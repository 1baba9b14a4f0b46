"""Configuration aggregate and the loaders that layer sources into it."""

from __future__ import annotations

import logging
import os
import sys
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, TypeVar

import httpx

from . import sources
from .coding import CodingType
from .documents import ConfigDocument, parse_document
from .errors import UnknownEncodingError
from .extract import extract_connections, extract_contacts
from .models import Connection, Contact, coerce_bool, lookup_property

LOG = logging.getLogger(__name__)

T = TypeVar("T")


class Config:
    """Mutable configuration made of connections, properties and contacts.

    Connection and contact names are unique: adding or merging a record
    replaces any record of the same name and moves it to the end. The
    loaders decode their input into a separate ``Config`` first and merge it
    only once decoding succeeded, so a failed load leaves ``self`` untouched.
    Instances carry no locking; serialize merges when sharing one across
    threads.
    """

    def __init__(
        self,
        *,
        connections: Iterable[Connection] = (),
        properties: Mapping[str, str] | None = None,
        contacts: Iterable[Contact] = (),
    ) -> None:
        self._connections: list[Connection] = []
        self._properties: dict[str, str] = {}
        self._contacts: list[Contact] = []
        for connection in connections:
            self.add_connection(connection)
        for name, value in (properties or {}).items():
            self.add_property(name, value)
        for contact in contacts:
            self.add_contact(contact)

    @classmethod
    def from_key_value_map(cls, kv: Mapping[str, str]) -> Config:
        """Build a configuration from flat pairs, extracting connections first."""

        remaining, connections = extract_connections(kv)
        remaining, contacts = extract_contacts(remaining)
        return cls(connections=connections, properties=remaining, contacts=contacts)

    @classmethod
    def from_dict(cls, data: object) -> Config:
        document = parse_document(ConfigDocument, data)
        return cls(
            connections=(Connection.from_document(entry) for entry in document.connections),
            properties=document.properties,
            contacts=(Contact.from_document(entry) for entry in document.contacts),
        )

    @classmethod
    def from_bytes(cls, data: bytes, coding: CodingType) -> Config:
        return cls.from_dict(coding.decode(data))

    @property
    def connections(self) -> tuple[Connection, ...]:
        return tuple(self._connections)

    @property
    def connection_names(self) -> tuple[str, ...]:
        return tuple(connection.name for connection in self._connections)

    @property
    def properties(self) -> Mapping[str, str]:
        """Read-only view of the scalar properties."""

        return MappingProxyType(self._properties)

    @property
    def contacts(self) -> tuple[Contact, ...]:
        return tuple(self._contacts)

    def get_connection(self, name: str) -> Connection | None:
        return next((c for c in self._connections if c.name == name), None)

    def get_contact(self, name: str) -> Contact | None:
        return next((c for c in self._contacts if c.name == name), None)

    def get_property(self, name: str, convert: Callable[[str], T] = str) -> T | None:  # type: ignore[assignment]
        """Return the named property converted with ``convert``, or ``None``."""

        return lookup_property(self._properties, name, convert)

    def get_bool_property(self, name: str) -> bool:
        return bool(lookup_property(self._properties, name, coerce_bool))

    def add_connection(self, connection: Connection) -> None:
        """Add ``connection``, replacing any connection with the same name."""

        self._connections = [c for c in self._connections if c.name != connection.name]
        self._connections.append(connection)

    def add_property(self, name: str, value: str) -> None:
        self._properties[name] = value

    def add_contact(self, contact: Contact) -> None:
        """Add ``contact``, replacing any contact with the same name."""

        self._contacts = [c for c in self._contacts if c.name != contact.name]
        self._contacts.append(contact)

    def merge(self, other: Config) -> None:
        """Overlay ``other`` onto this configuration.

        Properties are overwritten key by key. Connections and contacts from
        ``other`` replace same-named entries and are appended in ``other``'s
        order after the surviving originals.
        """

        for name, value in other.properties.items():
            self.add_property(name, value)
        for connection in other.connections:
            self.add_connection(connection)
        for contact in other.contacts:
            self.add_contact(contact)

    def load_from_file(self, path: str | os.PathLike[str]) -> Config:
        """Merge a ``.json`` or ``.plist`` file into this configuration."""

        coding, data = sources.read_file(path)
        return self._merge_loaded(Config.from_bytes(data, coding), source=str(path))

    def load_from_url(
        self,
        url: str,
        *,
        client: httpx.Client | None = None,
        timeout: float = sources.DEFAULT_FETCH_TIMEOUT,
    ) -> Config:
        """Merge a document fetched from ``url``; ``file://`` URLs read from disk."""

        local_path = sources.file_url_path(url)
        if local_path is not None:
            return self.load_from_file(local_path)
        coding, data = sources.fetch_url(url, client=client, timeout=timeout)
        return self._merge_loaded(Config.from_bytes(data, coding), source=url)

    def load_from_string(self, text: str, coding: CodingType) -> Config:
        return self.load_from_bytes(text.encode("utf-8"), coding)

    def load_from_bytes(self, data: bytes, coding: CodingType) -> Config:
        return self._merge_loaded(Config.from_bytes(data, coding), source=f"<{coding.value} data>")

    def load_from_key_value_map(self, kv: Mapping[str, str]) -> Config:
        """Merge flat pairs, turning ``{name}:connection_*`` keys into connections."""

        if not kv:
            return self
        return self._merge_loaded(Config.from_key_value_map(kv), source="<key-value map>")

    def load_from_environment(
        self,
        predicate: sources.KeyPredicate | None = None,
        *,
        environ: Mapping[str, str] | None = None,
    ) -> Config:
        """Merge environment variables whose names pass ``predicate``."""

        return self.load_from_key_value_map(sources.environment_pairs(predicate, environ))

    def load_from_command_line(
        self,
        argv: Iterable[str] | None = None,
        *,
        prefix: str = sources.DEFAULT_ARGUMENT_PREFIX,
        separator: str = sources.DEFAULT_ARGUMENT_SEPARATOR,
        predicate: sources.KeyPredicate | None = None,
    ) -> Config:
        """Merge ``--key=value`` style arguments (``sys.argv[1:]`` by default)."""

        arguments = sys.argv[1:] if argv is None else argv
        pairs = sources.command_line_pairs(arguments, prefix=prefix, separator=separator, predicate=predicate)
        return self.load_from_key_value_map(pairs)

    def to_dict(self) -> dict[str, Any]:
        """Serialize, omitting empty collections."""

        data: dict[str, Any] = {}
        if self._connections:
            data["connections"] = [connection.to_dict() for connection in self._connections]
        if self._properties:
            data["properties"] = dict(self._properties)
        if self._contacts:
            data["contacts"] = [contact.to_dict() for contact in self._contacts]
        return data

    def dumps(self, coding: CodingType = CodingType.JSON) -> bytes:
        return coding.encode(self.to_dict())

    def save(self, path: str | os.PathLike[str]) -> None:
        """Write the configuration, choosing the coding from the file extension."""

        target = sources.resolve_path(path)
        coding = CodingType.from_path(target)
        if coding is None:
            raise UnknownEncodingError(str(target))
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(self.dumps(coding))

    def _merge_loaded(self, loaded: Config, *, source: str) -> Config:
        self.merge(loaded)
        LOG.debug(
            "Merged configuration",
            extra={
                "source": source,
                "connections": len(loaded._connections),
                "properties": len(loaded._properties),
                "contacts": len(loaded._contacts),
            },
        )
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Config):
            return NotImplemented
        return (
            self._connections == other._connections
            and self._properties == other._properties
            and self._contacts == other._contacts
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Config(connections={self.connection_names!r}, "
            f"properties={len(self._properties)}, contacts={len(self._contacts)})"
        )

    def __str__(self) -> str:
        return self.dumps(CodingType.JSON).decode("utf-8")


__all__ = ["Config"]
