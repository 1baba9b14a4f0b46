"""Connection and contact records held by a configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, TypeVar

from .credentials import NO_CREDENTIALS, Credentials, decode_credentials, encode_credentials
from .documents import (
    ConnectionDocument,
    ContactDocument,
    ContactMethodDocument,
    PhoneTypeDocument,
    parse_document,
)
from .errors import DecodeError

T = TypeVar("T")

_TRUE_TOKENS = {"1", "true", "yes", "on"}


def lookup_property(properties: Mapping[str, str], name: str, convert: Callable[[str], T]) -> T | None:
    """Convert a stored string property, returning ``None`` if absent or unconvertible."""

    value = properties.get(name)
    if value is None:
        return None
    try:
        return convert(value)
    except (TypeError, ValueError):
        return None


def coerce_bool(value: str) -> bool:
    return value.strip().lower() in _TRUE_TOKENS


@dataclass(frozen=True, slots=True)
class Connection:
    """Named endpoint (web service, database, ...) with credentials and extra properties."""

    name: str
    uri: str = ""
    credentials: Credentials = NO_CREDENTIALS
    properties: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", dict(self.properties))

    @property
    def property_keys(self) -> tuple[str, ...]:
        return tuple(self.properties)

    def get_property(self, name: str, convert: Callable[[str], T] = str) -> T | None:  # type: ignore[assignment]
        """Return the named property converted with ``convert``."""

        return lookup_property(self.properties, name, convert)

    def get_bool_property(self, name: str) -> bool:
        """True only when the property exists and reads as a truthy token."""

        return bool(lookup_property(self.properties, name, coerce_bool))

    @classmethod
    def from_dict(cls, data: object) -> Connection:
        return cls.from_document(parse_document(ConnectionDocument, data))

    @classmethod
    def from_document(cls, document: ConnectionDocument) -> Connection:
        credentials = NO_CREDENTIALS
        if document.credentials is not None:
            credentials = decode_credentials(document.credentials.model_dump())
        return cls(
            name=document.name,
            uri=document.uri,
            credentials=credentials,
            properties=document.properties,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize, omitting an empty uri, absent credentials and empty properties."""

        data: dict[str, Any] = {"name": self.name}
        if self.uri:
            data["uri"] = self.uri
        if not self.credentials.is_none:
            data["credentials"] = encode_credentials(self.credentials)
        if self.properties:
            data["properties"] = dict(self.properties)
        return data


class PhoneKind(str, Enum):
    """Known phone number categories."""

    HOME = "home"
    WORK = "work"
    FAX = "fax"
    CELL = "cell"
    OTHER = "other"


_NAMED_KINDS = {kind.value: kind for kind in PhoneKind if kind is not PhoneKind.OTHER}


@dataclass(frozen=True, slots=True)
class PhoneType:
    """Phone category with an optional label; ``OTHER`` requires one."""

    kind: PhoneKind
    label: str | None = None

    def __post_init__(self) -> None:
        if self.kind is PhoneKind.OTHER and not self.label:
            raise ValueError("PhoneKind.OTHER requires a label")

    @classmethod
    def from_document(cls, document: str | PhoneTypeDocument) -> PhoneType:
        if isinstance(document, str):
            if not document:
                raise DecodeError("Phone type must not be empty")
            kind = _NAMED_KINDS.get(document.lower())
            if kind is None:
                return cls(PhoneKind.OTHER, document)
            return cls(kind)
        kind = _NAMED_KINDS.get(document.type.lower())
        if kind is None:
            raise DecodeError(f"Invalid phone type '{document.type}'")
        return cls(kind, document.name)

    def to_value(self) -> str | dict[str, str]:
        if self.kind is PhoneKind.OTHER:
            return self.label  # type: ignore[return-value]
        if self.label is None:
            return self.kind.value
        return {"type": self.kind.value, "name": self.label}


@dataclass(frozen=True, slots=True)
class EmailContact:
    """E-mail address with an optional label such as ``work``."""

    address: str
    label: str | None = None


@dataclass(frozen=True, slots=True)
class PhoneContact:
    """Phone number tagged with its category."""

    phone_type: PhoneType
    number: str


ContactMethod = EmailContact | PhoneContact


@dataclass(frozen=True, slots=True)
class Contact:
    """Named contact reachable through one or more methods."""

    name: str
    methods: tuple[ContactMethod, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "methods", tuple(self.methods))

    @classmethod
    def from_dict(cls, data: object) -> Contact:
        return cls.from_document(parse_document(ContactDocument, data))

    @classmethod
    def from_document(cls, document: ContactDocument) -> Contact:
        return cls(
            name=document.name,
            methods=tuple(_method_from_document(entry) for entry in document.types),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "types": [_method_to_dict(method) for method in self.methods]}


def _method_from_document(document: ContactMethodDocument) -> ContactMethod:
    if document.email is not None:
        return EmailContact(address=document.email, label=document.email_type)
    # The document validator guarantees both phone fields here.
    return PhoneContact(
        phone_type=PhoneType.from_document(document.phone_type),  # type: ignore[arg-type]
        number=document.phone_number,  # type: ignore[arg-type]
    )


def _method_to_dict(method: ContactMethod) -> dict[str, Any]:
    if isinstance(method, EmailContact):
        data: dict[str, Any] = {"email": method.address}
        if method.label is not None:
            data["emailType"] = method.label
        return data
    return {"phoneType": method.phone_type.to_value(), "phoneNumber": method.number}


__all__ = [
    "Connection",
    "Contact",
    "ContactMethod",
    "EmailContact",
    "PhoneContact",
    "PhoneKind",
    "PhoneType",
    "coerce_bool",
    "lookup_property",
]
