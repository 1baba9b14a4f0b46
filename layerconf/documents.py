"""Pydantic shapes of serialized configuration documents."""

from __future__ import annotations

from typing import TypeVar

from pydantic import BaseModel, Field, ValidationError, model_validator

from .errors import DecodeError

DocumentT = TypeVar("DocumentT", bound=BaseModel)


class CredentialsDocument(BaseModel):
    """Credential fields as they appear in a connection entry."""

    username: str | None = None
    password: str | None = None
    apikey: str | None = None


class ConnectionDocument(BaseModel):
    """Connection entry stored under ``connections``."""

    name: str
    uri: str = ""
    credentials: CredentialsDocument | None = None
    properties: dict[str, str] = Field(default_factory=dict)


class PhoneTypeDocument(BaseModel):
    """Object form of a phone type: ``{"type": ..., "name": ...}``."""

    type: str
    name: str | None = None


class ContactMethodDocument(BaseModel):
    """One entry of a contact's ``types`` list."""

    email: str | None = None
    email_type: str | None = Field(default=None, alias="emailType")
    phone_type: str | PhoneTypeDocument | None = Field(default=None, alias="phoneType")
    phone_number: str | None = Field(default=None, alias="phoneNumber")

    @model_validator(mode="after")
    def require_method(self) -> ContactMethodDocument:
        if self.email is not None:
            return self
        if self.phone_type is None:
            raise ValueError("contact entry needs either 'email' or 'phoneType'")
        if self.phone_number is None:
            raise ValueError("phone contact entry needs 'phoneNumber'")
        return self


class ContactDocument(BaseModel):
    """Contact entry stored under ``contacts``."""

    name: str
    types: list[ContactMethodDocument]


class ConfigDocument(BaseModel):
    """Top-level shape of a configuration document."""

    connections: list[ConnectionDocument] = Field(default_factory=list)
    properties: dict[str, str] = Field(default_factory=dict)
    contacts: list[ContactDocument] = Field(default_factory=list)


def parse_document(model: type[DocumentT], data: object) -> DocumentT:
    """Validate ``data`` against ``model``, reporting failures as :class:`DecodeError`."""

    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise DecodeError(f"Invalid {model.__name__}: {exc}") from exc


__all__ = [
    "ConfigDocument",
    "ConnectionDocument",
    "ContactDocument",
    "ContactMethodDocument",
    "CredentialsDocument",
    "PhoneTypeDocument",
    "parse_document",
]
