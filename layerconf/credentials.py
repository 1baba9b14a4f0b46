"""Credential variants attached to connections and their field codec."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, assert_never

from .errors import DecodeError

USERNAME_FIELD = "username"
PASSWORD_FIELD = "password"
APIKEY_FIELD = "apikey"


class _CredentialAccessors:
    """Read helpers shared by every credential variant."""

    __slots__ = ()

    @property
    def username_and_password(self) -> tuple[str, str] | None:
        """The (username, password) pair when the variant carries one."""

        if isinstance(self, (UsernamePassword, ApiKeyUsernamePassword)):
            return self.username, self.password
        return None

    @property
    def apikey(self) -> str | None:
        """The API key when the variant carries one."""

        if isinstance(self, (ApiKey, ApiKeyUsernamePassword)):
            return self.key
        return None

    @property
    def is_none(self) -> bool:
        return isinstance(self, NoCredentials)


@dataclass(frozen=True, slots=True)
class NoCredentials(_CredentialAccessors):
    """The connection carries no credentials."""


@dataclass(frozen=True, slots=True)
class UsernamePassword(_CredentialAccessors):
    """User name and password credentials."""

    username: str
    password: str


@dataclass(frozen=True, slots=True)
class ApiKey(_CredentialAccessors):
    """API key credentials."""

    key: str


@dataclass(frozen=True, slots=True)
class ApiKeyUsernamePassword(_CredentialAccessors):
    """API key combined with user name and password."""

    key: str
    username: str
    password: str


Credentials = NoCredentials | UsernamePassword | ApiKey | ApiKeyUsernamePassword

NO_CREDENTIALS = NoCredentials()


def decode_credentials(fields: Mapping[str, object]) -> Credentials:
    """Pick the most specific variant satisfied by ``fields``.

    A lone username or password without an API key is not an error; it
    decodes to :data:`NO_CREDENTIALS`. Unknown keys are ignored.
    """

    username = _optional_str(fields, USERNAME_FIELD)
    password = _optional_str(fields, PASSWORD_FIELD)
    key = _optional_str(fields, APIKEY_FIELD)

    if username is not None and password is not None and key is not None:
        return ApiKeyUsernamePassword(key=key, username=username, password=password)
    if username is not None and password is not None:
        return UsernamePassword(username=username, password=password)
    if key is not None:
        return ApiKey(key=key)
    return NO_CREDENTIALS


def encode_credentials(credentials: Credentials) -> dict[str, str]:
    """Return exactly the fields that define ``credentials``."""

    if isinstance(credentials, NoCredentials):
        return {}
    if isinstance(credentials, UsernamePassword):
        return {USERNAME_FIELD: credentials.username, PASSWORD_FIELD: credentials.password}
    if isinstance(credentials, ApiKey):
        return {APIKEY_FIELD: credentials.key}
    if isinstance(credentials, ApiKeyUsernamePassword):
        return {
            APIKEY_FIELD: credentials.key,
            USERNAME_FIELD: credentials.username,
            PASSWORD_FIELD: credentials.password,
        }
    assert_never(credentials)


def _optional_str(fields: Mapping[str, object], name: str) -> str | None:
    value = fields.get(name)
    if value is None or isinstance(value, str):
        return value
    raise DecodeError(f"Credential field '{name}' must be a string, got {type(value).__name__}")


__all__ = [
    "APIKEY_FIELD",
    "ApiKey",
    "ApiKeyUsernamePassword",
    "Credentials",
    "NO_CREDENTIALS",
    "NoCredentials",
    "PASSWORD_FIELD",
    "USERNAME_FIELD",
    "UsernamePassword",
    "decode_credentials",
    "encode_credentials",
]
