"""Layered configuration: files, URLs, environment and arguments merged by name."""

from __future__ import annotations

__version__ = "0.1.0"

from .coding import CodingType
from .config import Config
from .credentials import (
    NO_CREDENTIALS,
    ApiKey,
    ApiKeyUsernamePassword,
    Credentials,
    NoCredentials,
    UsernamePassword,
    decode_credentials,
    encode_credentials,
)
from .errors import (
    ConfigError,
    ConfigFileNotFoundError,
    DecodeError,
    NetworkError,
    UnknownEncodingError,
)
from .extract import extract_connections, extract_contacts
from .models import Connection, Contact, EmailContact, PhoneContact, PhoneKind, PhoneType

__all__ = [
    "ApiKey",
    "ApiKeyUsernamePassword",
    "CodingType",
    "Config",
    "ConfigError",
    "ConfigFileNotFoundError",
    "Connection",
    "Contact",
    "Credentials",
    "DecodeError",
    "EmailContact",
    "NO_CREDENTIALS",
    "NetworkError",
    "NoCredentials",
    "PhoneContact",
    "PhoneKind",
    "PhoneType",
    "UnknownEncodingError",
    "UsernamePassword",
    "__version__",
    "decode_credentials",
    "encode_credentials",
    "extract_connections",
    "extract_contacts",
]
