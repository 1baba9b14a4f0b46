"""Extraction of structured records out of flat key-value namespaces.

Keys follow a ``{name}:{field}`` grammar::

    {name}:connection_uri=value               (required)
    {name}:connection_auth_username=value
    {name}:connection_auth_password=value
    {name}:connection_auth_apikey=value
    {name}:connection_param:{param}=value

Keys that do not take part in a connection are left for plain properties.
"""

from __future__ import annotations

from typing import Mapping

from .credentials import NO_CREDENTIALS, ApiKey, Credentials, UsernamePassword
from .models import Connection, Contact

URI_SUFFIX = ":connection_uri"
USERNAME_SUFFIX = ":connection_auth_username"
PASSWORD_SUFFIX = ":connection_auth_password"
APIKEY_SUFFIX = ":connection_auth_apikey"
PARAM_INFIX = ":connection_param:"


def connection_names(kv: Mapping[str, str]) -> list[str]:
    """Names declaring a ``connection_uri``, in key order."""

    names: list[str] = []
    for key in kv:
        if key.endswith(URI_SUFFIX):
            name = key[: -len(URI_SUFFIX)]
            if name:
                names.append(name)
    return names


def extract_connections(kv: Mapping[str, str]) -> tuple[dict[str, str], list[Connection]]:
    """Split ``kv`` into the residual properties and the connections it declares.

    Never raises: incomplete fragments simply stay in the residual mapping.
    """

    remaining = dict(kv)
    connections: list[Connection] = []
    for name in connection_names(kv):
        uri_key = name + URI_SUFFIX
        # An earlier connection's parameters may have consumed this key.
        if uri_key not in remaining:
            continue

        param_prefix = name + PARAM_INFIX
        properties: dict[str, str] = {}
        for key in [key for key in remaining if key.startswith(param_prefix)]:
            properties[key[len(param_prefix):]] = remaining.pop(key)

        uri = remaining.pop(uri_key)
        credentials = _pop_credentials(remaining, name)
        connections.append(Connection(name=name, uri=uri, credentials=credentials, properties=properties))
    return remaining, connections


def _pop_credentials(remaining: dict[str, str], name: str) -> Credentials:
    username_key = name + USERNAME_SUFFIX
    password_key = name + PASSWORD_SUFFIX
    apikey_key = name + APIKEY_SUFFIX
    if username_key in remaining and password_key in remaining:
        return UsernamePassword(username=remaining.pop(username_key), password=remaining.pop(password_key))
    if apikey_key in remaining:
        return ApiKey(key=remaining.pop(apikey_key))
    return NO_CREDENTIALS


def extract_contacts(kv: Mapping[str, str]) -> tuple[dict[str, str], list[Contact]]:
    """Contacts have no key-value grammar yet; everything is left in place."""

    return dict(kv), []


__all__ = [
    "APIKEY_SUFFIX",
    "PARAM_INFIX",
    "PASSWORD_SUFFIX",
    "URI_SUFFIX",
    "USERNAME_SUFFIX",
    "connection_names",
    "extract_connections",
    "extract_contacts",
]
