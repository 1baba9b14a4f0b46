"""Raw inputs feeding the configuration loaders.

These helpers only fetch bytes or fold key-value pairs; decoding and merging
happen in :mod:`layerconf.config`.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Iterable, Mapping
from urllib.parse import urlsplit
from urllib.request import url2pathname

import httpx

from .coding import CodingType
from .errors import ConfigFileNotFoundError, NetworkError, UnknownEncodingError

LOG = logging.getLogger(__name__)

KeyPredicate = Callable[[str], bool]

DEFAULT_ARGUMENT_PREFIX = "--"
DEFAULT_ARGUMENT_SEPARATOR = "="
DEFAULT_FETCH_TIMEOUT = 10.0


def resolve_path(path: str | os.PathLike[str]) -> Path:
    return Path(os.path.normpath(Path(path).expanduser()))


def read_file(path: str | os.PathLike[str]) -> tuple[CodingType, bytes]:
    """Read a configuration file, resolving its coding from the extension."""

    resolved = resolve_path(path)
    if not resolved.is_file():
        raise ConfigFileNotFoundError(str(resolved))
    coding = CodingType.from_path(resolved)
    if coding is None:
        raise UnknownEncodingError(str(resolved))
    return coding, resolved.read_bytes()


def file_url_path(url: str) -> Path | None:
    """Local path for ``file://`` URLs, ``None`` for anything else."""

    parts = urlsplit(url)
    if parts.scheme != "file":
        return None
    return Path(url2pathname(parts.path))


def fetch_url(
    url: str,
    *,
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_FETCH_TIMEOUT,
) -> tuple[CodingType, bytes]:
    """Fetch a remote document with one blocking GET.

    The coding comes from the response ``Content-Type``, falling back to the
    URL path extension. A client passed in by the caller is left open.
    """

    owns_client = client is None
    http = client if client is not None else httpx.Client(timeout=timeout, follow_redirects=True)
    LOG.debug("Fetching configuration", extra={"url": url})
    try:
        response = http.get(url)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        LOG.warning("Configuration fetch failed", extra={"url": url, "error": str(exc)})
        raise NetworkError(url, str(exc)) from exc
    finally:
        if owns_client:
            http.close()

    coding = CodingType.from_mime_type(response.headers.get("content-type"))
    if coding is None:
        coding = CodingType.from_path(urlsplit(url).path)
    if coding is None:
        raise UnknownEncodingError(url)
    return coding, response.content


def environment_pairs(
    predicate: KeyPredicate | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Fold (optionally filtered) environment variables into a mapping."""

    source = os.environ if environ is None else environ
    return {key: value for key, value in source.items() if predicate is None or predicate(key)}


def command_line_pairs(
    argv: Iterable[str],
    *,
    prefix: str = DEFAULT_ARGUMENT_PREFIX,
    separator: str = DEFAULT_ARGUMENT_SEPARATOR,
    predicate: KeyPredicate | None = None,
) -> dict[str, str]:
    """Collect ``{prefix}{key}{separator}{value}`` arguments.

    The value is split at the first separator; arguments without one are
    ignored.
    """

    pairs: dict[str, str] = {}
    for argument in argv:
        if not argument.startswith(prefix):
            continue
        key, found, value = argument[len(prefix):].partition(separator)
        if not found:
            continue
        if predicate is None or predicate(key):
            pairs[key] = value
    return pairs


__all__ = [
    "DEFAULT_ARGUMENT_PREFIX",
    "DEFAULT_ARGUMENT_SEPARATOR",
    "DEFAULT_FETCH_TIMEOUT",
    "KeyPredicate",
    "command_line_pairs",
    "environment_pairs",
    "fetch_url",
    "file_url_path",
    "read_file",
    "resolve_path",
]
