"""Document codings and the byte-level decoders behind them."""

from __future__ import annotations

import json
import plistlib
from enum import Enum
from pathlib import PurePath
from xml.parsers.expat import ExpatError

from .errors import DecodeError


class CodingType(str, Enum):
    """Supported document encodings."""

    JSON = "json"
    PLIST = "plist"

    @property
    def mime_type(self) -> str:
        return _MIME_BY_CODING[self]

    @classmethod
    def from_extension(cls, extension: str | None) -> CodingType | None:
        """Coding for a file extension (with or without the leading dot)."""

        if not extension:
            return None
        return _CODING_BY_EXTENSION.get(extension.lstrip(".").lower())

    @classmethod
    def from_path(cls, path: str | PurePath) -> CodingType | None:
        return cls.from_extension(PurePath(path).suffix)

    @classmethod
    def from_mime_type(cls, mime_type: str | None) -> CodingType | None:
        """Coding for a MIME type; parameters such as ``charset`` are ignored."""

        if not mime_type:
            return None
        essence = mime_type.split(";", 1)[0].strip().lower()
        return _CODING_BY_MIME.get(essence)

    def decode(self, data: bytes) -> object:
        """Parse raw document bytes into plain Python containers."""

        try:
            if self is CodingType.JSON:
                return json.loads(data)
            return plistlib.loads(data)
        except (ValueError, ExpatError) as exc:
            raise DecodeError(f"Malformed {self.value} document: {exc}") from exc

    def encode(self, value: object) -> bytes:
        if self is CodingType.JSON:
            return json.dumps(value, indent=2, sort_keys=True).encode("utf-8")
        return plistlib.dumps(value, sort_keys=True)


_CODING_BY_EXTENSION = {coding.value: coding for coding in CodingType}
_MIME_BY_CODING = {
    CodingType.JSON: "application/json",
    CodingType.PLIST: "application/x-plist",
}
_CODING_BY_MIME = {mime: coding for coding, mime in _MIME_BY_CODING.items()}


__all__ = ["CodingType"]
