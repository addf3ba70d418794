"""Parsing of the registered kernel crypto algorithms in /proc/crypto."""

from __future__ import annotations

from dataclasses import dataclass

from procfs.util import ValueParser

_TEXT_KEYS = {
    "driver": "driver",
    "geniv": "geniv",
    "internal": "internal",
    "module": "module",
    "name": "name",
    "selftest": "selftest",
    "type": "type",
}
_UINT_KEYS = {
    "blocksize": "blocksize",
    "chunksize": "chunksize",
    "digestsize": "digestsize",
    "ivsize": "ivsize",
    "maxauthsize": "maxauthsize",
    "max keysize": "max_keysize",
    "min keysize": "min_keysize",
    "seedsize": "seedsize",
    "walksize": "walksize",
}
_INT_KEYS = {"priority": "priority", "refcnt": "refcnt"}


@dataclass
class Crypto:
    """One algorithm entry of /proc/crypto; absent numeric values are None."""

    alignmask: int | None = None
    async_: bool = False
    blocksize: int | None = None
    chunksize: int | None = None
    ctxsize: int | None = None
    digestsize: int | None = None
    driver: str = ""
    geniv: str = ""
    internal: str = ""
    ivsize: int | None = None
    maxauthsize: int | None = None
    max_keysize: int | None = None
    min_keysize: int | None = None
    module: str = ""
    name: str = ""
    priority: int | None = None
    refcnt: int | None = None
    seedsize: int | None = None
    selftest: str = ""
    type: str = ""
    walksize: int | None = None

    def _set(self, key: str, value: str) -> None:
        if key == "async":
            self.async_ = value == "yes"
        elif key in _TEXT_KEYS:
            setattr(self, _TEXT_KEYS[key], value)
        elif key in _UINT_KEYS:
            setattr(self, _UINT_KEYS[key], ValueParser(value).as_uint64())
        elif key in _INT_KEYS:
            setattr(self, _INT_KEYS[key], ValueParser(value).as_int64())


def parse_crypto(text: str | bytes) -> list[Crypto]:
    """Parse the contents of /proc/crypto."""
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    entries: list[Crypto] = []
    for line in text.splitlines():
        if line.startswith("name"):
            entries.append(Crypto())
        elif line == "":
            continue

        parts = line.split(":")
        if len(parts) != 2:
            raise ValueError(f"malformed crypto line: {line!r}")
        if not entries:
            raise ValueError(f"crypto line before any name: {line!r}")
        entries[-1]._set(parts[0].strip(), parts[1].strip())
    return entries