"""Package URLs (purl) as used for docker image subjects."""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import quote, unquote

TYPE_DOCKER = "docker"


class PurlError(ValueError):
    """Raised for a string that is not a valid package URL."""


def _escape(text: str) -> str:
    return quote(text, safe="")


@dataclass(frozen=True)
class PackageURL:
    """A package URL with type, namespace, name, version, qualifiers and subpath."""

    type: str
    namespace: str
    name: str
    version: str = ""
    qualifiers: dict[str, str] = field(default_factory=dict)
    subpath: str = ""

    def to_string(self) -> str:
        parts = [self.type]
        if self.namespace:
            parts.append("/".join(_escape(seg) for seg in self.namespace.split("/")))
        name = _escape(self.name)
        if self.version:
            name += "@" + _escape(self.version)
        parts.append(name)
        text = "pkg:" + "/".join(parts)
        if self.qualifiers:
            text += "?" + "&".join(
                f"{key}={_escape(value)}"
                for key, value in sorted(self.qualifiers.items())
                if value
            )
        if self.subpath:
            text += "#" + self.subpath
        return text

    def __str__(self) -> str:
        return self.to_string()


def parse_purl(text: str) -> PackageURL:
    """Parse a ``pkg:`` URL."""
    if not text.startswith("pkg:"):
        raise PurlError(f"purl scheme is not \"pkg\": {text!r}")
    rest = text[len("pkg:"):].lstrip("/")
    rest, _, subpath = rest.partition("#")
    rest, _, query = rest.partition("?")
    qualifiers: dict[str, str] = {}
    for pair in filter(None, query.split("&")):
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise PurlError(f"invalid qualifier {pair!r}")
        qualifiers[key.lower()] = unquote(value)
    purl_type, slash, path = rest.partition("/")
    if not slash or not purl_type:
        raise PurlError(f"purl is missing type or name: {text!r}")
    segments = path.strip("/").split("/")
    last = segments[-1]
    name, at, version = last.rpartition("@")
    if not at:
        name, version = last, ""
    name = unquote(name)
    if not name:
        raise PurlError(f"purl is missing name: {text!r}")
    namespace = "/".join(unquote(seg) for seg in segments[:-1] if seg)
    return PackageURL(
        type=purl_type.lower(),
        namespace=namespace,
        name=name,
        version=unquote(version),
        qualifiers=qualifiers,
        subpath=subpath.strip("/"),
    )