"""Parsing of container image references."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace

DEFAULT_DOMAIN = "docker.io"
LEGACY_DEFAULT_DOMAIN = "index.docker.io"
DEFAULT_TAG = "latest"
_LOCALHOST = "localhost"
_MAX_NAME_LENGTH = 255

_ALNUM = r"[a-z0-9]+"
_SEP = r"(?:[._]|__|[-]+)"
_PATH_COMPONENT = re.compile(rf"{_ALNUM}(?:{_SEP}{_ALNUM})*")
_DOMAIN_COMPONENT = r"(?:[a-zA-Z0-9]|[a-zA-Z0-9][a-zA-Z0-9-]*[a-zA-Z0-9])"
_DOMAIN = re.compile(
    rf"(?:{_DOMAIN_COMPONENT}(?:\.{_DOMAIN_COMPONENT})*|\[[a-fA-F0-9:]+\])(?::[0-9]+)?"
)
_TAG = re.compile(r"[A-Za-z0-9_][A-Za-z0-9_.-]{0,127}")
_DIGEST = re.compile(r"[A-Za-z][A-Za-z0-9]*(?:[-_+.][A-Za-z][A-Za-z0-9]*)*:[0-9A-Fa-f]{32,}")
_IDENTIFIER = re.compile(r"[a-f0-9]{64}")


class ReferenceError(ValueError):
    """Raised for an image reference that cannot be parsed."""


@dataclass(frozen=True)
class Reference:
    """A parsed image reference: domain, repository path, optional tag and digest."""

    domain: str
    path: str
    tag: str = ""
    digest: str = ""

    def name(self) -> str:
        return f"{self.domain}/{self.path}"

    def familiar_name(self) -> str:
        if self.domain in (DEFAULT_DOMAIN, LEGACY_DEFAULT_DOMAIN):
            rest = self.path
            if rest.startswith("library/") and "/" not in rest[len("library/"):]:
                rest = rest[len("library/"):]
            return rest
        return self.name()

    def tag_name_only(self) -> Reference:
        """Add the default tag when the reference has neither tag nor digest."""
        if not self.tag and not self.digest:
            return replace(self, tag=DEFAULT_TAG)
        return self

    def repository(self) -> str:
        return self.name()

    def __str__(self) -> str:
        text = self.name()
        if self.tag:
            text += f":{self.tag}"
        if self.digest:
            text += f"@{self.digest}"
        return text


def _parse(text: str, default_domain: str) -> Reference:
    if not text:
        raise ReferenceError("repository name must have at least one component")
    remainder, at, digest = text.partition("@")
    if at and not _DIGEST.fullmatch(digest):
        raise ReferenceError(f"invalid digest format: {text!r}")
    tag = ""
    colon = remainder.rfind(":")
    if colon > remainder.rfind("/"):
        tag = remainder[colon + 1:]
        remainder = remainder[:colon]
        if not _TAG.fullmatch(tag):
            raise ReferenceError(f"invalid tag format: {text!r}")

    slash = remainder.find("/")
    first = remainder[:slash] if slash != -1 else ""
    if slash == -1 or (
        not any(c in first for c in ".:") and first != _LOCALHOST and first.lower() == first
    ):
        domain, path = default_domain, remainder
    else:
        domain, path = first, remainder[slash + 1:]
        if not _DOMAIN.fullmatch(domain):
            raise ReferenceError(f"invalid reference format: {text!r}")
    if domain in (DEFAULT_DOMAIN, LEGACY_DEFAULT_DOMAIN):
        domain = default_domain
        if "/" not in path:
            path = f"library/{path}"

    if path.lower() != path:
        raise ReferenceError(f"repository name must be lowercase: {text!r}")
    if not all(_PATH_COMPONENT.fullmatch(part) for part in path.split("/")):
        raise ReferenceError(f"invalid reference format: {text!r}")
    if len(f"{domain}/{path}") > _MAX_NAME_LENGTH:
        raise ReferenceError(f"repository name must not be more than {_MAX_NAME_LENGTH} characters")
    return Reference(domain=domain, path=path, tag=tag, digest=digest)


def parse_normalized_named(text: str) -> Reference:
    """Parse a reference, filling in the docker.io domain and library namespace."""
    if _IDENTIFIER.fullmatch(text):
        raise ReferenceError(
            f"invalid repository name ({text}), cannot specify 64-byte hexadecimal strings"
        )
    return _parse(text, DEFAULT_DOMAIN)


def parse_reference(text: str) -> Reference:
    """Parse a reference in registry form, defaulting to index.docker.io."""
    return _parse(text, LEGACY_DEFAULT_DOMAIN)