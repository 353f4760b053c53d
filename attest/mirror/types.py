"""Types shared by the TUF repository mirror."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Mapping, Protocol

from attest.oci.image import (
    OCI_CONFIG,
    OCI_MANIFEST,
    EmptyConfigImage,
    Index,
    Layer,
    empty_image,
)

DEFAULT_METADATA_URL = "https://docker.github.io/tuf/metadata"
DEFAULT_TARGETS_URL = "https://docker.github.io/tuf/targets"
TUF_METADATA_MEDIA_TYPE = "application/vnd.tuf.metadata+json"
TUF_TARGET_MEDIA_TYPE = "application/vnd.tuf.target"
TUF_FILE_ANNOTATION = "tuf.io/filename"


class TUFRole(str, enum.Enum):
    """The top-level TUF roles."""

    ROOT = "root"
    SNAPSHOT = "snapshot"
    TARGETS = "targets"
    TIMESTAMP = "timestamp"

    def __str__(self) -> str:
        return self.value


TUF_ROLES = (TUFRole.ROOT, TUFRole.SNAPSHOT, TUFRole.TARGETS, TUFRole.TIMESTAMP)


@dataclass
class TUFMetadata:
    """Serialised top-level metadata, keyed by the file name each is mirrored under."""

    root: dict[str, bytes]
    snapshot: dict[str, bytes]
    targets: dict[str, bytes]
    timestamp: bytes


@dataclass(frozen=True)
class DelegatedTargetMetadata:
    """Serialised metadata of one delegated targets role."""

    name: str
    version: str
    data: bytes


@dataclass(frozen=True)
class MirrorImage:
    """An image to be stored under ``tag``."""

    image: EmptyConfigImage
    tag: str


@dataclass(frozen=True)
class MirrorIndex:
    """An image index to be stored under ``tag``."""

    index: Index
    tag: str


class TUFClient(Protocol):
    """What the mirror needs from a TUF client.

    Metadata documents are parsed TUF JSON objects with ``signed`` and
    ``signatures`` members.
    """

    def get_metadata(self) -> Mapping[str, Any]:
        """Trusted metadata: ``root``, ``snapshot`` and ``timestamp`` documents,
        and ``targets`` mapping role names to documents."""
        ...

    def get_prior_roots(self, metadata_url: str) -> Mapping[str, bytes]:
        """Earlier root versions, keyed by their ``<version>.root.json`` name."""
        ...

    def load_delegated_targets(self, role_name: str, parent_role: str) -> Mapping[str, Any]:
        """The verified metadata document of a delegated targets role."""
        ...

    def download_target(self, target_path: str, file_path: str) -> bytes:
        """Download and verify a target file, returning its contents."""
        ...


def _tuf_image(data: bytes, media_type: str, name: str) -> EmptyConfigImage:
    image = empty_image().with_media_type(OCI_MANIFEST).with_config_media_type(OCI_CONFIG)
    return EmptyConfigImage(image.append((Layer(data, media_type), {TUF_FILE_ANNOTATION: name})))