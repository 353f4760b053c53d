"""In-memory OCI images and image indexes with their manifests and digests."""

from __future__ import annotations

import base64
import hashlib
import json
from dataclasses import dataclass, field, replace
from typing import Any, Union

from attest.oci.platform import Platform

OCI_MANIFEST = "application/vnd.oci.image.manifest.v1+json"
OCI_CONFIG = "application/vnd.oci.image.config.v1+json"
OCI_INDEX = "application/vnd.oci.image.index.v1+json"
DOCKER_MANIFEST = "application/vnd.docker.distribution.manifest.v2+json"
DOCKER_CONFIG = "application/vnd.docker.container.image.v1+json"
EMPTY_CONFIG_MEDIA_TYPE = "application/vnd.oci.empty.v1+json"
EMPTY_CONFIG_DIGEST = "44136fa355b3678a1146ad16f7e8649e94fb4fc21fe77e8310c060f61caaff8a"


def _dumps(value: Any) -> bytes:
    return json.dumps(value, separators=(",", ":")).encode()


@dataclass(frozen=True)
class Hash:
    """A content digest such as ``sha256:<hex>``."""

    algorithm: str
    hex: str

    def __str__(self) -> str:
        return f"{self.algorithm}:{self.hex}"

    @classmethod
    def of(cls, data: bytes) -> Hash:
        return cls("sha256", hashlib.sha256(data).hexdigest())


def parse_hash(text: str) -> Hash:
    algorithm, sep, hex_ = text.partition(":")
    if not sep or not algorithm or not hex_:
        raise ValueError(f"cannot parse hash: {text!r}")
    return Hash(algorithm, hex_)


def _platform_dict(platform: Platform) -> dict[str, str]:
    out = {"architecture": platform.architecture, "os": platform.os}
    if platform.os_version:
        out["os.version"] = platform.os_version
    if platform.variant:
        out["variant"] = platform.variant
    return out


@dataclass(frozen=True)
class Descriptor:
    """A reference to content by media type, size and digest."""

    media_type: str
    size: int
    digest: Hash
    annotations: dict[str, str] | None = None
    platform: Platform | None = None
    data: bytes | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "mediaType": self.media_type,
            "size": self.size,
            "digest": str(self.digest),
        }
        if self.data is not None:
            out["data"] = base64.b64encode(self.data).decode()
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        if self.platform is not None:
            out["platform"] = _platform_dict(self.platform)
        return out


@dataclass(frozen=True)
class Layer:
    """A blob held in memory."""

    data: bytes
    media_type: str

    def digest(self) -> Hash:
        return Hash.of(self.data)

    def descriptor(self) -> Descriptor:
        return Descriptor(self.media_type, len(self.data), self.digest())


def _describe(item: Manifested, annotations: dict[str, str] | None) -> Descriptor:
    raw = item.raw_manifest()
    return Descriptor(item.media_type, len(raw), Hash.of(raw), annotations or None)


@dataclass(frozen=True)
class Image:
    """An image: manifest media type, config media type and annotated layers."""

    media_type: str = DOCKER_MANIFEST
    config_media_type: str = DOCKER_CONFIG
    layers: tuple[tuple[Layer, dict[str, str]], ...] = ()

    def with_media_type(self, media_type: str) -> Image:
        return replace(self, media_type=media_type)

    def with_config_media_type(self, media_type: str) -> Image:
        return replace(self, config_media_type=media_type)

    def append(self, *args: Layer | tuple[Layer, dict[str, str]]) -> Image:
        """Return a new image with the given layers, optionally with annotations, added."""
        added = []
        for item in args:
            if isinstance(item, Layer):
                added.append((item, {}))
            else:
                layer, annotations = item
                added.append((layer, dict(annotations or {})))
        return replace(self, layers=self.layers + tuple(added))

    def raw_config_file(self) -> bytes:
        return _dumps(
            {
                "architecture": "",
                "os": "",
                "rootfs": {
                    "type": "layers",
                    "diff_ids": [str(layer.digest()) for layer, _ in self.layers],
                },
                "config": {},
            }
        )

    def _config_descriptor(self) -> Descriptor:
        raw = self.raw_config_file()
        return Descriptor(self.config_media_type, len(raw), Hash.of(raw))

    def manifest(self) -> dict[str, Any]:
        return {
            "schemaVersion": 2,
            "mediaType": self.media_type,
            "config": self._config_descriptor().to_dict(),
            "layers": [
                replace(layer.descriptor(), annotations=annotations or None).to_dict()
                for layer, annotations in self.layers
            ],
        }

    def raw_manifest(self) -> bytes:
        return _dumps(self.manifest())

    def digest(self) -> Hash:
        return Hash.of(self.raw_manifest())

    def size(self) -> int:
        return len(self.raw_manifest())

    def _descriptor(self, annotations: dict[str, str] | None = None) -> Descriptor:
        return _describe(self, annotations)


@dataclass(frozen=True)
class EmptyConfigImage:
    """An image whose config is the empty JSON object ``{}``."""

    image: Image

    @property
    def media_type(self) -> str:
        return self.image.media_type

    @property
    def layers(self) -> tuple[tuple[Layer, dict[str, str]], ...]:
        return self.image.layers

    def raw_config_file(self) -> bytes:
        return b"{}"

    def manifest(self) -> dict[str, Any]:
        manifest = self.image.manifest()
        manifest["config"] = Descriptor(
            EMPTY_CONFIG_MEDIA_TYPE, 2, Hash("sha256", EMPTY_CONFIG_DIGEST), data=b"{}"
        ).to_dict()
        return manifest

    def raw_manifest(self) -> bytes:
        return _dumps(self.manifest())

    def digest(self) -> Hash:
        return Hash.of(self.raw_manifest())

    def size(self) -> int:
        return len(self.raw_manifest())

    def _descriptor(self, annotations: dict[str, str] | None = None) -> Descriptor:
        return _describe(self, annotations)


@dataclass(frozen=True)
class Index:
    """An image index listing images or nested indexes with annotations."""

    media_type: str = OCI_INDEX
    manifests: tuple[tuple[Any, dict[str, str]], ...] = field(default=())

    def append_manifest(self, item: Any, annotations: dict[str, str] | None) -> Index:
        return replace(self, manifests=self.manifests + ((item, dict(annotations or {})),))

    def manifest(self) -> dict[str, Any]:
        return {
            "schemaVersion": 2,
            "mediaType": self.media_type,
            "manifests": [_describe(item, ann).to_dict() for item, ann in self.manifests],
        }

    def raw_manifest(self) -> bytes:
        return _dumps(self.manifest())

    def digest(self) -> Hash:
        return Hash.of(self.raw_manifest())

    def size(self) -> int:
        return len(self.raw_manifest())

    def _descriptor(self, annotations: dict[str, str] | None = None) -> Descriptor:
        return _describe(self, annotations)


Manifested = Union[Image, EmptyConfigImage, Index]


def empty_image() -> Image:
    return Image()


def empty_index() -> Index:
    return Index()