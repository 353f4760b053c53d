"""Image specifications naming an image in a registry or an OCI layout."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable

from attest.oci.platform import Platform, parse_platform
from attest.oci.reference import parse_reference

OCI_REFERENCE_TARGET = "org.opencontainers.image.ref.name"
LOCAL_PREFIX = "oci://"
REGISTRY_PREFIX = "docker://"


class SourceType(str, enum.Enum):
    OCI = "OCI"
    DOCKER = "Docker"


@dataclass
class ImageSpec:
    """Where an image lives; the identifier carries no oci:// or docker:// prefix."""

    type: SourceType
    identifier: str
    platform: Platform | None = None

    def for_platforms(self, platform: str) -> list[ImageSpec]:
        return [
            ImageSpec(self.type, self.identifier, parse_platform(p))
            for p in platform.split(",")
        ]


ImageSpecOption = Callable[[ImageSpec], None]


def parse_image_spec(img: str, *args: ImageSpecOption) -> ImageSpec:
    img = img.strip()
    if "," in img:
        raise ValueError("only one image is supported")
    without_prefix = img.removeprefix(LOCAL_PREFIX).removeprefix(REGISTRY_PREFIX)
    source = SourceType.OCI if img.startswith(LOCAL_PREFIX) else SourceType.DOCKER
    spec = ImageSpec(type=source, identifier=without_prefix)
    for option in args:
        option(spec)
    if spec.platform is None:
        spec.platform = parse_platform("")
    return spec


def with_platform(platform: str) -> ImageSpecOption:
    def apply(spec: ImageSpec) -> None:
        if "," in platform:
            raise ValueError("only one platform is supported")
        spec.platform = parse_platform(platform)

    return apply


def parse_image_specs(img: str) -> list[ImageSpec]:
    return [parse_image_spec(part) for part in img.split(",")]


def without_tag(image: str) -> str:
    """Return the repository of ``image`` without tag or digest."""
    if image.startswith(LOCAL_PREFIX):
        return image
    prefix = ""
    if image.startswith(REGISTRY_PREFIX):
        image = image[len(REGISTRY_PREFIX):]
        prefix = REGISTRY_PREFIX
    return prefix + parse_reference(image).repository()