"""Helpers over image references, digests and index manifests."""

from __future__ import annotations

from typing import Any

from attest.oci.image import DOCKER_MANIFEST, OCI_MANIFEST, Descriptor, Hash, parse_hash
from attest.oci.platform import Platform
from attest.oci.purl import TYPE_DOCKER, PackageURL
from attest.oci.reference import Reference
from attest.oci.spec import LOCAL_PREFIX, ImageSpec, without_tag


def ref_to_purl(named: Reference, platform: Platform | None) -> tuple[str, bool]:
    """Return the docker purl for a reference and whether it is canonical (has a digest)."""
    qualifiers: dict[str, str] = {}
    is_canonical = bool(named.digest)
    if is_canonical:
        qualifiers["digest"] = named.digest
    else:
        named = named.tag_name_only()
    version = named.tag
    parts = named.familiar_name().split("/")
    namespace = "/".join(parts[:-1])
    if platform is not None:
        qualifiers["platform"] = str(platform)
    purl = PackageURL(TYPE_DOCKER, namespace, parts[-1], version, qualifiers)
    return purl.to_string(), is_canonical


def split_digest(digest: str) -> dict[str, str]:
    algorithm, sep, value = digest.partition(":")
    if not sep:
        raise ValueError(f"invalid digest {digest!r}")
    return {algorithm: value}


def _rewrite(image: str, make: str) -> str:
    if image.startswith(LOCAL_PREFIX):
        return image
    try:
        notag = without_tag(image)
    except ValueError:
        return ""
    return notag + make


def replace_tag(image: str, digest: Hash) -> str:
    """Replace the tag with one derived from the digest; unparsable names give ''."""
    return _rewrite(image, f":{digest.algorithm}-{digest.hex}.att")


def replace_digest(image: str, digest: Hash) -> str:
    """Point the reference at the digest; unparsable names give ''."""
    return _rewrite(image, f"@{digest.algorithm}:{digest.hex}")


def replace_tag_in_spec(src: ImageSpec, digest: Hash) -> ImageSpec:
    return ImageSpec(src.type, replace_tag(src.identifier, digest), src.platform)


def replace_digest_in_spec(src: ImageSpec, digest: Hash) -> ImageSpec:
    return ImageSpec(src.type, replace_digest(src.identifier, digest), src.platform)


def _platform_from(data: dict[str, Any] | None) -> Platform | None:
    if data is None:
        return None
    return Platform(
        os=data.get("os", ""),
        architecture=data.get("architecture", ""),
        variant=data.get("variant", ""),
        os_version=data.get("os.version", ""),
    )


def image_descriptor(index_manifest: dict[str, Any], platform: Platform) -> Descriptor:
    """Find the image manifest for ``platform`` in an index manifest."""
    for entry in index_manifest.get("manifests", []):
        media_type = entry.get("mediaType")
        entry_platform = _platform_from(entry.get("platform"))
        if media_type in (OCI_MANIFEST, DOCKER_MANIFEST) and entry_platform == platform:
            return Descriptor(
                media_type=media_type,
                size=entry.get("size", 0),
                digest=parse_hash(entry["digest"]),
                annotations=entry.get("annotations"),
                platform=entry_platform,
            )
    raise LookupError(f"no image found for platform {platform}")