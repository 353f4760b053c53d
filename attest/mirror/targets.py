"""Mirroring TUF target files as OCI images and indexes."""

from __future__ import annotations

import os
import posixpath
from typing import Any, Mapping

from attest.mirror.types import (
    TUF_FILE_ANNOTATION,
    TUF_TARGET_MEDIA_TYPE,
    MirrorImage,
    MirrorIndex,
    TUFClient,
    TUFRole,
    _tuf_image,
)
from attest.oci.image import empty_index


def _top_level_targets(metadata: Mapping[str, Any]) -> Mapping[str, Any]:
    return metadata["targets"][TUFRole.TARGETS.value]["signed"]


def _delegated_role_names(metadata: Mapping[str, Any]) -> list[str]:
    delegations = _top_level_targets(metadata).get("delegations") or {}
    return [role["name"] for role in delegations.get("roles") or []]


def _sha256(target_path: str, info: Mapping[str, Any]) -> str:
    digest = (info.get("hashes") or {}).get("sha256")
    if not digest:
        raise ValueError(f"missing sha256 hash for target {target_path}")
    return digest


def tuf_target_mirrors(client: TUFClient, tuf_path: str) -> list[MirrorImage]:
    """One image per top-level target file, tagged ``<sha256>.<path>``."""
    download_path = os.path.join(tuf_path, "download")
    mirrors = []
    targets = _top_level_targets(client.get_metadata()).get("targets") or {}
    for path, info in targets.items():
        data = client.download_target(path, download_path)
        name = f"{_sha256(path, info)}.{path}"
        mirrors.append(MirrorImage(_tuf_image(data, TUF_TARGET_MEDIA_TYPE, name), name))
    return mirrors


def delegated_target_mirrors(client: TUFClient, tuf_path: str) -> list[MirrorIndex]:
    """One index per delegated role, holding an image for each of its target files."""
    download_path = os.path.join(tuf_path, "download")
    mirrors = []
    for role_name in _delegated_role_names(client.get_metadata()):
        index = empty_index()
        role_meta = client.load_delegated_targets(role_name, TUFRole.TARGETS.value)
        for path, info in (role_meta["signed"].get("targets") or {}).items():
            data = client.download_target(path, download_path)
            digest = _sha256(path, info)
            filename = posixpath.basename(path)
            suffix = "/" + filename
            if not path.endswith(suffix):
                raise ValueError(f"failed to find target subdirectory in path: {path}")
            subdir = path[: -len(suffix)]
            name = f"{digest}.{filename}"
            image = _tuf_image(data, TUF_TARGET_MEDIA_TYPE, name)
            index = index.append_manifest(image, {TUF_FILE_ANNOTATION: f"{subdir}/{name}"})
        mirrors.append(MirrorIndex(index, role_name))
    return mirrors