"""Mirroring TUF metadata as OCI images."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping

from attest.mirror.targets import (
    _delegated_role_names,
    delegated_target_mirrors,
    tuf_target_mirrors,
)
from attest.mirror.types import (
    DEFAULT_METADATA_URL,
    DEFAULT_TARGETS_URL,
    TUF_FILE_ANNOTATION,
    TUF_METADATA_MEDIA_TYPE,
    TUF_ROLES,
    DelegatedTargetMetadata,
    MirrorImage,
    MirrorIndex,
    TUFClient,
    TUFMetadata,
    TUFRole,
    _tuf_image,
)
from attest.oci.image import OCI_CONFIG, OCI_MANIFEST, EmptyConfigImage, Layer, empty_image


def name_from_role(role: str, version: str) -> str:
    """The metadata file name, prefixed by version when one is given."""
    if version:
        return f"{version}.{role}.json"
    return f"{role}.json"


def _to_bytes(document: Mapping[str, Any]) -> bytes:
    return json.dumps(document, separators=(",", ":")).encode()


def _annotated(meta: Mapping[str, bytes]) -> list[tuple[Layer, dict[str, str]]]:
    return [
        (Layer(data, TUF_METADATA_MEDIA_TYPE), {TUF_FILE_ANNOTATION: name})
        for name, data in meta.items()
    ]


@dataclass
class TUFMirror:
    """Builds OCI images and indexes that mirror a TUF repository."""

    client: TUFClient
    tuf_path: str
    metadata_url: str = DEFAULT_METADATA_URL
    targets_url: str = DEFAULT_TARGETS_URL

    def get_metadata_manifest(self, metadata_url: str) -> EmptyConfigImage:
        """An image with the top-level metadata files as annotated layers."""
        metadata = self.get_metadata_mirror(metadata_url)
        image = empty_image().with_media_type(OCI_MANIFEST).with_config_media_type(OCI_CONFIG)
        for role in TUF_ROLES:
            image = image.append(*self._role_layers(role, metadata))
        return EmptyConfigImage(image)

    def get_metadata_mirror(self, metadata_url: str) -> TUFMetadata:
        """Serialise the trusted top-level metadata under its mirrored file names."""
        trusted = self.client.get_metadata()
        root = trusted["root"]["signed"]
        root_version = root["version"]
        root_files: dict[str, bytes] = {}
        if root_version != 1:
            root_files = dict(self.client.get_prior_roots(metadata_url))
        root_files[name_from_role(TUFRole.ROOT.value, str(root_version))] = _to_bytes(
            trusted["root"]
        )

        snapshot = trusted["snapshot"]
        targets = trusted["targets"][TUFRole.TARGETS.value]
        snapshot_version = targets_version = ""
        if root.get("consistent_snapshot"):
            snapshot_version = str(snapshot["signed"]["version"])
            targets_version = str(targets["signed"]["version"])
        return TUFMetadata(
            root=root_files,
            snapshot={name_from_role(TUFRole.SNAPSHOT.value, snapshot_version): _to_bytes(snapshot)},
            targets={name_from_role(TUFRole.TARGETS.value, targets_version): _to_bytes(targets)},
            timestamp=_to_bytes(trusted["timestamp"]),
        )

    def _role_layers(
        self, role: TUFRole, metadata: TUFMetadata
    ) -> list[tuple[Layer, dict[str, str]]]:
        if role is TUFRole.ROOT:
            return _annotated(metadata.root)
        if role is TUFRole.SNAPSHOT:
            return _annotated(metadata.snapshot)
        if role is TUFRole.TARGETS:
            return _annotated(metadata.targets)
        if role is TUFRole.TIMESTAMP:
            return _annotated({f"{role.value}.json": metadata.timestamp})
        raise ValueError(f"unsupported TUF role: {role}")

    def _delegated_targets_metadata(self) -> list[DelegatedTargetMetadata]:
        trusted = self.client.get_metadata()
        consistent = bool(trusted["root"]["signed"].get("consistent_snapshot"))
        snapshot_meta = trusted["snapshot"]["signed"].get("meta") or {}
        delegated = []
        for role_name in _delegated_role_names(trusted):
            role_doc = self.client.load_delegated_targets(role_name, TUFRole.TARGETS.value)
            meta = snapshot_meta.get(name_from_role(role_name, ""))
            if meta is None:
                raise LookupError(f"failed to get role {role_name} metadata from snapshot")
            version = str(meta["version"]) if consistent else ""
            delegated.append(DelegatedTargetMetadata(role_name, version, _to_bytes(role_doc)))
        return delegated

    def get_delegated_metadata_mirrors(self) -> list[MirrorImage]:
        """One image per delegated targets role, tagged with the role name."""
        return [
            MirrorImage(
                _tuf_image(
                    role.data, TUF_METADATA_MEDIA_TYPE, name_from_role(role.name, role.version)
                ),
                role.name,
            )
            for role in self._delegated_targets_metadata()
        ]

    def get_tuf_target_mirrors(self) -> list[MirrorImage]:
        return tuf_target_mirrors(self.client, self.tuf_path)

    def get_delegated_target_mirrors(self) -> list[MirrorIndex]:
        return delegated_target_mirrors(self.client, self.tuf_path)