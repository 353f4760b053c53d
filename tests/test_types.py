import hashlib
import json

import pytest

from attest.mirror.types import (
    TUF_FILE_ANNOTATION,
    TUF_ROLES,
    TUF_TARGET_MEDIA_TYPE,
    DelegatedTargetMetadata,
    MirrorImage,
    MirrorIndex,
    TUFMetadata,
    TUFRole,
    _tuf_image,
)
from attest.oci.image import EmptyConfigImage, empty_image, empty_index


def test_role_round_trip_from_string():
    for role in TUF_ROLES:
        assert TUFRole(role.value) is role


def test_unknown_role_rejected():
    with pytest.raises(ValueError):
        TUFRole("mirrors")


def test_role_order_and_text():
    names = [str(TUFRole(role.value)) for role in TUF_ROLES]
    assert names == ["root", "snapshot", "targets", "timestamp"]
    assert f"{TUFRole('timestamp')}.json" == "timestamp.json"


def test_tuf_metadata_equality():
    first = TUFMetadata({"1.root.json": b"a"}, {"snapshot.json": b"b"}, {"targets.json": b"c"}, b"d")
    second = TUFMetadata({"1.root.json": b"a"}, {"snapshot.json": b"b"}, {"targets.json": b"c"}, b"d")
    assert first == second
    assert first != TUFMetadata({}, {}, {}, b"d")


def test_delegated_target_metadata_is_frozen():
    meta = DelegatedTargetMetadata("test-role", "", b"{}")
    with pytest.raises(AttributeError):
        meta.name = "other"  # type: ignore[misc]
    assert meta.name == "test-role"
    assert meta.data == b"{}"


def test_mirror_image_digest_matches_manifest():
    image = _tuf_image(b"content", TUF_TARGET_MEDIA_TYPE, "abc.file")
    mirror = MirrorImage(image, "abc.file")
    raw = mirror.image.raw_manifest()
    assert mirror.image.digest().hex == hashlib.sha256(raw).hexdigest()
    manifest = json.loads(raw)
    assert manifest["layers"][0]["annotations"] == {TUF_FILE_ANNOTATION: "abc.file"}
    assert manifest["layers"][0]["mediaType"] == TUF_TARGET_MEDIA_TYPE


def test_mirror_index_keeps_tag():
    index = empty_index().append_manifest(EmptyConfigImage(empty_image()), None)
    mirror = MirrorIndex(index, "test-role")
    assert mirror.tag == "test-role"
    assert len(json.loads(mirror.index.raw_manifest())["manifests"]) == 1