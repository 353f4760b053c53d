import hashlib
import json
import os

import pytest

from attest.mirror.targets import delegated_target_mirrors, tuf_target_mirrors
from attest.mirror.types import TUF_FILE_ANNOTATION

TOP_FILES = {"policy.rego": b"package attest", "mapping.yaml": b"version: v1"}
DELEGATED_FILES = {"test-role/a.txt": b"alpha", "test-role/nested/b.json": b"{}"}


def _info(data):
    return {"length": len(data), "hashes": {"sha256": hashlib.sha256(data).hexdigest()}}


class FakeClient:
    def __init__(self, top=TOP_FILES, delegated=DELEGATED_FILES, drop_hash=None):
        self.files = {**top, **delegated}
        self.top = {path: _info(data) for path, data in top.items()}
        self.delegated = {path: _info(data) for path, data in delegated.items()}
        if drop_hash:
            for table in (self.top, self.delegated):
                if drop_hash in table:
                    table[drop_hash]["hashes"] = {}
        self.downloads = []

    def get_metadata(self):
        return {
            "root": {"signed": {"version": 1, "consistent_snapshot": True}},
            "targets": {
                "targets": {
                    "signed": {
                        "version": 1,
                        "targets": self.top,
                        "delegations": {"roles": [{"name": "test-role"}]},
                    }
                }
            },
        }

    def get_prior_roots(self, metadata_url):
        return {}

    def load_delegated_targets(self, role_name, parent_role):
        assert (role_name, parent_role) == ("test-role", "targets")
        return {"signed": {"version": 1, "targets": self.delegated}}

    def download_target(self, target_path, file_path):
        self.downloads.append((target_path, file_path))
        return self.files[target_path]


def test_tuf_target_mirrors_are_annotated(tmp_path):
    targets = tuf_target_mirrors(FakeClient(), str(tmp_path))
    assert len(targets) > 0
    for target in targets:
        manifest = json.loads(target.image.raw_manifest())
        for layer in manifest["layers"]:
            ann = layer["annotations"][TUF_FILE_ANNOTATION]
            # <digest>.filename.<ext|optional>
            assert len(ann.split(".")) >= 2


def test_tuf_target_tag_and_layer_content(tmp_path):
    targets = {t.tag: t for t in tuf_target_mirrors(FakeClient(), str(tmp_path))}
    sha = hashlib.sha256(b"package attest").hexdigest()
    target = targets[f"{sha}.policy.rego"]
    layer = json.loads(target.image.raw_manifest())["layers"][0]
    assert layer["digest"] == f"sha256:{sha}"
    assert layer["mediaType"] == "application/vnd.tuf.target"
    assert target.image.raw_config_file() == b"{}"


def test_tuf_target_download_destination(tmp_path):
    client = FakeClient()
    tuf_target_mirrors(client, str(tmp_path))
    assert {dest for _, dest in client.downloads} == {os.path.join(str(tmp_path), "download")}
    assert sorted(path for path, _ in client.downloads) == sorted(TOP_FILES)


def test_tuf_target_missing_hash(tmp_path):
    with pytest.raises(ValueError, match="missing sha256 hash for target policy.rego"):
        tuf_target_mirrors(FakeClient(drop_hash="policy.rego"), str(tmp_path))


def test_delegated_target_mirrors(tmp_path):
    mirrors = delegated_target_mirrors(FakeClient(), str(tmp_path))
    assert len(mirrors) == 1
    mirror = mirrors[0]
    assert mirror.tag == "test-role"
    entries = json.loads(mirror.index.raw_manifest())["manifests"]
    names = sorted(entry["annotations"][TUF_FILE_ANNOTATION] for entry in entries)
    sha_a = hashlib.sha256(b"alpha").hexdigest()
    sha_b = hashlib.sha256(b"{}").hexdigest()
    assert names == sorted([f"test-role/{sha_a}.a.txt", f"test-role/nested/{sha_b}.b.json"])
    for name in names:
        # <subdir>/<digest>.filename.<ext|optional>
        assert len(name.split(".")) >= 2


def test_delegated_target_without_subdirectory(tmp_path):
    client = FakeClient(delegated={"flat.txt": b"x"})
    with pytest.raises(ValueError, match="subdirectory"):
        delegated_target_mirrors(client, str(tmp_path))


def test_delegated_target_missing_hash(tmp_path):
    client = FakeClient(drop_hash="test-role/a.txt")
    with pytest.raises(ValueError, match="missing sha256 hash"):
        delegated_target_mirrors(client, str(tmp_path))