# attest

Building blocks for working with container image attestations:

- **`attest.oci`** covers image specs (`oci://` layouts and `docker://` registry references), platforms, normalized image references, package URLs, and OCI images and indexes built in memory with their manifests and digests.
- **`attest.mirror`** turns TUF metadata and target files into OCI images and indexes.
- **`attest.policy`** holds the policy data model (inputs, results, violations, options) and a stand-in evaluator.

The package has no runtime dependencies.

## Installation

```
pip install .
```

The tests need the `test` extra:

```
pip install ".[test]"
pytest
```

## Image specs and references

```python
from attest.oci.spec import parse_image_spec, parse_image_specs, with_platform, without_tag

spec = parse_image_spec("docker://alpine:3.20", with_platform("linux/arm64"))
print(spec.identifier, spec.platform)   # alpine:3.20 linux/arm64

outputs = parse_image_specs("oci:///tmp/layout,registry.example.com/repo:tag")

print(without_tag("image:tag"))         # index.docker.io/library/image
```

A spec parsed without a platform gets the host's platform (`parse_platform("")`).
`ImageSpec.for_platforms("linux/amd64,linux/arm64")` gives one spec per platform.

`attest.oci.reference` parses references: `parse_normalized_named` fills in
`docker.io` and the `library/` namespace, `parse_reference` uses
`index.docker.io`. Both raise `ReferenceError` on bad input.

## Package URLs and digests

```python
from attest.oci.platform import parse_platform
from attest.oci.reference import parse_normalized_named
from attest.oci.oci import ref_to_purl, replace_tag, split_digest
from attest.oci.image import Hash

purl, canonical = ref_to_purl(parse_normalized_named("alpine"), parse_platform("arm64/linux"))
# "pkg:docker/alpine@latest?platform=arm64%2Flinux", False

replace_tag("image:tag", Hash("sha256", "digest"))
# "index.docker.io/library/image:sha256-digest.att"

split_digest("sha256:abc")   # {"sha256": "abc"}
```

`attest.oci.purl.parse_purl` reads `pkg:` URLs back into a `PackageURL`.
`image_descriptor(index_manifest, platform)` finds the image entry for a
platform in an index manifest and raises `LookupError` if there is none.

## Images and indexes in memory

```python
from attest.oci.image import EmptyConfigImage, Layer, empty_image, empty_index

image = empty_image().append((Layer(b"hello", "text/plain"), {"note": "greeting"}))
wrapped = EmptyConfigImage(image)       # config is the empty JSON object {}
print(wrapped.digest(), wrapped.raw_manifest())

index = empty_index().append_manifest(wrapped, {"org.opencontainers.image.ref.name": "demo"})
print(index.digest())
```

Images and indexes are immutable; every change returns a new object.

## TUF mirrors

`attest.mirror.metadata.TUFMirror(client, tuf_path)` wraps any object with the
methods of the `attest.mirror.types.TUFClient` protocol and produces:

- `get_metadata_manifest(metadata_url)`: one image holding the root, snapshot, targets and timestamp metadata as annotated layers;
- `get_delegated_metadata_mirrors()`: one image per delegated role;
- `get_tuf_target_mirrors()`: one image per top-level target file;
- `get_delegated_target_mirrors()`: one index per delegated role, one image per target.

Every layer carries a `tuf.io/filename` annotation; with consistent snapshots
the metadata names carry their version (`name_from_role`).

## Policies

```python
from attest.policy.evaluator import get_mock_policy, MockPolicyEvaluator
from attest.policy.types import Input, Policy, Result

result = get_mock_policy().evaluate(None, Policy(), Input())
assert result.success

Result.from_dict({"success": False, "violations": [{"type": "missing"}]}).to_dict()
```

## What the package does not do

It builds images, indexes and manifests in memory only. It does not push to or
pull from registries, does not read or write OCI layout directories, does not
fetch TUF metadata itself (that is the `TUFClient`'s job), does not evaluate
policy code and does not check in-toto subjects against an image.