import pytest

from attest.oci.reference import ReferenceError, parse_normalized_named, parse_reference


@pytest.mark.parametrize(
    "text,name,familiar",
    [
        ("alpine", "docker.io/library/alpine", "alpine"),
        ("library/alpine:123", "docker.io/library/alpine", "alpine"),
        ("google/alpine", "docker.io/google/alpine", "google/alpine"),
        ("index.docker.io/library/alpine", "docker.io/library/alpine", "alpine"),
        ("localhost:5001/alpine:1", "localhost:5001/alpine", "localhost:5001/alpine"),
    ],
)
def test_normalized(text, name, familiar):
    ref = parse_normalized_named(text)
    assert ref.name() == name
    assert ref.familiar_name() == familiar


def test_tag_and_digest():
    digest = "sha256:" + "a" * 64
    ref = parse_normalized_named(f"alpine:3@{digest}")
    assert ref.tag == "3"
    assert ref.digest == digest


def test_tag_name_only():
    assert parse_normalized_named("alpine").tag_name_only().tag == "latest"
    assert parse_normalized_named("alpine:1").tag_name_only().tag == "1"


def test_registry_form():
    ref = parse_reference("image:tag")
    assert ref.repository() == "index.docker.io/library/image"
    assert parse_reference("127.0.0.1:36555/repo:latest").repository() == "127.0.0.1:36555/repo"


@pytest.mark.parametrize("text", ["foo bar", "Alpine", "alpine,bar", "", "a" * 64, "alpine@sha256:xyz"])
def test_invalid(text):
    with pytest.raises(ReferenceError):
        parse_normalized_named(text)