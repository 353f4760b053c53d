"""Container image attestation helpers: OCI images, TUF mirrors and policy types."""

__version__ = "0.1.0"