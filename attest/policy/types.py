"""Policy inputs, results and resolution options."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

Parameters = dict[str, str]


@dataclass
class Summary:
    """Summary of what a policy checked."""

    subjects: list[dict[str, Any]] = field(default_factory=list)
    inputs: list[dict[str, Any]] = field(default_factory=list)
    slsa_levels: list[str] = field(default_factory=list)
    verifier: str = ""
    policy_uri: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> Summary:
        data = data or {}
        return cls(
            subjects=list(data.get("subjects") or []),
            inputs=list(data.get("input_attestations") or []),
            slsa_levels=list(data.get("slsa_levels") or []),
            verifier=data.get("verifier") or "",
            policy_uri=data.get("policy_uri") or "",
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "subjects": list(self.subjects),
            "input_attestations": list(self.inputs),
            "slsa_levels": list(self.slsa_levels),
            "verifier": self.verifier,
            "policy_uri": self.policy_uri,
        }


@dataclass
class Violation:
    """A single way in which an image failed its policy."""

    type: str = ""
    description: str = ""
    attestation: dict[str, Any] | None = None
    details: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> Violation:
        data = data or {}
        attestation = data.get("attestation")
        details = data.get("details")
        return cls(
            type=data.get("type") or "",
            description=data.get("description") or "",
            attestation=dict(attestation) if attestation is not None else None,
            details=dict(details) if details is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "description": self.description,
            "attestation": self.attestation,
            "details": self.details,
        }


@dataclass
class Result:
    """The outcome of evaluating a policy."""

    success: bool = False
    violations: list[Violation] = field(default_factory=list)
    summary: Summary = field(default_factory=Summary)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> Result:
        data = data or {}
        return cls(
            success=bool(data.get("success", False)),
            violations=[Violation.from_dict(v) for v in data.get("violations") or []],
            summary=Summary.from_dict(data.get("summary")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "violations": [v.to_dict() for v in self.violations],
            "summary": self.summary.to_dict(),
        }


@dataclass
class Options:
    """How policies are located and evaluated."""

    tuf_client_options: Any = None
    disable_tuf: bool = False
    local_targets_dir: str = ""
    local_policy_dir: str = ""
    policy_id: str = ""
    referrers_repo: str = ""
    attestation_style: Any = None
    debug: bool = False
    attestation_verifier: Any = None
    parameters: Parameters | None = None


@dataclass
class PolicyFile:
    """A file making up a policy: its path and contents."""

    path: str
    content: bytes


@dataclass
class Policy:
    """A resolved policy ready to be evaluated."""

    input_files: list[PolicyFile] = field(default_factory=list)
    query: str = ""
    mapping: Any = None
    resolved_name: str = ""
    uri: str = ""
    digest: dict[str, str] | None = None


@dataclass
class Input:
    """The facts about an image that a policy is evaluated against."""

    digest: str = ""
    purl: str = ""
    tag: str = ""
    domain: str = ""
    normalized_name: str = ""
    familiar_name: str = ""
    platform: str = ""
    parameters: Parameters | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"digest": self.digest, "purl": self.purl}
        if self.tag:
            out["tag"] = self.tag
        out.update(
            domain=self.domain,
            normalized_name=self.normalized_name,
            familiar_name=self.familiar_name,
            platform=self.platform,
            parameters=dict(self.parameters) if self.parameters is not None else None,
        )
        return out