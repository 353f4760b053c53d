"""Image platform descriptions (os/architecture/variant)."""

from __future__ import annotations

import platform as _host
from dataclasses import dataclass

_ARCH_ALIASES = {
    "x86_64": ("amd64", ""),
    "x86-64": ("amd64", ""),
    "amd64": ("amd64", ""),
    "aarch64": ("arm64", ""),
    "arm64": ("arm64", ""),
    "armv8l": ("arm64", ""),
    "armv7l": ("arm", "v7"),
    "armv7": ("arm", "v7"),
    "armv6l": ("arm", "v6"),
    "armv6": ("arm", "v6"),
    "armv5tel": ("arm", "v5"),
    "i386": ("386", ""),
    "i486": ("386", ""),
    "i586": ("386", ""),
    "i686": ("386", ""),
    "x86": ("386", ""),
    "ppc64le": ("ppc64le", ""),
    "s390x": ("s390x", ""),
    "riscv64": ("riscv64", ""),
}


@dataclass(frozen=True)
class Platform:
    """An OS/architecture pair with optional variant and OS version."""

    os: str = ""
    architecture: str = ""
    variant: str = ""
    os_version: str = ""

    def __str__(self) -> str:
        text = f"{self.os}/{self.architecture}"
        if self.variant:
            text += f"/{self.variant}"
        if self.os_version:
            text += f":{self.os_version}"
        return text


def _host_platform() -> Platform:
    machine = _host.machine().lower()
    arch, variant = _ARCH_ALIASES.get(machine, (machine, ""))
    os_name = _host.system().lower()
    if os_name != "windows":
        os_name = "linux"
    return Platform(os=os_name, architecture=arch, variant=variant)


def parse_platform(platform_str: str) -> Platform:
    """Parse ``os/arch[/variant][:osversion]``; an empty string gives the host platform."""
    if platform_str == "":
        return _host_platform()
    spec, sep, os_version = platform_str.partition(":")
    parts = spec.split("/")
    if len(parts) > 3:
        raise ValueError(f"too many slashes in platform spec: {platform_str}")
    parts += [""] * (3 - len(parts))
    return Platform(
        os=parts[0],
        architecture=parts[1],
        variant=parts[2],
        os_version=os_version if sep else "",
    )