"""Build and version information reported by the sync tools."""

from __future__ import annotations

import platform
from dataclasses import dataclass, field

_UNKNOWN = "unknown"
_DEFAULT_VERSION = "0.0.0"
_DEFAULT_REVISION = "0"


@dataclass
class BuildInfo:
    """Version, revision and build details; empty values fall back to defaults."""

    version: str = ""
    revision: str = ""
    branch: str = ""
    build_user: str = ""
    build_date: str = ""
    python_version: str = field(default_factory=platform.python_version)

    def get_version(self) -> str:
        """Return the version, or ``0.0.0`` when none is set."""
        return self.version or _DEFAULT_VERSION

    def get_version_info(self) -> str:
        """Return the version together with revision and branch."""
        return (
            f"(version={self.get_version()}, "
            f"revision={self.revision or _DEFAULT_REVISION}, "
            f"branch={self.branch or _UNKNOWN})"
        )

    def get_version_info_extended(self) -> str:
        """Return the version info extended with interpreter and build details."""
        return (
            f"(version={self.get_version()}, "
            f"revision={self.revision or _DEFAULT_REVISION}, "
            f"branch={self.branch or _UNKNOWN}, "
            f"python={self.python_version}, "
            f"user={self.build_user or _UNKNOWN}, "
            f"date={self.build_date or _UNKNOWN})"
        )