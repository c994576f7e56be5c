"""
Data models for release storage.

These models represent the release records handled by every storage driver,
independent of the underlying storage mechanism.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .errors import InvalidKeyError

RELEASE_STATUSES = (
    "unknown",
    "deployed",
    "uninstalled",
    "superseded",
    "failed",
    "uninstalling",
    "pending-install",
    "pending-upgrade",
    "pending-rollback",
)

KEY_SEPARATOR = ".v"


def make_key(name: str, version: int) -> str:
    """Build the storage key for a release name and revision."""
    return f"{name}{KEY_SEPARATOR}{version}"


def parse_key(key: str) -> tuple[str, int]:
    """
    Split a storage key into release name and revision.

    Args:
        key: Key of the form "<name>.v<version>"

    Returns:
        Tuple of (name, version)

    Raises:
        InvalidKeyError: If the key is not exactly make_key(name, version)
    """
    name, sep, version = key.rpartition(KEY_SEPARATOR)
    if not sep or not name or not (version.isascii() and version.isdigit()):
        raise InvalidKeyError(key)
    # One canonical spelling per revision: "web.v01" is not "web.v1"
    if make_key(name, int(version)) != key:
        raise InvalidKeyError(key)
    return name, int(version)


@dataclass
class Release:
    """
    Represents one revision of a deployed release.

    Drivers only interpret the key and the label set; everything in
    `payload` is carried through unchanged.
    """

    name: str
    version: int
    namespace: str = "default"
    status: str = "unknown"  # One of RELEASE_STATUSES
    labels: dict[str, str] = field(default_factory=dict)
    payload: dict[str, Any] = field(default_factory=dict)  # chart, values, manifest
    created_at: datetime | None = None

    @property
    def key(self) -> str:
        return make_key(self.name, self.version)

    def label_set(self) -> dict[str, str]:
        """Return user labels overlaid with the name/status/version system labels."""
        labels = dict(self.labels)
        labels.update(
            {
                "name": self.name,
                "status": self.status,
                "version": str(self.version),
            }
        )
        return labels

    def matches(self, selector: dict[str, str]) -> bool:
        """Check that every selector pair is present and equal in the label set."""
        labels = self.label_set()
        return all(
            key in labels and labels[key] == value for key, value in selector.items()
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert release to dictionary format (for JSON serialization)."""
        return {
            "name": self.name,
            "version": self.version,
            "namespace": self.namespace,
            "status": self.status,
            "labels": dict(self.labels),
            "payload": self.payload,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Release":
        """Create release from dictionary format."""
        created_at = data.get("created_at")
        return cls(
            name=data["name"],
            version=int(data["version"]),
            namespace=data.get("namespace", "default"),
            status=data.get("status", "unknown"),
            labels=dict(data.get("labels") or {}),
            payload=data.get("payload") or {},
            created_at=datetime.fromisoformat(created_at) if created_at else None,
        )
