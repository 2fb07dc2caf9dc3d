"""
Module containing data models for the deployment service.
"""
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Tuple

DEFAULT_INCLUDE = r"(index.html)$"
DEFAULT_ZONE = "z0"
DEFAULT_CONCURRENCY = 10
DEFAULT_PREFIX = "upqn-prefix/"
DEFAULT_DIST_DIR = "dist"
DEFAULT_ENTRYPOINT = "index.html"

ZONES = ("z0", "z1", "z2", "na0", "as0")

FileSet = Tuple[Path, ...]


@dataclass(frozen=True)
class DeployConfig:
    """Configuration for one deployment run."""
    access_key: str
    secret_key: str
    bucket: str
    hostname: str
    include: str = DEFAULT_INCLUDE
    zone: str = DEFAULT_ZONE
    concurrency: int = DEFAULT_CONCURRENCY
    prefix: str = DEFAULT_PREFIX
    dist_dir: str = DEFAULT_DIST_DIR
    log: bool = True
    entrypoint: str = DEFAULT_ENTRYPOINT

    def __post_init__(self):
        """Validate the deployment configuration."""
        if not self.access_key or not self.secret_key:
            raise ValueError("access_key and secret_key are required")
        if not self.bucket:
            raise ValueError("bucket cannot be empty")
        if not self.hostname:
            raise ValueError("hostname cannot be empty")
        if self.zone not in ZONES:
            raise ValueError(f"Unknown zone {self.zone!r}, expected one of {', '.join(ZONES)}")
        if self.concurrency < 1:
            raise ValueError("concurrency must be a positive integer")
        try:
            re.compile(self.include)
        except re.error as e:
            raise ValueError(f"Invalid include pattern {self.include!r}: {e}") from e


@dataclass(frozen=True)
class StorageResponse:
    """Raw reply of the storage or CDN layer."""
    error: Optional[str]
    body: Any
    status_code: int


@dataclass(frozen=True)
class UploadTask:
    """A single file scheduled for upload."""
    local_path: Path
    remote_key: str
    mime_type: Optional[str] = None


class Outcome(Enum):
    SUCCEEDED = "succeeded"
    ALREADY_EXISTS = "already_exists"
    EXCLUDED = "excluded"
    NETWORK_ERROR = "network_error"
    REJECTED = "rejected"


@dataclass(frozen=True)
class UploadResult:
    """Represents the outcome of a single file upload."""
    file_path: Path
    outcome: Outcome
    remote_key: Optional[str] = None
    payload: Any = None
    reason: Optional[str] = None
    status_code: Optional[int] = None

    @property
    def failed(self) -> bool:
        return self.outcome in (Outcome.NETWORK_ERROR, Outcome.REJECTED)

    @property
    def uploaded(self) -> bool:
        return self.outcome in (Outcome.SUCCEEDED, Outcome.ALREADY_EXISTS)


@dataclass
class DeploymentResult:
    """Aggregate of every upload result of a run."""
    results: List[UploadResult] = field(default_factory=list)
    refresh_url: Optional[str] = None
    refresh_response: Optional[StorageResponse] = None

    @property
    def uploaded_files(self) -> int:
        return sum(1 for r in self.results if r.uploaded)

    @property
    def excluded_files(self) -> int:
        return sum(1 for r in self.results if r.outcome is Outcome.EXCLUDED)

    @property
    def refreshed(self) -> bool:
        return self.refresh_response is not None

    def find(self, file_path: Path) -> Optional[UploadResult]:
        """Return the result recorded for a local path, if any."""
        for result in self.results:
            if result.file_path == file_path:
                return result
        return None
