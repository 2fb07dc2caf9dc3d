"""
Storage and CDN collaborators backed by the Qiniu SDK.
"""
import asyncio
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Protocol, Tuple

from qiniu import Auth, CdnManager, Region, put_file

from .models import DeployConfig, StorageResponse
from .resolver import resolve_remote_key

logger = logging.getLogger(__name__)

# zone code -> (upload host, backup upload host)
ZONE_HOSTS = {
    "z0": ("https://up.qiniup.com", "https://upload.qiniup.com"),
    "z1": ("https://up-z1.qiniup.com", "https://upload-z1.qiniup.com"),
    "z2": ("https://up-z2.qiniup.com", "https://upload-z2.qiniup.com"),
    "na0": ("https://up-na0.qiniup.com", "https://upload-na0.qiniup.com"),
    "as0": ("https://up-as0.qiniup.com", "https://upload-as0.qiniup.com"),
}


class ObjectStorage(Protocol):
    async def put_file(self, token: str, key: str, local_path: Path,
                       mime_type: Optional[str] = None) -> StorageResponse:
        ...


class CdnRefresher(Protocol):
    async def refresh_urls(self, urls: List[str]) -> StorageResponse:
        ...


@dataclass(frozen=True)
class DeployContext:
    """Read-only state shared by every upload of a run."""
    config: DeployConfig
    upload_token: str
    entrypoint_token: str
    include: re.Pattern

    def token_for(self, key: str) -> str:
        if key == self.entrypoint_key:
            return self.entrypoint_token
        return self.upload_token

    @property
    def entrypoint_path(self) -> Path:
        return Path(self.config.dist_dir) / self.config.entrypoint

    @property
    def entrypoint_key(self) -> str:
        return resolve_remote_key(self.entrypoint_path, self.config.prefix,
                                  self.config.dist_dir)

    @property
    def entrypoint_url(self) -> str:
        return f"http://{self.config.hostname}/{self.entrypoint_key}"


def to_storage_response(ret: Any, info: Any) -> StorageResponse:
    """Convert a ``(ret, ResponseInfo)`` pair from the SDK.

    Only a raised transport exception counts as an error; status-level
    failures are left to the status code.
    """
    exception = getattr(info, "exception", None)
    return StorageResponse(
        error=str(exception) if exception is not None else None,
        body=ret if ret is not None else getattr(info, "text_body", None),
        status_code=getattr(info, "status_code", -1)
    )


class QiniuStorage:
    """Uploads files to a Kodo bucket."""

    def __init__(self, zone: str = "z0"):
        """Initialize the uploader for a storage region.

        Args:
            zone: Region code such as ``z0``
        """
        up_host, up_host_backup = ZONE_HOSTS[zone]
        self.region = Region(up_host=up_host, up_host_backup=up_host_backup)
        self.zone = zone

    def _put_file(self, token: str, key: str, local_path: Path,
                  mime_type: Optional[str]) -> StorageResponse:
        extra = {"mime_type": mime_type} if mime_type else {}
        ret, info = put_file(token, key, str(local_path), regions=[self.region], **extra)
        logger.debug(f"put_file {key}: {info}")
        return to_storage_response(ret, info)

    async def put_file(self, token: str, key: str, local_path: Path,
                       mime_type: Optional[str] = None) -> StorageResponse:
        return await asyncio.to_thread(self._put_file, token, key, local_path, mime_type)


class QiniuCdn:
    """Refreshes CDN cache entries."""

    def __init__(self, auth: Auth):
        self.manager = CdnManager(auth)

    def _refresh_urls(self, urls: List[str]) -> StorageResponse:
        ret, info = self.manager.refresh_urls(urls)
        logger.debug(f"refresh_urls {urls}: {info}")
        return to_storage_response(ret, info)

    async def refresh_urls(self, urls: List[str]) -> StorageResponse:
        return await asyncio.to_thread(self._refresh_urls, urls)


def build_context(config: DeployConfig, auth: Optional[Auth] = None) -> DeployContext:
    """Create the immutable run context.

    Two tokens are issued: one scoped to the entrypoint key so the
    entrypoint document overwrites its previous version, and an insert-only
    bucket token for every other key, which reports status 614 when the
    object already exists. Other HTML documents matched by the include
    pattern, such as nested ``index.html`` files, get the insert-only token
    too: on a redeploy they stay at their previous version and the uploader
    logs a warning for each of them.

    Args:
        config: Deployment configuration
        auth: Existing credentials, built from the config when omitted

    Returns:
        DeployContext for the run
    """
    auth = auth or Auth(config.access_key, config.secret_key)
    entrypoint_key = resolve_remote_key(
        Path(config.dist_dir) / config.entrypoint, config.prefix, config.dist_dir
    )
    return DeployContext(
        config=config,
        upload_token=auth.upload_token(config.bucket),
        entrypoint_token=auth.upload_token(config.bucket, entrypoint_key),
        include=re.compile(config.include)
    )


def create_backends(config: DeployConfig) -> Tuple[DeployContext, QiniuStorage, QiniuCdn]:
    """Build the context and SDK-backed collaborators for a run."""
    auth = Auth(config.access_key, config.secret_key)
    return build_context(config, auth), QiniuStorage(config.zone), QiniuCdn(auth)
