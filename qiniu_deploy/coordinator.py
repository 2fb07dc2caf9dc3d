"""
Module for coordinating a deployment: upload the build, then refresh the CDN.
"""
import logging
from enum import Enum
from typing import Optional

from .errors import RefreshFailed
from .models import DeploymentResult
from .scanner import FileScanner
from .storage import CdnRefresher, DeployContext, ObjectStorage
from .uploader import BatchUploader

logger = logging.getLogger(__name__)


class DeployState(Enum):
    IDLE = "idle"
    ENUMERATING = "enumerating"
    UPLOADING = "uploading"
    REFRESHING = "refreshing"
    DONE = "done"
    FAILED = "failed"


class DeploymentCoordinator:
    """Runs one deployment of a build output directory."""

    def __init__(self, context: DeployContext, storage: ObjectStorage,
                 cdn: CdnRefresher, scanner: Optional[FileScanner] = None):
        """Initialize the deployment coordinator.

        Args:
            context: Immutable run context
            storage: Object storage collaborator
            cdn: CDN collaborator
            scanner: File scanner, a new FileScanner when omitted
        """
        self.context = context
        self.cdn = cdn
        self.scanner = scanner or FileScanner()
        self.verbose = context.config.log
        self.uploader = BatchUploader(storage, context)
        self.state = DeployState.IDLE

    def notice(self, message: str) -> None:
        if self.verbose:
            logger.info(message)

    async def deploy(self) -> DeploymentResult:
        """Upload the distribution directory and refresh the entrypoint.

        Returns:
            DeploymentResult with every upload outcome and the refresh reply

        Raises:
            UploadFailed: If any file failed; no refresh was attempted
            RefreshFailed: If the files were uploaded but the refresh failed
        """
        config = self.context.config
        self.state = DeployState.ENUMERATING
        files = self.scanner.scan_folder(config.dist_dir)
        self.notice(f"Deploying {len(files)} files from {config.dist_dir} to {config.bucket}")

        self.state = DeployState.UPLOADING
        try:
            results = await self.uploader.upload_all(files)
        except Exception:
            self.state = DeployState.FAILED
            raise

        deployment = DeploymentResult(results=results)
        self.notice(
            f"Uploaded {deployment.uploaded_files} files, "
            f"excluded {deployment.excluded_files}"
        )

        entrypoint = deployment.find(self.context.entrypoint_path)
        if entrypoint is None or not entrypoint.uploaded:
            logger.warning(
                f"{self.context.entrypoint_path} was not uploaded, skipping CDN refresh"
            )
            self.state = DeployState.DONE
            return deployment

        self.state = DeployState.REFRESHING
        deployment.refresh_url = self.context.entrypoint_url
        await self._refresh(deployment)

        self.state = DeployState.DONE
        return deployment

    async def _refresh(self, deployment: DeploymentResult) -> None:
        url = deployment.refresh_url
        try:
            response = await self.cdn.refresh_urls([url])
        except Exception as e:
            self.state = DeployState.FAILED
            logger.error(f"CDN refresh of {url} failed: {e}")
            raise RefreshFailed(url, results=deployment.results) from e

        if response.error or response.status_code != 200:
            self.state = DeployState.FAILED
            logger.error(f"CDN refresh of {url} failed with status {response.status_code}")
            raise RefreshFailed(url, response, deployment.results)

        deployment.refresh_response = response
        self.notice(f"Refreshed {url}")
