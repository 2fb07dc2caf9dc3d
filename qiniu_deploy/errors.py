"""
Exceptions raised by the deployment service.
"""
from typing import List, Optional

from .models import StorageResponse, UploadResult


class DeployError(Exception):
    """Base class for deployment failures."""


class UploadFailed(DeployError):
    """A file could not be uploaded; the assets were never fully deployed."""

    def __init__(self, result: UploadResult):
        self.result = result
        super().__init__(f"Upload of {result.file_path} failed: {result.reason}")


class NetworkUnreachable(UploadFailed):
    """The bucket endpoint could not be resolved or reached."""


class ObjectRejected(UploadFailed):
    """The storage layer refused the object."""


class RefreshFailed(DeployError):
    """Assets were uploaded but the CDN cache was not refreshed."""

    def __init__(self, url: str, response: Optional[StorageResponse] = None,
                 results: Optional[List[UploadResult]] = None):
        self.url = url
        self.response = response
        self.results = results or []
        detail = ""
        if response is not None:
            detail = f" (status {response.status_code}: {response.error or response.body})"
        super().__init__(f"CDN refresh of {url} failed{detail}")
