from .coordinator import DeploymentCoordinator, DeployState
from .errors import DeployError, NetworkUnreachable, ObjectRejected, RefreshFailed, UploadFailed
from .models import DeployConfig, DeploymentResult, Outcome, StorageResponse, UploadResult
from .scanner import FileScanner
from .storage import DeployContext, QiniuCdn, QiniuStorage, build_context
from .uploader import BatchUploader

__version__ = "0.1.0"

__all__ = [
    "DeploymentCoordinator",
    "DeployState",
    "DeployError",
    "NetworkUnreachable",
    "ObjectRejected",
    "RefreshFailed",
    "UploadFailed",
    "DeployConfig",
    "DeploymentResult",
    "Outcome",
    "StorageResponse",
    "UploadResult",
    "FileScanner",
    "DeployContext",
    "QiniuCdn",
    "QiniuStorage",
    "build_context",
    "BatchUploader",
]
