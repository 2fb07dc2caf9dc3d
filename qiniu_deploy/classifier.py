"""
Classification of storage-layer responses into upload outcomes.
"""
import re
from enum import IntEnum
from pathlib import Path, PurePath
from typing import Optional, Union

from .models import Outcome, StorageResponse, UploadResult

NETWORK_ERROR_REASON = "DNS resolution failed, bucket endpoint unreachable"


class StatusCode(IntEnum):
    """Status codes returned by Kodo uploads."""
    SUCCESS = 200
    # Resource does not exist or has been deleted
    NOT_FOUND = 612
    # Resource already exists
    EXISTS = 614
    # Bucket count limit reached
    EXCEEDED_LIMIT = 630
    # Bucket does not exist
    NO_SUCH_BUCKET = 631
    # Usually a DNS failure; the bucket endpoint cannot be reached
    NETWORK_ERROR = -1

    @classmethod
    def lookup(cls, code: int) -> Optional["StatusCode"]:
        try:
            return cls(code)
        except ValueError:
            return None


def is_included(local_path: Union[str, PurePath], pattern: Union[str, re.Pattern]) -> bool:
    """Check whether a file passes the inclusion pattern.

    Args:
        local_path: Local file path
        pattern: Regular expression searched against the posix path

    Returns:
        True if the file should be uploaded
    """
    if isinstance(pattern, str):
        pattern = re.compile(pattern)
    return pattern.search(PurePath(local_path).as_posix()) is not None


def excluded(local_path: Path) -> UploadResult:
    return UploadResult(file_path=local_path, outcome=Outcome.EXCLUDED)


def classify_response(local_path: Path, remote_key: str,
                      response: StorageResponse) -> UploadResult:
    """Map a storage response to an upload result.

    A transport error short-circuits the status code. Every other reply is
    matched against the known status codes; codes outside the table are
    rejected with the raw body attached.

    Args:
        local_path: Uploaded file
        remote_key: Key the file was written to
        response: Reply from the storage layer

    Returns:
        UploadResult with exactly one outcome
    """
    def result(outcome: Outcome, reason: Optional[str] = None,
               payload=None) -> UploadResult:
        return UploadResult(
            file_path=local_path,
            outcome=outcome,
            remote_key=remote_key,
            payload=payload,
            reason=reason,
            status_code=response.status_code
        )

    if response.error:
        return result(Outcome.NETWORK_ERROR, reason=f"Transport error: {response.error}")

    status = StatusCode.lookup(response.status_code)
    if status is StatusCode.SUCCESS:
        return result(Outcome.SUCCEEDED, payload=response.body)
    if status is StatusCode.EXISTS:
        return result(Outcome.ALREADY_EXISTS, payload=response.body)
    if status is StatusCode.NETWORK_ERROR:
        return result(Outcome.NETWORK_ERROR, reason=NETWORK_ERROR_REASON)
    # NOT_FOUND, EXCEEDED_LIMIT, NO_SUCH_BUCKET and codes outside the table
    return result(
        Outcome.REJECTED,
        reason=f"Rejected with status {response.status_code}: {response.body}"
    )


def classify_exception(local_path: Path, remote_key: str, error: Exception) -> UploadResult:
    """Map an exception raised by the storage layer to a failed result.

    Connection and timeout errors mean the endpoint could not be reached;
    anything else, such as an unreadable local file, rejects the object.
    """
    if isinstance(error, (ConnectionError, TimeoutError)):
        outcome = Outcome.NETWORK_ERROR
    else:
        outcome = Outcome.REJECTED
    return UploadResult(
        file_path=local_path,
        outcome=outcome,
        remote_key=remote_key,
        reason=f"{type(error).__name__}: {error}"
    )
