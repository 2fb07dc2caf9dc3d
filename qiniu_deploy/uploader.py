"""
Module for uploading a file set in bounded-concurrency batches.
"""
import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .classifier import classify_exception, classify_response, excluded, is_included
from .errors import NetworkUnreachable, ObjectRejected, UploadFailed
from .models import Outcome, UploadResult, UploadTask
from .resolver import guess_mime_type, resolve_remote_key
from .storage import DeployContext, ObjectStorage

logger = logging.getLogger(__name__)

Batch = Tuple[Path, ...]


def partition(files: Sequence[Path], size: int) -> List[Batch]:
    """Split files into contiguous batches of at most ``size`` entries.

    Args:
        files: Ordered file set
        size: Batch size, must be positive

    Returns:
        List of batches preserving file order
    """
    if size < 1:
        raise ValueError("batch size must be a positive integer")
    return [tuple(files[i:i + size]) for i in range(0, len(files), size)]


def failure_for(result: UploadResult) -> UploadFailed:
    if result.outcome is Outcome.NETWORK_ERROR:
        return NetworkUnreachable(result)
    return ObjectRejected(result)


class BatchUploader:
    """Uploads batches sequentially and the files of a batch concurrently."""

    def __init__(self, storage: ObjectStorage, context: DeployContext):
        """Initialize the batch uploader.

        Args:
            storage: Object storage collaborator
            context: Run context holding config and tokens
        """
        self.storage = storage
        self.context = context
        self.verbose = context.config.log

    def notice(self, message: str) -> None:
        if self.verbose:
            logger.info(message)

    def make_task(self, local_path: Path) -> UploadTask:
        config = self.context.config
        return UploadTask(
            local_path=local_path,
            remote_key=resolve_remote_key(local_path, config.prefix, config.dist_dir),
            mime_type=guess_mime_type(local_path)
        )

    async def upload_file(self, local_path: Path) -> UploadResult:
        """Upload one file, or skip it when it fails the inclusion pattern."""
        if not is_included(local_path, self.context.include):
            self.notice(f"Excluded {local_path}")
            return excluded(local_path)

        task = self.make_task(local_path)
        try:
            response = await self.storage.put_file(
                self.context.token_for(task.remote_key),
                task.remote_key,
                task.local_path,
                task.mime_type
            )
        except Exception as e:
            result = classify_exception(task.local_path, task.remote_key, e)
        else:
            result = classify_response(task.local_path, task.remote_key, response)

        if result.outcome is Outcome.SUCCEEDED:
            self.notice(f"Uploaded {task.remote_key}")
        elif result.outcome is Outcome.ALREADY_EXISTS:
            self.notice(f"Already exists {task.remote_key}")
            if task.remote_key.endswith(".html") and task.remote_key != self.context.entrypoint_key:
                logger.warning(
                    f"{task.remote_key} already exists and was not overwritten, it may be stale"
                )
        else:
            logger.error(f"Failed to upload {task.remote_key}: {result.reason}")
        return result

    async def upload_batch(self, batch: Batch) -> List[UploadResult]:
        """Upload every file of a batch concurrently.

        Results are consumed as they settle. The first failure to settle is
        the one raised, after the remaining uploads of the batch have run
        to completion.

        Args:
            batch: Files to upload

        Returns:
            Results of the batch, in completion order

        Raises:
            UploadFailed: If any file of the batch failed
        """
        results: List[UploadResult] = []
        first_failure: Optional[UploadResult] = None

        for settled in asyncio.as_completed([self.upload_file(path) for path in batch]):
            result = await settled
            results.append(result)
            if result.failed and first_failure is None:
                first_failure = result

        if first_failure is not None:
            raise failure_for(first_failure)
        return results

    async def upload_all(self, files: Sequence[Path]) -> List[UploadResult]:
        """Upload the whole file set batch by batch.

        Args:
            files: Ordered file set

        Returns:
            Results of every file

        Raises:
            UploadFailed: On the first failing batch; later batches are
                never started
        """
        batches = partition(files, self.context.config.concurrency)
        results: List[UploadResult] = []

        for number, batch in enumerate(batches, start=1):
            batch_results = await self.upload_batch(batch)
            results.extend(batch_results)
            uploaded = sum(1 for r in batch_results if r.uploaded)
            self.notice(
                f"Batch {number}/{len(batches)}: uploaded {uploaded} of {len(batch)} files"
            )

        return results
