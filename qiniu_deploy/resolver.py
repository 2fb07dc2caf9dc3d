"""
Mapping of local build files to remote object keys and content types.
"""
from pathlib import PurePath
from typing import Dict, Optional, Union

from .models import DEFAULT_DIST_DIR, DEFAULT_PREFIX

PathLike = Union[str, PurePath]

# Anything missing here is left to the storage layer's own detection.
MIME_TYPES: Dict[str, str] = {
    ".css": "text/css",
    ".js": "text/javascript",
}


def normalize_prefix(prefix: Optional[str]) -> str:
    """Normalize a key prefix to ``segment/`` form without a leading slash.

    Args:
        prefix: Configured prefix, empty or None for the default

    Returns:
        Prefix ending with exactly one separator
    """
    normalized = (prefix or DEFAULT_PREFIX).rstrip("/") + "/"
    return normalized.lstrip("/")


def strip_dist_dir(local_path: PathLike, dist_dir: PathLike = DEFAULT_DIST_DIR) -> str:
    """Return the posix path of a file relative to the distribution directory."""
    path = PurePath(local_path).as_posix()
    root = PurePath(dist_dir).as_posix().rstrip("/") + "/"
    if path.startswith(root):
        path = path[len(root):]
    return path.lstrip("/")


def resolve_remote_key(local_path: PathLike, prefix: Optional[str],
                       dist_dir: PathLike = DEFAULT_DIST_DIR) -> str:
    """Map a local file path to its remote object key.

    Args:
        local_path: File path rooted at the distribution directory
        prefix: Key prefix
        dist_dir: Distribution directory root

    Returns:
        Remote key such as ``upqn-prefix/assets/app.js``
    """
    return normalize_prefix(prefix) + strip_dist_dir(local_path, dist_dir)


def guess_mime_type(local_path: PathLike) -> Optional[str]:
    return MIME_TYPES.get(PurePath(local_path).suffix.lower())
