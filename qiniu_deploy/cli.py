"""
Command-line interface for the deployment service.
"""
import argparse
import asyncio
import json
import logging
import os
import sys
from dataclasses import fields
from pathlib import Path
from typing import Optional

from .coordinator import DeploymentCoordinator
from .errors import RefreshFailed, UploadFailed
from .models import DeployConfig, ZONES
from .storage import create_backends

logger = logging.getLogger(__name__)

EXIT_UPLOAD_FAILED = 1
EXIT_REFRESH_FAILED = 2
EXIT_CONFIG_ERROR = 3


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application.

    Args:
        verbose: Whether to enable debug logging
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def load_config(config_file: Optional[Path] = None) -> dict:
    """Load configuration from a JSON file.

    Args:
        config_file: Path to config file

    Returns:
        Dictionary of configuration values
    """
    if not config_file:
        return {}

    with open(config_file) as f:
        return json.load(f)


def build_config(args: argparse.Namespace) -> DeployConfig:
    """Merge the config file, environment and command line.

    Command line flags win over the config file; credentials fall back to
    ``QINIU_ACCESS_KEY`` and ``QINIU_SECRET_KEY``.

    Args:
        args: Command line arguments

    Returns:
        Validated DeployConfig
    """
    values = load_config(args.config)
    values.setdefault('access_key', os.environ.get('QINIU_ACCESS_KEY', ''))
    values.setdefault('secret_key', os.environ.get('QINIU_SECRET_KEY', ''))

    for f in fields(DeployConfig):
        value = getattr(args, f.name, None)
        if value is not None:
            values[f.name] = value

    unknown = set(values) - {f.name for f in fields(DeployConfig)}
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")
    for required in ('bucket', 'hostname'):
        values.setdefault(required, '')

    config = DeployConfig(**values)
    if not Path(config.dist_dir).is_dir():
        raise ValueError(f"Distribution directory {config.dist_dir} does not exist")
    return config


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Upload a build directory to Qiniu and refresh its entrypoint on the CDN"
    )
    parser.add_argument('-v', '--verbose', action='store_true',
                        help="Enable verbose logging")
    parser.add_argument('-c', '--config', type=Path,
                        help="Path to JSON config file")
    parser.add_argument('-b', '--bucket', type=str,
                        help="Destination bucket")
    parser.add_argument('--hostname', type=str,
                        help="CDN hostname serving the bucket")
    parser.add_argument('--access-key', dest='access_key', type=str,
                        help="Access key (default: $QINIU_ACCESS_KEY)")
    parser.add_argument('--secret-key', dest='secret_key', type=str,
                        help="Secret key (default: $QINIU_SECRET_KEY)")
    parser.add_argument('-i', '--include', type=str,
                        help="Regular expression of files to upload")
    parser.add_argument('-z', '--zone', type=str, choices=ZONES,
                        help="Storage region code")
    parser.add_argument('-n', '--concurrency', type=int,
                        help="Files uploaded concurrently per batch")
    parser.add_argument('-p', '--prefix', type=str,
                        help="Remote key prefix")
    parser.add_argument('-d', '--dist-dir', dest='dist_dir', type=str,
                        help="Build output directory")
    parser.add_argument('-e', '--entrypoint', type=str,
                        help="Entrypoint document, relative to the build directory")
    parser.add_argument('-q', '--quiet', dest='log', action='store_false', default=None,
                        help="Do not log per-file outcomes")
    return parser


async def run(config: DeployConfig) -> None:
    context, storage, cdn = create_backends(config)
    coordinator = DeploymentCoordinator(context, storage, cdn)
    await coordinator.deploy()


def main(argv: Optional[list] = None) -> None:
    """Main entry point for the CLI."""
    args = create_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = build_config(args)
    except (OSError, ValueError, TypeError) as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(EXIT_CONFIG_ERROR)

    try:
        asyncio.run(run(config))
    except UploadFailed as e:
        logger.error(f"Deployment failed, nothing was refreshed: {e}")
        sys.exit(EXIT_UPLOAD_FAILED)
    except RefreshFailed as e:
        logger.error(f"Files uploaded but the CDN cache was not refreshed: {e}")
        sys.exit(EXIT_REFRESH_FAILED)


if __name__ == '__main__':
    main()
