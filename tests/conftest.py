"""
Test fixtures for the deployment service.
"""
import asyncio
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from qiniu_deploy.models import DeployConfig, StorageResponse
from qiniu_deploy.storage import build_context


class FakeStorage:
    """In-memory object storage answering with canned status codes."""

    def __init__(self, statuses: Optional[Dict[str, int]] = None, default: int = 200,
                 delays: Optional[Dict[str, float]] = None,
                 errors: Optional[Dict[str, str]] = None):
        self.statuses = statuses or {}
        self.default = default
        self.delays = delays or {}
        self.errors = errors or {}
        self.calls: List[dict] = []
        self.completed: List[str] = []

    async def put_file(self, token, key, local_path, mime_type=None):
        self.calls.append({
            'token': token,
            'key': key,
            'local_path': local_path,
            'mime_type': mime_type
        })
        await asyncio.sleep(self.delays.get(key, 0))
        self.completed.append(key)
        status = self.statuses.get(key, self.default)
        return StorageResponse(
            error=self.errors.get(key),
            body={'key': key} if status in (200, 614) else {'error': f'code {status}'},
            status_code=status
        )


class FakeCdn:
    """Records refresh requests."""

    def __init__(self, status: int = 200, error: Optional[str] = None):
        self.status = status
        self.error = error
        self.calls: List[List[str]] = []

    async def refresh_urls(self, urls):
        self.calls.append(list(urls))
        return StorageResponse(error=self.error, body={'code': self.status}, status_code=self.status)


def make_config(**overrides) -> DeployConfig:
    values = {
        'access_key': 'test-ak',
        'secret_key': 'test-sk',
        'bucket': 'test-bucket',
        'hostname': 'cdn.example.com',
    }
    values.update(overrides)
    return DeployConfig(**values)


@pytest.fixture
def dist_dir(tmp_path, monkeypatch):
    """Create a build output directory and run from its parent."""
    monkeypatch.chdir(tmp_path)
    dist = Path('dist')
    dist.mkdir()
    (dist / 'index.html').write_text('<html></html>')
    (dist / 'app.js').write_text('console.log(1)')
    (dist / 'app.css').write_text('body {}')
    return dist


@pytest.fixture
def config(dist_dir):
    return make_config()


@pytest.fixture
def context(config):
    return build_context(config)


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def cdn():
    return FakeCdn()
