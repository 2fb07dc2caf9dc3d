"""
Tests for the Qiniu storage and CDN adapters.
"""
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from conftest import make_config
from qiniu_deploy.storage import QiniuCdn, QiniuStorage, build_context, to_storage_response


def info(status_code, exception=None, text_body=None):
    return SimpleNamespace(status_code=status_code, exception=exception, text_body=text_body)


def test_to_storage_response_success():
    response = to_storage_response({'key': 'k', 'hash': 'h'}, info(200))
    assert response.error is None
    assert response.body == {'key': 'k', 'hash': 'h'}
    assert response.status_code == 200


def test_to_storage_response_status_error_is_not_transport_error():
    response = to_storage_response(None, info(614, text_body='{"error":"file exists"}'))
    assert response.error is None
    assert response.body == '{"error":"file exists"}'
    assert response.status_code == 614


def test_to_storage_response_transport_error():
    response = to_storage_response(None, info(-1, exception=ConnectionError('dns')))
    assert response.error == 'dns'
    assert response.status_code == -1


def test_build_context_tokens():
    config = make_config(prefix='site')
    auth = MagicMock()
    auth.upload_token.side_effect = lambda bucket, key=None: f'{bucket}:{key}'

    context = build_context(config, auth)

    assert context.entrypoint_key == 'site/index.html'
    assert context.entrypoint_url == 'http://cdn.example.com/site/index.html'
    assert context.entrypoint_path == Path('dist/index.html')
    assert context.upload_token == 'test-bucket:None'
    assert context.entrypoint_token == 'test-bucket:site/index.html'
    assert context.token_for('site/index.html') == context.entrypoint_token
    assert context.token_for('site/app.js') == context.upload_token


def test_build_context_with_real_auth():
    context = build_context(make_config())
    assert context.upload_token.startswith('test-ak:')
    assert context.upload_token != context.entrypoint_token


@pytest.mark.asyncio
async def test_qiniu_storage_put_file():
    with patch('qiniu_deploy.storage.Region') as region_cls, \
            patch('qiniu_deploy.storage.put_file') as put_file:
        put_file.return_value = ({'key': 'p/app.js'}, info(200))
        storage = QiniuStorage('z1')

        response = await storage.put_file('token', 'p/app.js', Path('dist/app.js'), 'text/javascript')

    region_cls.assert_called_once_with(
        up_host='https://up-z1.qiniup.com', up_host_backup='https://upload-z1.qiniup.com'
    )
    assert storage.zone == 'z1'
    put_file.assert_called_once_with(
        'token', 'p/app.js', 'dist/app.js',
        regions=[region_cls.return_value], mime_type='text/javascript'
    )
    assert response.status_code == 200
    assert response.body == {'key': 'p/app.js'}


@pytest.mark.asyncio
async def test_qiniu_storage_omits_unknown_mime_type():
    with patch('qiniu_deploy.storage.Region'), \
            patch('qiniu_deploy.storage.put_file') as put_file:
        put_file.return_value = (None, info(-1, exception=OSError('unreachable')))
        storage = QiniuStorage()
        response = await storage.put_file('token', 'p/index.html', Path('dist/index.html'))

    put_file.assert_called_once_with(
        'token', 'p/index.html', 'dist/index.html', regions=[storage.region]
    )
    assert response.error == 'unreachable'


@pytest.mark.asyncio
async def test_qiniu_cdn_refresh_urls():
    with patch('qiniu_deploy.storage.CdnManager') as manager_cls:
        manager_cls.return_value.refresh_urls.return_value = ({'code': 200}, info(200))
        cdn = QiniuCdn(MagicMock())
        response = await cdn.refresh_urls(['http://cdn.example.com/index.html'])

    manager_cls.return_value.refresh_urls.assert_called_once_with(['http://cdn.example.com/index.html'])
    assert response.status_code == 200
