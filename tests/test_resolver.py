"""
Tests for remote key and content type resolution.
"""
from pathlib import Path

import pytest

from qiniu_deploy.resolver import guess_mime_type, normalize_prefix, resolve_remote_key


@pytest.mark.parametrize('prefix, expected', [
    ('', 'upqn-prefix/'),
    (None, 'upqn-prefix/'),
    ('site', 'site/'),
    ('site/', 'site/'),
    ('/site', 'site/'),
    ('/site/', 'site/'),
    ('site//', 'site/'),
    ('a/b', 'a/b/'),
])
def test_normalize_prefix(prefix, expected):
    assert normalize_prefix(prefix) == expected


def test_resolve_remote_key_strips_dist_dir():
    assert resolve_remote_key('dist/index.html', '') == 'upqn-prefix/index.html'
    assert resolve_remote_key(Path('dist/assets/app.js'), '/static') == 'static/assets/app.js'


def test_resolve_remote_key_custom_dist_dir():
    assert resolve_remote_key('build/out/index.html', 'x', dist_dir='build/out') == 'x/index.html'
    # only the leading root segment is stripped
    assert resolve_remote_key('dist/dist/a.js', 'x') == 'x/dist/a.js'


@pytest.mark.parametrize('local_path', [
    'dist/index.html', 'dist/a/b/c.js', 'dist/', 'other/file.txt', '/abs/file.txt',
])
@pytest.mark.parametrize('prefix', ['', '/', '//p', 'p', '/p/q/'])
def test_remote_key_never_has_leading_separator(local_path, prefix):
    key = resolve_remote_key(local_path, prefix)
    assert not key.startswith('/')
    assert key.startswith(normalize_prefix(prefix))


def test_guess_mime_type():
    assert guess_mime_type('dist/app.css') == 'text/css'
    assert guess_mime_type('dist/app.js') == 'text/javascript'
    assert guess_mime_type('dist/APP.JS') == 'text/javascript'
    assert guess_mime_type('dist/index.html') is None
    assert guess_mime_type('dist/app.json') is None
    assert guess_mime_type('dist/LICENSE') is None
