"""
Tests for the file scanner.
"""
from pathlib import Path

from qiniu_deploy.scanner import FileScanner


def test_scan_folder_is_recursive_and_sorted(dist_dir):
    (dist_dir / 'assets').mkdir()
    (dist_dir / 'assets' / 'logo.svg').write_text('<svg/>')

    files = FileScanner().scan_folder('dist')

    assert files == (
        Path('dist/app.css'),
        Path('dist/app.js'),
        Path('dist/assets/logo.svg'),
        Path('dist/index.html'),
    )


def test_scan_missing_folder(tmp_path):
    assert FileScanner().scan_folder(tmp_path / 'missing') == ()
