from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Callable, Mapping

import pytest


ZipFactory = Callable[..., Path]


@pytest.fixture
def make_zip(tmp_path: Path) -> ZipFactory:
    """Build a ZIP file from a name -> content mapping."""
    def factory(
        name: str,
        entries: Mapping[str, bytes | str],
        compression: int = zipfile.ZIP_DEFLATED
    ) -> Path:
        path = tmp_path / name
        with zipfile.ZipFile(path, 'w', compression) as archive:
            for entry_name, content in entries.items():
                if isinstance(content, str):
                    content = content.encode('utf-8')
                archive.writestr(entry_name, content)
        return path

    return factory


@pytest.fixture
def make_corrupt_zip(tmp_path: Path) -> ZipFactory:
    """Build a ZIP whose entry ``broken.txt`` fails its CRC check on read."""
    def factory(name: str, extra: Mapping[str, str] | None = None) -> Path:
        path = tmp_path / name
        payload = b'A' * 64
        with zipfile.ZipFile(path, 'w', zipfile.ZIP_STORED) as archive:
            for entry_name, content in (extra or {}).items():
                archive.writestr(entry_name, content)
            archive.writestr('broken.txt', payload)
        data = path.read_bytes()
        assert data.count(payload) == 1
        path.write_bytes(data.replace(payload, b'B' * 64))
        return path

    return factory


@pytest.fixture
def qapp():
    from PyQt6.QtCore import QCoreApplication

    app = QCoreApplication.instance() or QCoreApplication([])
    yield app
