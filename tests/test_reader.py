from __future__ import annotations

from pathlib import Path

import pytest

from zipdiff.core.archive.reader import ArchiveReader, EntryFilter
from zipdiff.core.errors import (
    ArchiveOpenError,
    CatalogReadError,
    EntryDecodeError,
    EntryNotFoundError,
    EntryReadError,
)
from zipdiff.services.hashing import HashingService


def test_catalog_maps_names_to_content_digests(make_zip) -> None:
    path = make_zip("a.zip", {"a.txt": "alpha", "dir/b.txt": "beta"})

    catalog = ArchiveReader().catalog(path)

    service = HashingService()
    assert catalog.names() == {"a.txt", "dir/b.txt"}
    assert catalog.digest("a.txt") == service.hash_bytes(b"alpha").hash_hex
    assert catalog.digest("dir/b.txt") == service.hash_bytes(b"beta").hash_hex
    assert catalog.archive_path == str(path)


def test_catalog_skips_junk_entries(make_zip) -> None:
    path = make_zip("a.zip", {
        "a.txt": "alpha",
        "__MACOSX/._a.txt": "resource fork",
        ".DS_Store": "finder",
        "nested/.DS_Store": "finder",
    })

    catalog = ArchiveReader().catalog(path)

    assert catalog.names() == {"a.txt"}


def test_catalog_names_are_case_sensitive(make_zip) -> None:
    path = make_zip("a.zip", {"Readme.txt": "one", "README.txt": "two"})

    assert ArchiveReader().catalog(path).names() == {"Readme.txt", "README.txt"}


def test_catalog_is_read_only(make_zip) -> None:
    catalog = ArchiveReader().catalog(make_zip("a.zip", {"a.txt": "alpha"}))

    with pytest.raises(TypeError):
        catalog.entries["b.txt"] = "0"


def test_catalog_of_missing_archive_raises_open_error(tmp_path: Path) -> None:
    with pytest.raises(ArchiveOpenError):
        ArchiveReader().catalog(tmp_path / "missing.zip")


def test_catalog_of_non_zip_raises_open_error(tmp_path: Path) -> None:
    path = tmp_path / "plain.zip"
    path.write_bytes(b"this is not a zip archive")

    with pytest.raises(ArchiveOpenError) as exc_info:
        ArchiveReader().catalog(path)
    assert exc_info.value.path == str(path)


def test_catalog_with_corrupt_entry_raises_catalog_read_error(make_corrupt_zip) -> None:
    path = make_corrupt_zip("bad.zip", {"ok.txt": "fine"})

    with pytest.raises(CatalogReadError) as exc_info:
        ArchiveReader().catalog(path)
    assert exc_info.value.entry == "broken.txt"


def test_extract_returns_entry_bytes(make_zip) -> None:
    path = make_zip("a.zip", {"a.txt": "alpha", "bin.dat": b"\x00\x01"})
    reader = ArchiveReader()

    assert reader.extract(path, "a.txt") == b"alpha"
    assert reader.extract(path, "bin.dat") == b"\x00\x01"


def test_extract_missing_entry_raises_not_found(make_zip) -> None:
    path = make_zip("a.zip", {"a.txt": "alpha"})

    with pytest.raises(EntryNotFoundError) as exc_info:
        ArchiveReader().extract(path, "A.txt")
    assert exc_info.value.entry == "A.txt"
    assert "not found" in str(exc_info.value)


def test_extract_corrupt_entry_raises_read_error(make_corrupt_zip) -> None:
    path = make_corrupt_zip("bad.zip")

    with pytest.raises(EntryReadError):
        ArchiveReader().extract(path, "broken.txt")


def test_extract_from_missing_archive_is_an_entry_error(tmp_path: Path) -> None:
    with pytest.raises(EntryReadError):
        ArchiveReader().extract(tmp_path / "gone.zip", "a.txt")


def test_read_text_rejects_invalid_utf8(make_zip) -> None:
    path = make_zip("a.zip", {"latin1.txt": "caf\xe9".encode("latin-1")})

    with pytest.raises(EntryDecodeError) as exc_info:
        ArchiveReader().read_text(path, "latin1.txt")
    assert "UTF-8" in str(exc_info.value)


def test_read_text_decodes_utf8(make_zip) -> None:
    path = make_zip("a.zip", {"u.txt": "caf\xe9"})

    assert ArchiveReader().read_text(path, "u.txt") == "caf\xe9"


def test_custom_entry_filter(make_zip) -> None:
    path = make_zip("a.zip", {"keep.txt": "1", "Thumbs.db": "2", ".git/HEAD": "3"})
    reader = ArchiveReader(entry_filter=EntryFilter(junk_prefixes=[".git/"], junk_suffixes=["Thumbs.db"]))

    assert reader.list_names(path) == ["keep.txt"]


def test_entry_filter_defaults() -> None:
    entry_filter = EntryFilter()

    assert entry_filter.is_junk("__MACOSX/a.txt")
    assert entry_filter.is_junk("docs/.DS_Store")
    assert not entry_filter.is_junk("docs/__MACOSX/a.txt")
    assert not entry_filter.is_junk("a.txt")
