# tests/core/test_loader.py
import os

import pytest

from loader.model import LoaderSettings
from loader.services.document_discovery_service import DocumentDiscoveryService
from loader.services.document_io_service import DocumentIOService


def test_discovery_order_is_deterministic(tmp_path):
    """Test of bestanden per map lexicaal gesorteerd en recursief worden gevonden."""
    docs = tmp_path / "docs"
    (docs / "b-dir").mkdir(parents=True)
    (docs / "c.md").write_text("c")
    (docs / "a.md").write_text("a")
    (docs / "b-dir" / "x.md").write_text("x")
    (docs / "notes.txt").write_text("skip")
    blog = tmp_path / "blog"
    blog.mkdir()
    (blog / "post.md").write_text("p")

    found = DocumentDiscoveryService(".md").find_documents([docs, blog])
    assert [p.relative_to(tmp_path).as_posix() for p in found] == [
        "docs/a.md",
        "docs/b-dir/x.md",
        "docs/c.md",
        "blog/post.md",
    ]


def test_missing_roots_are_skipped(tmp_path):
    """Test of ontbrekende of ongeldige roots stil worden overgeslagen."""
    not_a_dir = tmp_path / "file.md"
    not_a_dir.write_text("x")
    found = DocumentDiscoveryService().find_documents([tmp_path / "missing", not_a_dir])
    assert found == []


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
def test_symlinked_directory_loop_is_not_followed(tmp_path):
    """Test of een symlink terug naar de docs-map geen eindeloze lus of dubbele bestanden geeft."""
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "a.md").write_text("a")
    try:
        os.symlink(docs, docs / "loop", target_is_directory=True)
    except OSError:
        pytest.skip("cannot create symlinks here")

    found = DocumentDiscoveryService().find_documents([docs])
    assert found == [docs / "a.md"]


def test_io_roundtrip_keeps_bytes(tmp_path):
    """Test of lezen en schrijven geen regeleinden vertaalt."""
    path = tmp_path / "a.md"
    path.write_bytes(b"one\r\ntwo\n")
    text = DocumentIOService.read(path)
    assert text == "one\r\ntwo\n"

    backup = DocumentIOService.write_backup(path, text)
    assert backup.name == "a.md.bak"
    assert backup.read_bytes() == b"one\r\ntwo\n"

    DocumentIOService.write(path, "new\n")
    assert path.read_bytes() == b"new\n"


def test_backup_overwrites_old_backup(tmp_path):
    """Test of een oude backup stil wordt overschreven."""
    path = tmp_path / "a.md"
    (tmp_path / "a.md.bak").write_text("old")
    DocumentIOService.write_backup(path, "fresh", ".bak")
    assert (tmp_path / "a.md.bak").read_text() == "fresh"


def test_loader_settings_extension():
    """Test of de extensie altijd met een punt begint."""
    assert LoaderSettings(extension="md").extension == ".md"
