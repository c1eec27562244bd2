import io
import tempfile

import pytest
import pyzipper

import archive
from archive import ArchiveError, ArchiveWriter


@pytest.fixture
def writer(app_config):
    return ArchiveWriter(app_config)


@pytest.fixture
def scratch_tmp(tmp_path, monkeypatch):
    """Route tempfile into a directory the test can inspect."""
    scratch = tmp_path / "scratch"
    scratch.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(scratch))
    return scratch


def _open(data: bytes, password: str) -> pyzipper.AESZipFile:
    zf = pyzipper.AESZipFile(io.BytesIO(data))
    zf.setpassword(password.encode("utf-8"))
    return zf


def test_archive_holds_the_single_file_under_its_name(writer):
    payload = b"quarterly numbers\n" * 100
    data = writer.create_encrypted_zip(payload, "report.txt", "s3cret!")

    with _open(data, "s3cret!") as zf:
        assert zf.namelist() == ["report.txt"]
        assert zf.getinfo("report.txt").compress_size < len(payload)
        assert zf.read("report.txt") == payload


def test_entry_is_aes_encrypted(writer):
    data = writer.create_encrypted_zip(b"top secret", "notes.txt", "s3cret!")

    with pyzipper.AESZipFile(io.BytesIO(data)) as zf:
        info = zf.getinfo("notes.txt")
        assert info.flag_bits & 0x1
        with pytest.raises(Exception):
            zf.read("notes.txt")
    assert b"top secret" not in data


def test_wrong_password_cannot_read(writer):
    data = writer.create_encrypted_zip(b"top secret", "notes.txt", "right")
    with _open(data, "wrong") as zf:
        with pytest.raises(Exception):
            zf.read("notes.txt")


def test_only_base_name_is_used(writer):
    data = writer.create_encrypted_zip(b"x", "/home/user/docs/photo.jpg", "pw")
    with _open(data, "pw") as zf:
        assert zf.namelist() == ["photo.jpg"]


def test_unicode_password_and_name(writer):
    data = writer.create_encrypted_zip(b"bonjour", "résumé.txt", "pässwörd")
    with _open(data, "pässwörd") as zf:
        assert zf.read("résumé.txt") == b"bonjour"


def test_empty_file_is_archived(writer):
    data = writer.create_encrypted_zip(b"", "empty.txt", "pw")
    with _open(data, "pw") as zf:
        assert zf.read("empty.txt") == b""


def test_stored_compression_setting(app_config):
    app_config.set("compression", "stored")
    app_config.set("aes_key_bits", 128)
    data = ArchiveWriter(app_config).create_encrypted_zip(b"abc" * 50, "a.txt", "pw")
    with _open(data, "pw") as zf:
        info = zf.getinfo("a.txt")
        assert info.compress_size >= info.file_size
        assert zf.read("a.txt") == b"abc" * 50


def test_empty_password_is_rejected(writer):
    with pytest.raises(ArchiveError):
        writer.create_encrypted_zip(b"data", "a.txt", "")


@pytest.mark.parametrize("name", ["", "some/dir/"])
def test_missing_file_name_is_rejected(writer, name):
    with pytest.raises(ArchiveError):
        writer.create_encrypted_zip(b"data", name, "pw")


def test_temporary_files_removed_after_success(writer, scratch_tmp):
    writer.create_encrypted_zip(b"data", "a.txt", "pw")
    assert list(scratch_tmp.iterdir()) == []


def test_library_failure_becomes_archive_error_and_cleans_up(writer, scratch_tmp, monkeypatch):
    def broken(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(archive.pyzipper, "AESZipFile", broken)

    with pytest.raises(ArchiveError, match="Error creating encrypted zip.") as excinfo:
        writer.create_encrypted_zip(b"data", "a.txt", "pw")

    assert isinstance(excinfo.value.__cause__, OSError)
    assert list(scratch_tmp.iterdir()) == []
