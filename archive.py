"""
archive.py – Password-protected ZIP creation.

This module contains ArchiveWriter, the single place responsible for turning
the bytes of the selected file into an encrypted ZIP archive:

  - The file bytes are written to a temporary file carrying the original
    base name, so that name is what the archive entry is called.
  - pyzipper builds a WinZip-AES encrypted archive next to it in the same
    temporary directory.
  - The archive is read back into memory and returned to the caller.

The temporary directory (input file and archive) is removed on every exit
path, success or failure.  Key size and compression come from AppConfig.

All failures surface as ArchiveError so the UI can show one short message and
let the user retry.
"""

import logging
import os
import tempfile
import uuid

import pyzipper

logger = logging.getLogger("ToZip")

_COMPRESSION = {
    "deflated": pyzipper.ZIP_DEFLATED,
    "stored":   pyzipper.ZIP_STORED,
}


class ArchiveError(RuntimeError):
    """Raised by ArchiveWriter when the encrypted archive cannot be created."""


class ArchiveWriter:
    """
    Creates password-protected ZIP archives holding a single file.

    Parameters
    ----------
    config : AppConfig
        Provides the 'aes_key_bits' and 'compression' settings.
    """

    def __init__(self, config) -> None:
        self.config = config

    def create_encrypted_zip(self, file_data: bytes, file_name: str, password: str) -> bytes:
        """
        Return the bytes of a ZIP archive containing *file_data* stored as
        *file_name* and encrypted with *password*.

        Only the base name of *file_name* is used for the archive entry.

        Raises
        ------
        ArchiveError
            If the password or file name is empty, or if writing or reading
            the archive fails.
        """
        if not password:
            raise ArchiveError("A password is required to create an encrypted zip.")
        entry_name = os.path.basename(file_name or "")
        if not entry_name:
            raise ArchiveError("No file name given for the zip entry.")

        key_bits = self.config.get("aes_key_bits", 256)
        compression = _COMPRESSION.get(self.config.get("compression", "deflated"), pyzipper.ZIP_DEFLATED)

        try:
            with tempfile.TemporaryDirectory(prefix="tozip_") as tmpdir:
                tmp_file = os.path.join(tmpdir, entry_name)
                tmp_zip = os.path.join(tmpdir, f"{entry_name}_{uuid.uuid4()}.zip")

                with open(tmp_file, "wb") as fh:
                    fh.write(file_data)

                with pyzipper.AESZipFile(tmp_zip, "w", compression=compression) as zout:
                    zout.setpassword(password.encode("utf-8"))
                    zout.setencryption(pyzipper.WZ_AES, nbits=key_bits)
                    zout.write(tmp_file, entry_name)

                with open(tmp_zip, "rb") as fh:
                    archive = fh.read()

        except Exception as exc:
            logger.exception("Failed to create encrypted zip for %s", entry_name)
            raise ArchiveError("Error creating encrypted zip.") from exc

        logger.info(
            "Created encrypted zip for %s (%d bytes, AES-%d)", entry_name, len(archive), key_bits
        )
        return archive
