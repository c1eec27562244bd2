"""
storage.py – Reading the selected file and exporting the finished archive.

This module contains FileStorage, which owns all file I/O that is not
archive creation itself:

  - read_selected_file() loads the file the user picked (or passed on the
    command line) into memory.
  - suggested_zip_name() builds the default name offered in the save dialog.
  - export_archive() writes the archive bytes to the chosen destination
    atomically, so a failed export never leaves a truncated .zip behind.

Failures are reported through FileImportError and ExportError so that the UI
layer can show a short message and let the user retry the failed step.
"""

import logging
import os
import stat
import tempfile
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

logger = logging.getLogger("ToZip")

# Matches the yyyy-MM-dd_HH-mm-ss stamp used in suggested archive names.
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


class FileImportError(OSError):
    """
    Raised by read_selected_file() when the chosen file cannot be loaded.

    Attributes
    ----------
    path : str or None
        The path that could not be read.
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path: Optional[str] = path


class ExportError(OSError):
    """Raised by export_archive() when the archive cannot be written."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path: Optional[str] = path


@dataclass(frozen=True)
class SelectedFile:
    name: str
    data: bytes
    path: str = ""



class FileStorage:
    """
    Reads the selected file and writes the finished archive.

    Parameters
    ----------
    config : AppConfig
        Provides the 'timestamp_in_filename' setting.
    """

    def __init__(self, config) -> None:
        self.config = config

    # ------------------------------------------------------------------
    # File selection
    # ------------------------------------------------------------------

    def read_selected_file(self, path: str) -> SelectedFile:
        """
        Read the whole of *path* into memory.

        Raises
        ------
        FileImportError
            If *path* is empty, does not exist, is a directory, or cannot be
            read (permission denied, I/O error).
        """
        if not path:
            raise FileImportError("No file was selected.")
        if not os.path.exists(path):
            raise FileImportError(f"File not found:\n{path}", path=path)
        if os.path.isdir(path):
            raise FileImportError(f"Folders cannot be zipped, please choose a file:\n{path}", path=path)

        try:
            with open(path, "rb") as fh:
                data = fh.read()
        except PermissionError as exc:
            logger.warning("Permission denied reading %s", path)
            raise FileImportError(f"Permission denied:\n{path}", path=path) from exc
        except OSError as exc:
            logger.exception("Failed to read selected file %s", path)
            raise FileImportError(f"Could not read the file:\n{path}", path=path) from exc

        logger.info("Selected %s (%d bytes)", path, len(data))
        return SelectedFile(name=os.path.basename(path), data=data, path=os.path.abspath(path))

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def suggested_zip_name(self, file_name: str, now: Optional[datetime] = None) -> str:
        """
        Return the default archive name for *file_name*: its name without the
        last extension plus '.zip', e.g. 'report.pdf' → 'report.zip'.

        When 'timestamp_in_filename' is enabled the current (or *now*) local
        time is appended: 'report_2026-02-22_14-05-09.zip'.
        """
        stem = os.path.splitext(os.path.basename(file_name))[0] or "archive"
        if self.config.get("timestamp_in_filename", False):
            stem = f"{stem}_{(now or datetime.now()).strftime(TIMESTAMP_FORMAT)}"
        return f"{stem}.zip"

    def export_archive(self, data: bytes, dest_path: str) -> None:
        """
        Write *data* to *dest_path*, replacing any existing file.

        The bytes go to a temporary file in the destination folder first and
        are moved into place with os.replace(), so the destination either
        holds the complete archive or is left untouched.

        Raises
        ------
        ExportError
            If there is nothing to export or the file cannot be written.
        """
        if not data:
            raise ExportError("There is no archive to export.", path=dest_path)
        if not dest_path:
            raise ExportError("No destination was chosen.")

        dest_dir = os.path.dirname(os.path.abspath(dest_path))
        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                dir=dest_dir, prefix=".tozip_", suffix=".tmp", delete=False
            ) as tmp:
                tmp_path = tmp.name
                tmp.write(data)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.chmod(tmp_path, self._export_mode(dest_path))
            os.replace(tmp_path, dest_path)
        except OSError as exc:
            logger.exception("Failed to export archive to %s", dest_path)
            if tmp_path:
                self._silent_remove(tmp_path)
            raise ExportError("Could not export the file. Please try again.", path=dest_path) from exc

        self.config.set("last_save_dir", dest_dir)
        logger.info("Exported archive to %s", dest_path)

    # ------------------------------------------------------------------
    # Utilities
    # ------------------------------------------------------------------

    @staticmethod
    def _export_mode(dest_path: str) -> int:
        """
        Permission bits for the exported file: those of the file being
        replaced, or the default for a new file under the current umask.
        """
        try:
            return stat.S_IMODE(os.stat(dest_path).st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    @staticmethod
    def _silent_remove(path: str) -> None:
        """
        Remove *path* without raising an exception if the file does not
        exist or the deletion fails.
        """
        try:
            if os.path.exists(path):
                os.remove(path)
        except OSError:
            logger.debug("Could not remove %s", path)
