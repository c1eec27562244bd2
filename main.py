"""
main.py – Application entry point.

This file is intentionally minimal.  All logic lives in specialised modules:

  config.py    – AppConfig         : constants, config I/O, logging
  passwords.py – evaluate()        : password strength estimate, generator
  flow.py      – FlowState         : UI state and its transitions
  archive.py   – ArchiveWriter     : encrypted ZIP creation (pyzipper)
  storage.py   – FileStorage       : reading the chosen file, exporting
  dialogs.py   – ZipExporterDialog : password / confirm / save dialog
  ui.py        – AppWindow         : main Tkinter window

To run the application:
    python main.py [FILE]

Passing FILE skips the file picker and opens the password dialog directly.
"""

import argparse

from ui import AppWindow


def main() -> None:
    """Create the application window and start the event loop."""
    parser = argparse.ArgumentParser(
        prog="tozip",
        description="Save a single file as a password-protected ZIP archive.",
    )
    parser.add_argument("file", nargs="?", help="file to zip (opens the password dialog directly)")
    args = parser.parse_args()

    app = AppWindow()
    app.run(args.file)


if __name__ == "__main__":
    main()
