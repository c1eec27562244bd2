"""
ui.py – Main application window.

This module contains AppWindow, which is the top-level class that owns
the Tkinter root window and wires all subsystems together.

Responsibilities:
  - Create AppConfig, ArchiveWriter and FileStorage in the correct
    dependency order.
  - Create the Tk root window and apply visual styling.
  - Build the widget hierarchy (header, file picker, status line, settings).
  - Hold the current FlowState and open the password dialog
    (ZipExporterDialog) once a file has been read successfully.

Widget hierarchy
----------------
root (Tk)
 └─ content (Frame)
     ├─ row 0: header_frame  (title · subtitle · About button)
     ├─ row 1: ttk.Separator
     ├─ row 2: picker_frame  (prompt · [Browse for File] · hint)
     ├─ row 3: status / error label
     └─ row 4: options_frame (archive settings)
"""

import logging
import os
import sys
from tkinter import Checkbutton, Frame, IntVar, StringVar, Tk, filedialog, ttk
from typing import Optional

import flow
from archive import ArchiveWriter
from config import (
    ACCENT, ACCENT_HOVER, AES_KEY_BITS, APP_FONT, APP_VERSION, BG, BUTTON_FONT,
    ERROR_FG, HEADER_FONT, SMALL_FONT, AppConfig,
)
from dialogs import ZipExporterDialog
from storage import FileImportError, FileStorage

logger = logging.getLogger("ToZip")


class AppWindow:
    """
    The main application window and entry point for all UI logic.

    Instantiation:
      1. Creates all subsystem objects (AppConfig → ArchiveWriter,
         FileStorage).
      2. Creates the Tk root window and applies visual styling.
      3. Builds the complete widget hierarchy.

    Call run() to enter the Tkinter event loop, or open_path() to start the
    flow with a file given on the command line.
    """

    def __init__(self) -> None:
        # ----------------------------------------------------------------
        # 1. Create subsystems in dependency order.
        # ----------------------------------------------------------------
        self.config  = AppConfig()
        self.archive = ArchiveWriter(self.config)
        self.storage = FileStorage(self.config)
        self.state: flow.FlowState = flow.reset()

        # ----------------------------------------------------------------
        # 2. Create the Tk root window.
        # ----------------------------------------------------------------
        self.root = Tk()
        self.root.title("ToZip")
        self.root.geometry("620x420")
        self.root.config(padx=6, pady=6)
        self.root.rowconfigure(0, weight=1)
        self.root.columnconfigure(0, weight=1)

        self._setup_styles()

        # ----------------------------------------------------------------
        # 3. Internal widget references assigned during UI construction.
        # ----------------------------------------------------------------
        self.status_label:       Optional[ttk.Label] = None
        self._status_var:        StringVar           = StringVar(value="")
        self._timestamp_var:     Optional[IntVar]    = None
        self._auto_copy_var:     Optional[IntVar]    = None
        self._compress_var:      Optional[IntVar]    = None
        self._key_bits_var:      Optional[StringVar] = None

        # ----------------------------------------------------------------
        # 4. Build the complete UI.
        # ----------------------------------------------------------------
        self.content = Frame(self.root, bg=BG)
        self.content.grid(row=0, column=0, sticky="nsew")
        self.content.columnconfigure(0, weight=1)

        self._build_header()
        self._build_picker()
        self._build_options_frame()

        self.root.bind("<Control-o>", lambda _: self._browse())

        # Handle the window close button.
        self.root.protocol("WM_DELETE_WINDOW", self._on_closing)

    # ------------------------------------------------------------------
    # Visual theme and ttk styles
    # ------------------------------------------------------------------

    def _setup_styles(self) -> None:
        """
        Apply the 'clam' ttk theme and configure custom named styles.

        Styles defined:
          TFrame, TLabelframe, TLabelframe.Label – background colour.
          App.TLabel      – standard label font.
          Header.TLabel   – larger bold label used in the header.
          Small.TLabel    – smaller grey label (secondary information).
          App.TButton     – standard button with hover/press states.
          Primary.TButton – filled blue button (Browse / Save).
        """
        style = ttk.Style()
        try:
            style.theme_use("clam")
        except Exception:
            logger.debug("'clam' theme unavailable; using default")

        style.configure("TFrame",            background=BG)
        style.configure("TLabelframe",       background=BG)
        style.configure("TLabelframe.Label", background=BG,
                        font=("Segoe UI", 9, "bold"), foreground="#555555")

        style.configure("App.TLabel",    font=APP_FONT,    background=BG, foreground="#222222")
        style.configure("Header.TLabel", font=HEADER_FONT, background=BG, foreground="#1a2540")
        style.configure("Small.TLabel",  font=SMALL_FONT,  background=BG, foreground="#666666")

        style.configure("App.TButton", font=BUTTON_FONT, padding=(8, 5))
        style.map(
            "App.TButton",
            background=[("pressed", "#c5cfe0"), ("active", "#dce6f5"), ("!active", "#e2e8f0")],
            foreground=[("pressed", "#111"),    ("active", "#003a80")],
        )

        style.configure("Primary.TButton", font=("Segoe UI", 10, "bold"), padding=(8, 6))
        style.map(
            "Primary.TButton",
            background=[
                ("disabled", "#9bb7d4"),
                ("pressed",  ACCENT_HOVER),
                ("active",   ACCENT_HOVER),
                ("!active",  ACCENT),
            ],
            foreground=[
                ("disabled", "#eef2f7"),
                ("pressed",  "white"),
                ("active",   "white"),
                ("!active",  "white"),
            ],
        )

        self.root.configure(bg=BG)
        self.root.minsize(520, 360)

    # ------------------------------------------------------------------
    # Header row (row 0)
    # ------------------------------------------------------------------

    def _build_header(self) -> None:
        hf = ttk.Frame(self.content, padding=(6, 8, 6, 6))
        hf.grid(row=0, column=0, sticky="we")
        hf.columnconfigure(0, weight=1)

        ttk.Label(hf, text="ToZip", style="Header.TLabel").grid(row=0, column=0, sticky="w")
        ttk.Label(hf, text="Password-protected ZIP for a single file",
                  style="Small.TLabel").grid(row=1, column=0, sticky="w")
        ttk.Button(
            hf, text="About", style="App.TButton", command=self._show_about,
        ).grid(row=0, column=1, rowspan=2, sticky="e")

        ttk.Separator(self.content, orient="horizontal").grid(
            row=1, column=0, sticky="we", pady=(0, 6)
        )

    # ------------------------------------------------------------------
    # File picker and status line (rows 2–3)
    # ------------------------------------------------------------------

    def _build_picker(self) -> None:
        pf = ttk.Frame(self.content, padding=(14, 18))
        pf.grid(row=2, column=0, sticky="we")
        pf.columnconfigure(0, weight=1)

        ttk.Label(pf, text="Choose the file to protect", style="App.TLabel").grid(
            row=0, column=0, pady=(0, 10)
        )
        ttk.Button(
            pf, text="Browse for File", style="Primary.TButton", command=self._browse,
        ).grid(row=1, column=0)
        ttk.Label(
            pf, text="or start ToZip with a file path, e.g.  tozip report.pdf",
            style="Small.TLabel",
        ).grid(row=2, column=0, pady=(10, 0))

        self.status_label = ttk.Label(
            self.content, textvariable=self._status_var, style="App.TLabel",
            wraplength=560, justify="center",
        )
        self.status_label.grid(row=3, column=0, padx=14, pady=(0, 8))

    # ------------------------------------------------------------------
    # Settings (row 4)
    # ------------------------------------------------------------------

    def _build_options_frame(self) -> None:
        """
        Build the settings group.  Every change is written to config.json
        immediately by _on_option_change().
        """
        of = ttk.LabelFrame(self.content, text="Settings", padding=(12, 8))
        of.grid(row=4, column=0, padx=14, pady=(4, 10), sticky="we")
        of.columnconfigure(2, weight=1)

        check_kwargs = dict(bg=BG, activebackground=BG, highlightthickness=0, font=APP_FONT,
                            command=self._on_option_change)

        self._compress_var = IntVar(value=1 if self.config.get("compression") == "deflated" else 0)
        Checkbutton(of, text="Compress (deflate)", variable=self._compress_var,
                    **check_kwargs).grid(row=0, column=0, sticky="w", padx=(0, 20))

        self._timestamp_var = IntVar(value=1 if self.config.get("timestamp_in_filename") else 0)
        Checkbutton(of, text="Add date and time to the ZIP name", variable=self._timestamp_var,
                    **check_kwargs).grid(row=0, column=1, sticky="w")

        self._auto_copy_var = IntVar(value=1 if self.config.get("auto_copy_generated", True) else 0)
        Checkbutton(of, text="Auto-copy generated password", variable=self._auto_copy_var,
                    **check_kwargs).grid(row=1, column=0, sticky="w", padx=(0, 20), pady=(6, 0))

        kf = ttk.Frame(of)
        kf.grid(row=1, column=1, sticky="w", pady=(6, 0))
        ttk.Label(kf, text="AES key size:", style="App.TLabel").grid(row=0, column=0, padx=(0, 6))
        self._key_bits_var = StringVar(value=str(self.config.get("aes_key_bits", 256)))
        combo = ttk.Combobox(
            kf, textvariable=self._key_bits_var, state="readonly", width=6,
            values=[str(bits) for bits in AES_KEY_BITS],
        )
        combo.grid(row=0, column=1)
        combo.bind("<<ComboboxSelected>>", lambda _: self._on_option_change())

    def _on_option_change(self) -> None:
        self.config.set("compression", "deflated" if self._compress_var.get() else "stored")
        self.config.set("timestamp_in_filename", bool(self._timestamp_var.get()))
        self.config.set("auto_copy_generated", bool(self._auto_copy_var.get()))
        self.config.set("aes_key_bits", int(self._key_bits_var.get()))
        self.config.save()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def set_state(self, state: flow.FlowState) -> None:
        """Replace the current FlowState and re-render the status line."""
        self.state = state
        if state.error_msg and not state.has_file:
            self.show_status(state.error_msg, error=True)

    def show_status(self, message: str, error: bool = False) -> None:
        self._status_var.set(message)
        if self.status_label is not None:
            self.status_label.configure(foreground=ERROR_FG if error else "#1e7b34")

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _browse(self) -> None:
        """Ask for a file and, if one is chosen, start the password flow."""
        self.set_state(flow.reset())
        self.show_status("")
        initial_dir = self.config.get("last_open_dir") or os.path.expanduser("~")
        path = filedialog.askopenfilename(
            parent=self.root, title="Choose a file to zip", initialdir=initial_dir,
        )
        if not path:
            return
        self.open_path(path)

    def open_path(self, path: str) -> None:
        """
        Read *path* and open the password dialog for it.

        On failure the error is shown in the status line and the user can
        simply pick another file.
        """
        try:
            selected = self.storage.read_selected_file(path)
        except FileImportError as exc:
            self.set_state(flow.selection_failed(self.state, str(exc)))
            return

        self.config.set("last_open_dir", os.path.dirname(selected.path))
        self.set_state(flow.file_selected(self.state, selected))
        self.show_status("")
        ZipExporterDialog(self).show()

    def _show_about(self) -> None:
        """Display a modal 'About' dialog with name, version and libraries."""
        from tkinter import Toplevel

        dlg = Toplevel(self.root)
        dlg.title("About ToZip")
        dlg.resizable(False, False)
        dlg.configure(bg=BG)
        dlg.transient(self.root)
        dlg.grab_set()

        ttk.Label(dlg, text="ToZip", style="Header.TLabel").pack(pady=(18, 0))
        ttk.Label(dlg, text=f"Version {APP_VERSION}", style="Small.TLabel").pack(pady=(0, 10))
        ttk.Separator(dlg, orient="horizontal").pack(fill="x", padx=20, pady=(0, 10))
        ttk.Label(
            dlg,
            text="Pick a file, choose a password and save it\nas an AES-encrypted ZIP archive.",
            style="App.TLabel",
            justify="center",
        ).pack(padx=20)

        py_ver = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
        ttk.Label(
            dlg,
            text=f"\nBuilt with Python {py_ver} · Tkinter · pyzipper",
            style="Small.TLabel",
            justify="center",
        ).pack()

        ttk.Separator(dlg, orient="horizontal").pack(fill="x", padx=20, pady=(14, 0))
        ttk.Button(dlg, text="Close", style="App.TButton", command=dlg.destroy).pack(pady=10)

        # Centre the dialog on the parent window.
        dlg.update_idletasks()
        pw = self.root.winfo_x() + self.root.winfo_width()  // 2
        ph = self.root.winfo_y() + self.root.winfo_height() // 2
        dlg.geometry(f"+{pw - dlg.winfo_width() // 2}+{ph - dlg.winfo_height() // 2}")

        dlg.wait_window()

    def _on_closing(self) -> None:
        """
        Called when the user clicks the window close button (X).

        Saves the current configuration (remembered folders included), logs
        the close event and destroys the root window.
        """
        self.config.save()
        logger.info("Application closed")
        self.root.destroy()

    # ------------------------------------------------------------------
    # Public entry point
    # ------------------------------------------------------------------

    def run(self, path: Optional[str] = None) -> None:
        """
        Start the Tkinter event loop.

        If *path* is given the password flow for that file starts as soon as
        the window is shown.  This call blocks until the window is closed.
        """
        if path:
            self.root.after(100, lambda: self.open_path(path))
        self.root.mainloop()
