"""
dialogs.py – The password dialog shown once a file has been selected.

ZipExporterDialog is a modal Toplevel with:

  - 'ZIP File Password' and 'Confirm Password' entries (masked, with a
    Show/Hide toggle and a Generate button).
  - A strength label ("Password Weak|Basic|Strong") that follows every
    keystroke, shown only while the password is not blank.
  - 'Save', enabled only when a file is selected and both passwords match
    after stripping surrounding whitespace.
  - 'Cancel', which clears both passwords and closes the dialog.

Save builds the archive on a worker thread (results are marshalled back to
the Tk thread with after()), then asks where to store it.  A failed or
cancelled export keeps the archive in memory, so pressing Save again goes
straight back to the save dialog.

All state lives in the owning AppWindow's FlowState; this module only
translates widget events into flow transitions and renders the result.
"""

import logging
import os
import threading
from tkinter import Entry, StringVar, Toplevel, filedialog, messagebox, ttk

import flow
from archive import ArchiveError
from config import APP_FONT, BG, ENTRY_BG, ENTRY_MIN_CHARS, ERROR_FG
from passwords import PasswordStrength, evaluate, generate_password
from storage import ExportError

logger = logging.getLogger("ToZip")

# Foreground colour of the strength label per rating.
STRENGTH_COLOURS = {
    PasswordStrength.WEAK:   "#b3261e",
    PasswordStrength.BASIC:  "#a15c00",
    PasswordStrength.STRONG: "#1e7b34",
}


class ZipExporterDialog:
    """
    Modal password dialog for the currently selected file.

    Parameters
    ----------
    app : AppWindow
        Owner of the Tk root, AppConfig, ArchiveWriter, FileStorage and the
        current FlowState.
    """

    def __init__(self, app) -> None:
        self.app = app
        self._busy: bool = False
        self._closed: bool = False
        self._password_visible: bool = False

        self.dlg = Toplevel(app.root)
        self.dlg.title(f"Zip {app.state.file_name}")
        self.dlg.resizable(False, False)
        self.dlg.configure(bg=BG)
        self.dlg.transient(app.root)

        self._password_var = StringVar()
        self._confirm_var = StringVar()

        self._build()

        self._password_var.trace_add("write", self._on_password_change)
        self._confirm_var.trace_add("write", self._on_password_change)

        # Treat window-close (X button) as "Cancel".
        self.dlg.protocol("WM_DELETE_WINDOW", self._cancel)
        self.dlg.bind("<Escape>", lambda _: self._cancel())

        self._refresh()

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def _build(self) -> None:
        """
        Build the dialog grid:
          Row 0 – file name
          Row 1 – password label + entry + [Show | Generate]
          Row 2 – confirm label + entry
          Row 3 – [Save | Cancel]
          Row 4 – strength label
          Row 5 – error / progress label
        """
        dlg = self.dlg
        px = 12

        ttk.Label(dlg, text=self.app.state.file_name, style="Header.TLabel").grid(
            row=0, column=0, columnspan=3, padx=px, pady=(12, 8), sticky="w"
        )

        ttk.Label(dlg, text="ZIP File Password:", style="App.TLabel").grid(
            row=1, column=0, padx=(px, 6), pady=4, sticky="w"
        )
        self.password_entry = Entry(
            dlg, textvariable=self._password_var, show="*", width=ENTRY_MIN_CHARS,
            relief="solid", bd=1, bg=ENTRY_BG, font=APP_FONT,
        )
        self.password_entry.grid(row=1, column=1, pady=4, sticky="we")

        btns = ttk.Frame(dlg)
        btns.grid(row=1, column=2, rowspan=2, padx=(6, px), sticky="n")
        self.show_hide_btn = ttk.Button(
            btns, text="Show", style="App.TButton", command=self._toggle_password_visibility,
        )
        self.show_hide_btn.grid(row=0, column=0, pady=(4, 2), sticky="we")
        ttk.Button(
            btns, text="Generate", style="App.TButton", command=self._generate_password,
        ).grid(row=1, column=0, pady=2, sticky="we")

        ttk.Label(dlg, text="Confirm Password:", style="App.TLabel").grid(
            row=2, column=0, padx=(px, 6), pady=4, sticky="w"
        )
        self.confirm_entry = Entry(
            dlg, textvariable=self._confirm_var, show="*", width=ENTRY_MIN_CHARS,
            relief="solid", bd=1, bg=ENTRY_BG, font=APP_FONT,
        )
        self.confirm_entry.grid(row=2, column=1, pady=4, sticky="we")

        actions = ttk.Frame(dlg)
        actions.grid(row=3, column=0, columnspan=3, padx=px, pady=(12, 6))
        self.save_btn = ttk.Button(
            actions, text="Save", style="Primary.TButton", command=self._save,
        )
        self.save_btn.grid(row=0, column=0, padx=20)
        ttk.Button(
            actions, text="Cancel", style="App.TButton", command=self._cancel,
        ).grid(row=0, column=1, padx=20)

        self.strength_label = ttk.Label(dlg, text="", style="App.TLabel")
        self.strength_label.grid(row=4, column=0, columnspan=3, padx=px, pady=(12, 2))

        self.message_label = ttk.Label(
            dlg, text="", style="App.TLabel", foreground=ERROR_FG, wraplength=420, justify="center",
        )
        self.message_label.grid(row=5, column=0, columnspan=3, padx=px, pady=(2, 12))

        self.password_entry.focus_set()
        self.password_entry.bind("<Return>", lambda _: self.confirm_entry.focus_set())
        self.confirm_entry.bind("<Return>", lambda _: self._save())

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _refresh(self) -> None:
        """Re-render buttons and labels from the current FlowState."""
        if self._closed:
            return
        state = self.app.state

        enabled = flow.can_create(state) and not self._busy
        self.save_btn.state(["!disabled"] if enabled else ["disabled"])

        if state.password.strip():
            result = evaluate(state.password)
            self.strength_label.configure(
                text=f"Password {result.strength.value}  ({result.entropy_bits:.1f} bits)",
                foreground=STRENGTH_COLOURS[result.strength],
            )
        else:
            self.strength_label.configure(text="")

        if self._busy:
            self.message_label.configure(text="Creating encrypted zip…", foreground="#555555")
        else:
            self.message_label.configure(text=state.error_msg, foreground=ERROR_FG)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_password_change(self, *_) -> None:
        self.app.set_state(
            flow.passwords_changed(self.app.state, self._password_var.get(), self._confirm_var.get())
        )
        self._refresh()

    def _toggle_password_visibility(self) -> None:
        """Toggle both entries between masked ('*') and visible plain text."""
        self._password_visible = not self._password_visible
        show = "" if self._password_visible else "*"
        self.password_entry.config(show=show)
        self.confirm_entry.config(show=show)
        self.show_hide_btn.config(text="Hide" if self._password_visible else "Show")

    def _generate_password(self) -> None:
        """
        Fill both fields with a random password and reveal it so the user
        can write it down.  If 'auto_copy_generated' is enabled the password
        is also copied to the clipboard (best-effort).
        """
        pwd = generate_password()
        self._password_var.set(pwd)
        self._confirm_var.set(pwd)
        if not self._password_visible:
            self._toggle_password_visibility()

        if self.app.config.get("auto_copy_generated", True):
            try:
                import pyperclip
                pyperclip.copy(pwd)
            except Exception:
                logger.debug("Clipboard copy of generated password failed")

    def _save(self) -> None:
        """
        Create the archive (unless a matching one is already in memory) and
        then offer to export it.
        """
        state = self.app.state
        if self._busy or not flow.can_create(state):
            return
        if flow.ready_to_export(state):
            self._export()
            return

        self._busy = True
        self._refresh()

        data, name, password = state.file_data, state.file_name, flow.archive_password(state)

        def job():
            try:
                archive = self.app.archive.create_encrypted_zip(data, name, password)
            except ArchiveError as exc:
                message = str(exc)
                self.app.root.after(0, lambda: self._on_archive_failed(message))
            else:
                self.app.root.after(0, lambda: self._on_archive_created(archive, password))

        threading.Thread(target=job, daemon=True).start()

    def _on_archive_created(self, archive: bytes, password: str) -> None:
        self._busy = False
        if self._closed:
            return
        self.app.set_state(flow.archive_created(self.app.state, archive, password))
        self._refresh()
        if flow.ready_to_export(self.app.state):
            self._export()

    def _on_archive_failed(self, message: str) -> None:
        self._busy = False
        if self._closed:
            return
        self.app.set_state(flow.archive_failed(self.app.state, message))
        self._refresh()

    def _export(self) -> None:
        """Ask for a destination and write the in-memory archive there."""
        state = self.app.state
        cfg = self.app.config
        initial_dir = cfg.get("last_save_dir") or cfg.get("last_open_dir") or os.path.expanduser("~")

        dest = filedialog.asksaveasfilename(
            parent=self.dlg,
            title="Save encrypted ZIP",
            initialdir=initial_dir,
            initialfile=self.app.storage.suggested_zip_name(state.file_name),
            defaultextension=".zip",
            filetypes=[("ZIP archive", "*.zip"), ("All files", "*.*")],
        )
        if not dest:
            # Export cancelled; the archive stays ready for another try.
            return

        try:
            self.app.storage.export_archive(state.archive_data, dest)
        except ExportError as exc:
            self.app.set_state(flow.export_failed(state, str(exc)))
            self._refresh()
            messagebox.showerror("Export failed", str(exc), parent=self.dlg)
            return

        self.app.set_state(flow.exported(state))
        self.app.show_status(f"Saved {dest}")
        self._close()

    def _cancel(self) -> None:
        """Clear both passwords, discard the selection and close."""
        self.app.set_state(flow.reset())
        self._close()

    def _close(self) -> None:
        self._closed = True
        try:
            self.dlg.grab_release()
        finally:
            self.dlg.destroy()

    # ------------------------------------------------------------------
    # Public entry point
    # ------------------------------------------------------------------

    def show(self) -> None:
        """Make the dialog modal and block until it is closed."""
        self.dlg.grab_set()
        self.dlg.wait_window()
