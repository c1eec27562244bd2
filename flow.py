"""
flow.py – State of the "select file → enter password → save zip" flow.

FlowState is an immutable snapshot of everything the window and the password
dialog display.  Every user action or background result goes through one of
the transition functions below, which return a new FlowState; the Tkinter
layer only renders the current state.

The confirmation gate lives here too: an archive may only be created when a
file is selected and both password fields, stripped of surrounding
whitespace, are non-empty and identical.
"""

from dataclasses import dataclass, replace
from typing import Optional

from storage import SelectedFile


@dataclass(frozen=True)
class FlowState:
    file_name: str = ""
    file_data: bytes = b""
    password: str = ""
    confirm: str = ""
    archive_data: bytes = b""
    error_msg: str = ""

    @property
    def has_file(self) -> bool:
        return bool(self.file_name)

    @property
    def has_archive(self) -> bool:
        return bool(self.archive_data)


def passwords_match(password: str, confirm: str) -> bool:
    """True when both passwords are non-empty and equal once stripped."""
    return bool(password.strip()) and password.strip() == confirm.strip()


def can_create(state: FlowState) -> bool:
    return state.has_file and passwords_match(state.password, state.confirm)


def archive_password(state: FlowState) -> str:
    """The password handed to the archive writer (the confirmed, stripped value)."""
    return state.password.strip()


def reset() -> FlowState:
    return FlowState()


def file_selected(state: FlowState, selected: SelectedFile) -> FlowState:
    """A new file replaces the old one; passwords and any archive are discarded."""
    return FlowState(file_name=selected.name, file_data=selected.data)


def selection_failed(state: FlowState, message: str) -> FlowState:
    return FlowState(error_msg=message)


def passwords_changed(state: FlowState, password: str, confirm: str) -> FlowState:
    """
    Record the current contents of both password fields.

    An archive built with the previous password no longer matches what the
    user sees, so it is dropped whenever the effective password changes.
    """
    archive_data = state.archive_data
    if archive_password(state) != password.strip():
        archive_data = b""
    return replace(state, password=password, confirm=confirm, archive_data=archive_data)


def ready_to_export(state: FlowState) -> bool:
    """Save can skip archive creation and go straight to the save dialog."""
    return can_create(state) and state.has_archive


def archive_created(state: FlowState, data: bytes, password: Optional[str] = None) -> FlowState:
    """
    Store a finished archive.  When *password* is given and no longer matches
    the fields (they were edited while the archive was being built), the
    archive is discarded and *state* is returned unchanged.
    """
    if password is not None and archive_password(state) != password:
        return state
    return replace(state, archive_data=data, error_msg="")


def archive_failed(state: FlowState, message: str) -> FlowState:
    return replace(state, archive_data=b"", error_msg=message)


def export_failed(state: FlowState, message: str) -> FlowState:
    """Keep the archive bytes so the export can be retried as is."""
    return replace(state, error_msg=message)


def exported(state: FlowState) -> FlowState:
    """A successful export completes the flow."""
    return reset()
