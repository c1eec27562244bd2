import pytest

import flow
from flow import FlowState
from storage import SelectedFile


@pytest.fixture
def selected_state():
    return flow.file_selected(flow.reset(), SelectedFile(name="report.pdf", data=b"%PDF-1.7"))


@pytest.mark.parametrize(
    "password, confirm, expected",
    [
        ("secret", "secret", True),
        ("  secret ", "secret", True),
        ("secret\n", "\tsecret", True),
        ("secret", "Secret", False),
        ("secret", "secret1", False),
        ("", "", False),
        ("   ", "   ", False),
        ("secret", "", False),
        ("", "secret", False),
        ("a b", "a b", True),
        ("a b", "ab", False),
    ],
)
def test_passwords_match(password, confirm, expected):
    assert flow.passwords_match(password, confirm) is expected


def test_initial_state_cannot_create():
    state = flow.reset()
    assert state == FlowState()
    assert not state.has_file
    assert not flow.can_create(state)


def test_can_create_needs_a_file():
    state = flow.passwords_changed(flow.reset(), "secret", "secret")
    assert not flow.can_create(state)


def test_can_create_with_file_and_matching_passwords(selected_state):
    state = flow.passwords_changed(selected_state, "secret", " secret ")
    assert flow.can_create(state)
    assert flow.archive_password(state) == "secret"


def test_empty_file_can_still_be_zipped():
    state = flow.file_selected(flow.reset(), SelectedFile(name="empty.txt", data=b""))
    state = flow.passwords_changed(state, "secret", "secret")
    assert flow.can_create(state)


def test_file_selected_discards_previous_flow(selected_state):
    state = flow.passwords_changed(selected_state, "secret", "secret")
    state = flow.archive_created(state, b"PK...")
    state = flow.file_selected(state, SelectedFile(name="other.txt", data=b"hello"))
    assert state == FlowState(file_name="other.txt", file_data=b"hello")


def test_selection_failed_keeps_only_the_message(selected_state):
    state = flow.selection_failed(selected_state, "Permission denied")
    assert state == FlowState(error_msg="Permission denied")


def test_changing_the_password_drops_a_built_archive(selected_state):
    state = flow.passwords_changed(selected_state, "secret", "secret")
    state = flow.archive_created(state, b"PK...")
    assert state.has_archive

    state = flow.passwords_changed(state, "secret2", "secret")
    assert not state.has_archive


def test_editing_only_the_confirmation_keeps_the_archive(selected_state):
    state = flow.passwords_changed(selected_state, "secret", "secret")
    state = flow.archive_created(state, b"PK...")

    state = flow.passwords_changed(state, "secret", "secre")
    assert state.has_archive
    assert not flow.can_create(state)

    state = flow.passwords_changed(state, "secret ", "secret")
    assert state.archive_data == b"PK..."


def test_archive_failed_sets_message_and_keeps_passwords(selected_state):
    state = flow.passwords_changed(selected_state, "secret", "secret")
    state = flow.archive_failed(state, "Error creating encrypted zip.")
    assert state.error_msg == "Error creating encrypted zip."
    assert state.password == "secret"
    assert not state.has_archive
    assert flow.can_create(state)


def test_archive_created_clears_the_error(selected_state):
    state = flow.archive_failed(selected_state, "boom")
    state = flow.archive_created(state, b"PK...")
    assert state.error_msg == ""
    assert state.archive_data == b"PK..."


def test_ready_to_export_needs_a_matching_archive(selected_state):
    state = flow.passwords_changed(selected_state, "secret", "secret")
    assert not flow.ready_to_export(state)

    state = flow.archive_created(state, b"PK...", "secret")
    assert flow.ready_to_export(state)

    state = flow.passwords_changed(state, "secret", "secre")
    assert not flow.ready_to_export(state)


def test_save_after_failed_export_goes_straight_to_export(selected_state):
    state = flow.passwords_changed(selected_state, "secret", "secret")
    state = flow.archive_created(state, b"PK...", "secret")
    state = flow.export_failed(state, "Could not export the file. Please try again.")
    assert flow.ready_to_export(state)


def test_archive_for_an_edited_password_is_discarded(selected_state):
    state = flow.passwords_changed(selected_state, "secret", "secret")
    # Fields edited while the archive for "secret" was being built.
    state = flow.passwords_changed(state, "hunter2", "hunter2")

    after = flow.archive_created(state, b"PK...", "secret")

    assert after == state
    assert not after.has_archive
    assert not flow.ready_to_export(after)


def test_archive_for_a_whitespace_edit_is_kept(selected_state):
    state = flow.passwords_changed(selected_state, "secret", "secret")
    state = flow.passwords_changed(state, " secret ", "secret")

    state = flow.archive_created(state, b"PK...", "secret")

    assert flow.ready_to_export(state)


def test_export_failure_keeps_archive_for_retry(selected_state):
    state = flow.passwords_changed(selected_state, "secret", "secret")
    state = flow.archive_created(state, b"PK...")
    state = flow.export_failed(state, "Could not export the file. Please try again.")
    assert state.archive_data == b"PK..."
    assert state.file_data == b"%PDF-1.7"
    assert state.password == "secret"
    assert state.error_msg


def test_successful_export_resets_everything(selected_state):
    state = flow.passwords_changed(selected_state, "secret", "secret")
    state = flow.archive_created(state, b"PK...")
    assert flow.exported(state) == FlowState()


def test_state_is_immutable(selected_state):
    with pytest.raises(AttributeError):
        selected_state.password = "x"
