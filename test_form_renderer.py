from unittest.mock import MagicMock

import pytest

import user_admin.form_renderer as form_renderer
from user_admin.field_schema import FormSchema
from user_admin.form_renderer import FormRenderer
from user_admin.orchestrator import RecordManager
from user_admin.record import Record
from user_admin.record_store import RecordStore
from user_admin.schema_loader import create_default_user_schema

from test_fixtures import StubService, mock_streamlit, run_now, user_payload


def _manager(schema=None, records=None):
    schema = schema or create_default_user_schema()
    store = RecordStore(StubService(records), schema)
    return RecordManager(schema, store, MagicMock())


@pytest.fixture
def st(monkeypatch):
    st = mock_streamlit()
    monkeypatch.setattr(form_renderer, "st", st)
    monkeypatch.setattr(form_renderer, "run_async", run_now)
    return st


def test_render_without_open_form_draws_nothing(st):
    manager = _manager()

    assert FormRenderer.render(manager) is None

    st.container.assert_not_called()
    st.text_input.assert_not_called()


def test_render_create_form(st):
    manager = _manager()
    manager.open_create()

    FormRenderer.render(manager)

    st.subheader.assert_called_once_with("Add New User")
    assert st.text_input.call_count == 4

    first_call = st.text_input.call_args_list[0]
    assert first_call.args == ("First Name *",)
    assert first_call.kwargs["key"] == "field_1_firstName"
    assert first_call.kwargs["placeholder"] == "Enter first name"
    assert st.session_state["field_1_firstName"] == ""

    labels = [c.args[0] for c in st.button.call_args_list]
    keys = [c.kwargs["key"] for c in st.button.call_args_list]
    assert labels == ["Cancel", "Create"]
    assert keys == ["form_cancel_1", "form_submit_1"]


def test_widget_commit_validates_field(st):
    manager = _manager()
    form = manager.open_create()
    key = FormRenderer.widget_key(manager, "firstName")
    st.session_state[key] = "A"

    FormRenderer._on_widget_commit(form, "firstName", key)

    assert form.values["firstName"] == "A"
    assert form.visible_error("firstName") == "Must be at least 2 characters"

    FormRenderer.render(manager)
    st.error.assert_called_once_with("⚠️ Must be at least 2 characters")


def test_untouched_fields_show_no_errors(st):
    manager = _manager()
    manager.open_create()

    FormRenderer.render(manager)

    st.error.assert_not_called()


def test_handle_submit_syncs_widgets_and_creates(st):
    manager = _manager()
    manager.open_create()
    typed = {"firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com", "phoneNumber": "5551234567"}
    for name, value in typed.items():
        st.session_state[FormRenderer.widget_key(manager, name)] = value

    FormRenderer._handle_submit(manager)

    assert manager.form is None
    assert manager.store.count == 1
    assert manager.store.records[0].get("firstName") == "Ada"
    manager.notifier.success.assert_called_once_with("User created successfully!")


def test_handle_submit_invalid_keeps_form(st):
    manager = _manager()
    manager.open_create()

    FormRenderer._handle_submit(manager)

    assert manager.form is not None
    assert manager.form.visible_error("firstName") == "This field is required"


def test_handle_cancel_closes_form(st):
    manager = _manager()
    manager.open_create()

    FormRenderer._handle_cancel(manager)

    assert manager.form is None


def test_saving_disables_buttons(st):
    manager = _manager()
    manager.open_create()
    manager.store.state = manager.store.state.model_copy(update={"saving": True})

    FormRenderer.render(manager)

    labels = [c.args[0] for c in st.button.call_args_list]
    assert labels == ["Cancel", "Saving..."]
    assert all(c.kwargs["disabled"] for c in st.button.call_args_list)


def test_edit_form_shows_modified_fields(st):
    manager = _manager()
    record = Record.from_wire(user_payload("7", "Ada", "Lovelace"), manager.schema.field_names())
    form = manager.open_edit(record)
    form.change("email", "ada@lovelace.dev")

    FormRenderer.render(manager)

    st.subheader.assert_called_once_with("Edit User")
    st.caption.assert_called_once_with("Modified: Email Address")
    assert st.session_state["field_1_email"] == "ada@lovelace.dev"


def test_new_form_gets_fresh_widget_keys(st):
    manager = _manager()
    manager.open_create()
    FormRenderer.render(manager)
    st.session_state["field_1_firstName"] = "Stale"

    manager.open_create()
    FormRenderer.render(manager)

    assert st.session_state["field_2_firstName"] == ""


def test_select_textarea_and_date_widgets(st):
    schema = FormSchema.model_validate({
        "record_label": "Member",
        "fields": {
            "role": {
                "type": "select",
                "label": "Role",
                "required": True,
                "choices": [{"value": "admin", "label": "Administrator"}, {"value": "viewer", "label": "Viewer"}]
            },
            "notes": {"type": "textarea", "label": "Notes", "rows": 3},
            "joined": {"type": "date", "label": "Joined"},
        }
    })
    manager = _manager(schema)
    manager.open_create()

    FormRenderer.render(manager)

    select_call = st.selectbox.call_args_list[0]
    assert select_call.args == ("Role *",)
    assert select_call.kwargs["options"] == ["", "admin", "viewer"]
    format_func = select_call.kwargs["format_func"]
    assert format_func("") == "Select Role"
    assert format_func("admin") == "Administrator"

    area_call = st.text_area.call_args_list[0]
    assert area_call.args == ("Notes",)
    assert area_call.kwargs["height"] == 84

    date_call = st.text_input.call_args_list[0]
    assert date_call.args == ("Joined",)
    assert date_call.kwargs["placeholder"] == "YYYY-MM-DD"

    st.subheader.assert_called_once_with("Add New Member")
