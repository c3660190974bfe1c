# tests/test_events.py
# How to run:
#   From repo root: pytest -q
#
# What this covers:
#   - Auto-setting of EventType by dataclass __post_init__
#   - Stable serialization schema (to_record), including timestamp materialization
#   - Rebuilding events from records (event_from_record) and rejecting bad ones

import pytest

from core.form.events import (
    UpdateFormData, UpdateFormAttributes, Cancel,
    DataModel, Field, EventType, event_from_record,
)

def test_update_form_data_auto_etype_and_serialization():
    ev = UpdateFormData(data={1: "hello"})
    assert ev.etype == EventType.UPDATE_FORM_DATA
    rec = ev.to_record()
    assert rec["etype"] == "UPDATE_FORM_DATA"
    assert rec["data"] == {"1": "hello"}  # keys stringified for JSON
    assert "t_utc" in rec and isinstance(rec["t_utc"], str)
    assert "t_mono" in rec and isinstance(rec["t_mono"], float)

def test_update_form_attributes_serialization():
    ev = UpdateFormAttributes(attributes={5: Field("X", 5)})
    assert ev.etype == EventType.UPDATE_FORM_ATTRIBUTES
    rec = ev.to_record()
    assert rec["etype"] == "UPDATE_FORM_ATTRIBUTES"
    assert rec["attributes"] == {"5": {"title": "X", "id": 5}}

def test_cancel_has_no_payload():
    rec = Cancel().to_record()
    assert rec["etype"] == "CANCEL"
    assert set(rec) == {"etype", "t_utc", "t_mono"}

def test_events_compare_by_payload_not_timestamp():
    assert UpdateFormData(data={1: "a"}) == UpdateFormData(data={1: "a"})
    assert UpdateFormData(data={1: "a"}) != UpdateFormData(data={1: "b"})
    assert Cancel() == Cancel()

def test_event_from_record_restores_int_keys_and_fields():
    ev = event_from_record({"etype": "UPDATE_FORM_ATTRIBUTES", "attributes": {"3": {"title": "Name"}}})
    assert isinstance(ev, UpdateFormAttributes)
    assert ev.attributes == {3: Field("Name", 3)}

    ev = event_from_record({"etype": "UPDATE_FORM_DATA", "data": {"7": "x"}, "t_mono": 1.5})
    assert ev == UpdateFormData(data={7: "x"})
    assert ev.t_mono == 1.5

    assert isinstance(event_from_record({"etype": "CANCEL"}), Cancel)

@pytest.mark.parametrize("rec", [
    {"etype": "SUBMIT"},
    {"data": {"1": "x"}},
    {"etype": "UPDATE_FORM_DATA", "data": {"one": "x"}},
    {"etype": "UPDATE_FORM_DATA", "data": ["x"]},
    {"etype": "UPDATE_FORM_ATTRIBUTES", "attributes": {"1": {"id": 1}}},
    ["CANCEL"],
])
def test_event_from_record_rejects_malformed(rec):
    with pytest.raises(ValueError):
        event_from_record(rec)

def test_data_model_record():
    m = DataModel(loading=False, fields={0: Field("Field 0", 0)}, data={0: "v", 9: "orphan"})
    assert m.to_record() == {
        "loading": False,
        "fields": {"0": {"title": "Field 0", "id": 0}},
        "data": {"0": "v", "9": "orphan"},
    }
