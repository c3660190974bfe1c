# tests/test_form_presenter.py
# How to run:
#   pytest -q
#
# Verifies:
#   - UpdateFormData / UpdateFormAttributes fold as last-write-wins patches
#   - Cancel resets to the empty loading model from any state
#   - field_rows pairs every field with its value, '' when unset

import random

from app.controller.form_presenter import (
    initial_model, initial_fields, reduce, fold, field_rows, pending_writes,
)
from core.form.events import (
    UpdateFormData, UpdateFormAttributes, Cancel, DataModel, Field,
)

def _expected_merge(patches):
    out = {}
    for p in patches:
        out.update(p)
    return out

def test_initial_model_is_loading_and_empty():
    m = initial_model()
    assert m == DataModel(loading=True, fields={}, data={})

def test_initial_fields_are_deterministic():
    fields = initial_fields()
    assert list(fields) == list(range(10))
    assert fields[0] == Field("Field 0", 0)
    assert fields[9] == Field("Field 9", 9)
    assert initial_fields(3, "Q{}") == {0: Field("Q0", 0), 1: Field("Q1", 1), 2: Field("Q2", 2)}

def test_update_form_data_patches_last_write_wins():
    rng = random.Random(7)
    for _ in range(50):
        patches = [
            {rng.randrange(6): rng.choice("abcdef") for _ in range(rng.randrange(1, 4))}
            for _ in range(rng.randrange(1, 8))
        ]
        m = fold([UpdateFormData(data=p) for p in patches])
        assert m.data == _expected_merge(patches)
        assert m.fields == {} and m.loading is True

def test_untouched_keys_keep_values():
    m = fold([UpdateFormData(data={1: "a", 2: "b"}), UpdateFormData(data={2: "c"})])
    assert m.data == {1: "a", 2: "c"}

def test_update_form_attributes_patches_last_write_wins():
    rng = random.Random(11)
    for _ in range(50):
        patches = [
            {k: Field(f"T{rng.randrange(100)}", k) for k in rng.sample(range(6), rng.randrange(1, 4))}
            for _ in range(rng.randrange(1, 8))
        ]
        m = fold([UpdateFormAttributes(attributes=p) for p in patches])
        assert m.fields == _expected_merge(patches)
        assert m.data == {}

def test_data_keys_need_not_be_fields():
    m = reduce(initial_model(), UpdateFormData(data={42: "orphan"}))
    assert m.data == {42: "orphan"}
    assert 42 not in m.fields

def test_reduce_does_not_mutate_previous_model():
    before = DataModel(loading=False, fields={0: Field("Field 0", 0)}, data={0: "x"})
    after = reduce(before, UpdateFormData(data={0: "y", 1: "z"}))
    assert before.data == {0: "x"}
    assert after.data == {0: "y", 1: "z"}
    assert after.loading is False

def test_cancel_always_resets():
    states = [
        initial_model(),
        DataModel(loading=False, fields=initial_fields(), data={1: "hello"}),
        DataModel(loading=True, fields={}, data={3: "x"}),
    ]
    for s in states:
        assert reduce(s, Cancel()) == DataModel(loading=True, fields={}, data={})

def test_cancel_then_attributes_keeps_loading():
    # After Cancel nothing regenerates fields or clears loading; kept as-is.
    loaded = DataModel(loading=False, fields=initial_fields(), data={1: "hello"})
    m = fold([Cancel(), UpdateFormAttributes(attributes={5: Field("X", 5)})], loaded)
    assert m.fields == {5: Field("X", 5)}
    assert m.data == {}
    assert m.loading is True

def test_field_rows_defaults_to_empty_string():
    m = DataModel(loading=False, fields={0: Field("A", 0), 1: Field("B", 1)}, data={1: "b", 7: "z"})
    assert field_rows(m) == [(Field("A", 0), ""), (Field("B", 1), "b")]

def test_pending_writes_skips_the_input_being_edited():
    m = DataModel(loading=False, fields={0: Field("A", 0), 1: Field("B", 1)}, data={0: "he", 1: "b"})
    shown = {0: "hello", 1: ""}
    # the model lags behind what the user typed into field 0
    assert pending_writes(m, shown, editing=0) == {1: "b"}
    assert pending_writes(m, shown) == {0: "he", 1: "b"}
    assert pending_writes(m, {0: "he", 1: "b"}) == {}
