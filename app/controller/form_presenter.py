# app/controller/form_presenter.py
from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Tuple

from core.form.events import (
    BaseEvent, EventType, DataModel, Field,
    UpdateFormData, UpdateFormAttributes,
)

def initial_model() -> DataModel:
    """What the screen shows before anything has loaded."""
    return DataModel(loading=True, fields={}, data={})

def initial_fields(count: int = 10, title_template: str = "Field {}") -> Dict[int, Field]:
    return {i: Field(title=title_template.format(i), id=i) for i in range(count)}

def reduce(model: DataModel, ev: BaseEvent) -> DataModel:
    """
    Folds one event into a new model:
      - UpdateFormData       -> data patch, last write wins per id
      - UpdateFormAttributes -> fields patch, last write wins per id
      - Cancel               -> empty form, back to loading
    """
    if ev.etype == EventType.UPDATE_FORM_DATA and isinstance(ev, UpdateFormData):
        return DataModel(loading=model.loading, fields=model.fields, data={**model.data, **ev.data})

    if ev.etype == EventType.UPDATE_FORM_ATTRIBUTES and isinstance(ev, UpdateFormAttributes):
        return DataModel(loading=model.loading, fields={**model.fields, **ev.attributes}, data=model.data)

    if ev.etype == EventType.CANCEL:
        # Nothing re-runs the bootstrap afterwards, so loading stays on.
        return DataModel(loading=True, fields={}, data={})

    raise TypeError(f"unsupported event: {type(ev).__name__}")

def fold(events: Iterable[BaseEvent], model: Optional[DataModel] = None) -> DataModel:
    out = model if model is not None else initial_model()
    for ev in events:
        out = reduce(out, ev)
    return out

def field_rows(model: DataModel) -> List[Tuple[Field, str]]:
    """Fields in insertion order, each paired with its value ('' when unset)."""
    return [(f, model.data.get(fid, "")) for fid, f in model.fields.items()]

def pending_writes(model: DataModel, shown: Dict[int, str], editing: Optional[int] = None) -> Dict[int, str]:
    """
    Values the form must push into its inputs to match model. The input
    being edited keeps its text, since the model may lag behind the keystrokes.
    """
    return {
        f.id: value
        for f, value in field_rows(model)
        if f.id != editing and shown.get(f.id) != value
    }
