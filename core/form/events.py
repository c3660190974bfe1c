from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Dict, Any, Mapping
import time
from datetime import datetime, timezone

# --- timing helpers ---
def utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")

def mono_ts() -> float:
    return time.perf_counter()

# --- form values ---
@dataclass(frozen=True)
class Field:
    """One form input: label text + stable id."""
    title: str
    id: int

    def to_record(self) -> Dict[str, Any]:
        return {"title": self.title, "id": self.id}

@dataclass(frozen=True)
class DataModel:
    """Everything visible on the form screen at one instant."""
    loading: bool = False
    fields: Dict[int, Field] = field(default_factory=dict)
    data: Dict[int, str] = field(default_factory=dict)

    def to_record(self) -> Dict[str, Any]:
        return {
            "loading": self.loading,
            "fields": {str(k): f.to_record() for k, f in self.fields.items()},
            "data": {str(k): v for k, v in self.data.items()},
        }

# --- event tags ---
class EventType(Enum):
    """Tag used for routing, logging and records."""
    UPDATE_FORM_DATA = auto()
    UPDATE_FORM_ATTRIBUTES = auto()
    CANCEL = auto()

# --- base event ---
@dataclass(frozen=True)
class BaseEvent:
    """Common shape for all form events."""
    etype: EventType = field(init=False)         # auto-set by subclasses
    t_utc: Optional[str] = field(default=None, compare=False)   # materialized on serialize
    t_mono: float = field(default_factory=mono_ts, compare=False)

    def to_record(self) -> Dict[str, Any]:
        return {
            "etype": self.etype.name,
            "t_utc": self.t_utc or utc_iso(),
            "t_mono": self.t_mono,
        }

@dataclass(frozen=True)
class UpdateFormData(BaseEvent):
    """Patch of field values, keyed by field id."""
    data: Dict[int, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "etype", EventType.UPDATE_FORM_DATA)

    def to_record(self) -> Dict[str, Any]:
        base = super().to_record()
        base["data"] = {str(k): v for k, v in self.data.items()}
        return base

@dataclass(frozen=True)
class UpdateFormAttributes(BaseEvent):
    """Patch of field definitions, keyed by field id."""
    attributes: Dict[int, Field] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "etype", EventType.UPDATE_FORM_ATTRIBUTES)

    def to_record(self) -> Dict[str, Any]:
        base = super().to_record()
        base["attributes"] = {str(k): f.to_record() for k, f in self.attributes.items()}
        return base

@dataclass(frozen=True)
class Cancel(BaseEvent):
    """Clears the form and puts it back into loading."""

    def __post_init__(self):
        object.__setattr__(self, "etype", EventType.CANCEL)

# --- records -> events ---
def _int_key(k: Any) -> int:
    try:
        return int(k)
    except (TypeError, ValueError):
        raise ValueError(f"field id must be an integer, got {k!r}") from None

def _field_from_record(key: int, rec: Any) -> Field:
    if isinstance(rec, Field):
        return rec
    if not isinstance(rec, Mapping) or "title" not in rec:
        raise ValueError(f"field {key} needs a 'title'")
    return Field(title=str(rec["title"]), id=_int_key(rec.get("id", key)))

def event_from_record(rec: Mapping[str, Any]) -> BaseEvent:
    """
    Inverse of to_record(). Timestamps are carried over when present.
    Raises ValueError for unknown tags or malformed payloads.
    """
    if not isinstance(rec, Mapping):
        raise ValueError(f"event record must be an object, got {type(rec).__name__}")
    name = rec.get("etype")
    try:
        etype = EventType[name]
    except (KeyError, TypeError):
        raise ValueError(f"unknown event type: {name!r}") from None

    stamps: Dict[str, Any] = {}
    if rec.get("t_utc"):
        stamps["t_utc"] = rec["t_utc"]
    if rec.get("t_mono") is not None:
        stamps["t_mono"] = float(rec["t_mono"])

    if etype == EventType.UPDATE_FORM_DATA:
        payload = rec.get("data") or {}
        if not isinstance(payload, Mapping):
            raise ValueError("'data' must be an object")
        return UpdateFormData(data={_int_key(k): str(v) for k, v in payload.items()}, **stamps)
    if etype == EventType.UPDATE_FORM_ATTRIBUTES:
        payload = rec.get("attributes") or {}
        if not isinstance(payload, Mapping):
            raise ValueError("'attributes' must be an object")
        return UpdateFormAttributes(
            attributes={_int_key(k): _field_from_record(_int_key(k), v) for k, v in payload.items()},
            **stamps,
        )
    return Cancel(**stamps)
