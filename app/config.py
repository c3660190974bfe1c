from __future__ import annotations
from dataclasses import dataclass

from app.controller.event_bus import DEFAULT_CAPACITY

@dataclass(frozen=True)
class FormConfig:
    # event queue
    capacity: int = DEFAULT_CAPACITY
    poll_timeout_s: float = 0.5   # consumer wake-up period while idle

    # bootstrap (simulated initial load)
    field_count: int = 10
    field_title_template: str = "Field {}"
    bootstrap_delay_s: float = 1.0

    # tkinter redraw poll
    ui_poll_ms: int = 50
