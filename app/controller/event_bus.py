# app/controller/event_bus.py
from __future__ import annotations
from queue import Queue

# Large enough to absorb a burst of UI input, small enough to surface a
# consumer that has stopped draining.
DEFAULT_CAPACITY = 20

def new_event_queue(capacity: int = DEFAULT_CAPACITY) -> Queue:
    """One bounded queue per form runtime."""
    if capacity < 1:
        raise ValueError(f"capacity must be >= 1, got {capacity}")
    return Queue(maxsize=capacity)
