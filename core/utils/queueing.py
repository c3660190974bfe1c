# core/utils/queueing.py
from __future__ import annotations
from queue import Queue, Full

class EventBufferOverflow(RuntimeError):
    """The consumer fell behind by a full buffer; treated as a programming error."""

def put_or_raise(q: Queue, item) -> None:
    """
    Put without blocking; if the queue is full, raise EventBufferOverflow.
    Nothing is dropped and the producer never stalls.
    """
    try:
        q.put_nowait(item)
    except Full:
        raise EventBufferOverflow("Event buffer overflow.") from None
