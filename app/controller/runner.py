from __future__ import annotations
import threading
from dataclasses import replace
from queue import Empty
from typing import Callable, List, Optional
import structlog

from app.config import FormConfig
from app.controller.event_bus import new_event_queue
from app.controller.form_presenter import initial_fields, initial_model, reduce
from app.controller.model_state import ModelState
from core.form.events import BaseEvent
from core.utils.queueing import EventBufferOverflow, put_or_raise


log = structlog.get_logger()

class FormRuntime:
    """
    Owns the event queue and the model cell; runs the bootstrap and the
    event consumer as two threads that both write through ModelState.update.
    """
    def __init__(self, config: Optional[FormConfig] = None, on_event: Optional[Callable[[BaseEvent, int], None]] = None):
        self.cfg = config or FormConfig()
        self.events = new_event_queue(self.cfg.capacity)
        self.state = ModelState(initial_model())

        self._bootstrap_thr: Optional[threading.Thread] = None
        self._consumer_thr: Optional[threading.Thread] = None
        self._stop_evt = threading.Event()
        self._on_event = on_event
        self._consumed = 0

    @property
    def running(self) -> bool:
        return self._consumer_thr is not None and self._consumer_thr.is_alive()

    @property
    def consumed(self) -> int:
        return self._consumed

    def _alive(self) -> List[threading.Thread]:
        return [t for t in (self._bootstrap_thr, self._consumer_thr) if t is not None and t.is_alive()]

    def start(self) -> None:
        alive = self._alive()
        if alive and not self._stop_evt.is_set():
            return
        if alive:
            # a stopped worker is still finishing; a second consumer would break FIFO
            log.error("form.runtime.start.busy", threads=[t.name for t in alive])
            raise RuntimeError("form runtime is still stopping")
        self._stop_evt.clear()
        self._bootstrap_thr = threading.Thread(target=self._bootstrap, name="form-bootstrap", daemon=True)
        self._consumer_thr = threading.Thread(target=self._consume_loop, name="form-consumer", daemon=True)
        self._bootstrap_thr.start()
        self._consumer_thr.start()
        log.info("form.runtime.start", capacity=self.cfg.capacity, delay_s=self.cfg.bootstrap_delay_s)

    def stop(self, timeout: float = 1.0) -> None:
        self._stop_evt.set()
        current = threading.current_thread()
        for thr in (self._bootstrap_thr, self._consumer_thr):
            if thr is not None and thr is not current:
                thr.join(timeout=timeout)
        if self._bootstrap_thr is not None and not self._bootstrap_thr.is_alive():
            self._bootstrap_thr = None
        if self._consumer_thr is not None and not self._consumer_thr.is_alive():
            self._consumer_thr = None
        alive = self._alive()
        if alive:
            log.warning("form.runtime.stop.pending", threads=[t.name for t in alive])
        log.info("form.runtime.stop", consumed=self._consumed)

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for stopped workers to exit. True when none is left."""
        for thr in self._alive():
            if thr is not threading.current_thread():
                thr.join(timeout=timeout)
        return not self._alive()

    def take(self, ev: BaseEvent) -> None:
        """Submit one event. A full buffer is fatal: the runtime stops and the error propagates."""
        try:
            put_or_raise(self.events, ev)
        except EventBufferOverflow:
            log.critical("event.buffer.overflow", capacity=self.cfg.capacity, etype=ev.etype.name)
            self.stop()
            raise

    # --- workers ---

    def _bootstrap(self) -> None:
        fields = initial_fields(self.cfg.field_count, self.cfg.field_title_template)
        self.state.update(lambda m: replace(m, fields=fields))
        log.debug("form.bootstrap.fields", count=len(fields))

        if self._stop_evt.wait(self.cfg.bootstrap_delay_s):
            return
        self.state.update(lambda m: replace(m, loading=False))
        log.info("form.bootstrap.done")

    def _consume_loop(self) -> None:
        while not self._stop_evt.is_set():
            try:
                ev: BaseEvent = self.events.get(timeout=self.cfg.poll_timeout_s)
            except Empty:
                continue

            self._consumed += 1
            try:
                self.state.update(lambda m: reduce(m, ev))
            except Exception as e:
                log.warning("form.reduce.error", err=str(e), event=type(ev).__name__)
            log.debug("event.consume", event=type(ev).__name__, n=self._consumed)

            if self._on_event:
                try:
                    self._on_event(ev, self._consumed)
                except Exception as e:
                    log.warning("form.runtime.on_event.error", err=str(e))
