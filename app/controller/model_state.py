from __future__ import annotations
import threading
from typing import Callable, List, Optional

import structlog

from core.form.events import DataModel

log = structlog.get_logger()

Listener = Callable[[DataModel], None]

class ModelState:
    """
    Single cell holding the current DataModel.
    Writers go through update(); listeners are called under the lock,
    so they see every distinct model in write order.
    """
    def __init__(self, initial: Optional[DataModel] = None):
        self._cond = threading.Condition(threading.RLock())
        self._current = initial if initial is not None else DataModel()
        self._listeners: List[Listener] = []
        self._version = 0

    def get(self) -> DataModel:
        with self._cond:
            return self._current

    @property
    def version(self) -> int:
        with self._cond:
            return self._version

    def update(self, fn: Callable[[DataModel], DataModel]) -> DataModel:
        with self._cond:
            new = fn(self._current)
            if new == self._current:
                return self._current
            self._current = new
            self._version += 1
            try:
                for cb in list(self._listeners):
                    try:
                        cb(new)
                    except Exception as e:
                        log.warning("model.listener.error", err=str(e), version=self._version)
            finally:
                self._cond.notify_all()
            return new

    def set(self, model: DataModel) -> DataModel:
        return self.update(lambda _old: model)

    def subscribe(self, cb: Listener, replay: bool = True) -> Callable[[], None]:
        """Register cb; with replay=True it first receives the current model."""
        with self._cond:
            self._listeners.append(cb)
            if replay:
                cb(self._current)

        def unsubscribe() -> None:
            with self._cond:
                if cb in self._listeners:
                    self._listeners.remove(cb)
        return unsubscribe

    def wait_for(self, predicate: Callable[[DataModel], bool], timeout: Optional[float] = None) -> DataModel:
        """Block until predicate(model) holds. Raises TimeoutError otherwise."""
        with self._cond:
            if not self._cond.wait_for(lambda: predicate(self._current), timeout=timeout):
                log.debug("model.wait.timeout", timeout=timeout, version=self._version)
                raise TimeoutError(f"model condition not met within {timeout}s")
            return self._current
