from __future__ import annotations
import tkinter as tk
from tkinter import ttk
from typing import Optional

import structlog

from app.config import FormConfig
from app.controller.runner import FormRuntime
from ui.form_view import FormView
from core.form.events import BaseEvent, Cancel

log = structlog.get_logger()

class MainWindow(tk.Tk):
    def __init__(self, config: Optional[FormConfig] = None):
        super().__init__()
        self.title("Molecule Form")
        self.geometry("560x520")
        self.minsize(420, 360)
        self.failed = False

        self.cfg = config or FormConfig()

        # Root content
        self._content = ttk.Frame(self, padding=12)
        self._content.pack(fill="both", expand=True)

        # Top bar: event count + cancel
        topbar = ttk.Frame(self._content)
        topbar.pack(side="top", fill="x", pady=(0, 8))

        self.event_count_var = tk.StringVar(value="Events: 0")
        ttk.Label(topbar, textvariable=self.event_count_var).pack(side="left")
        ttk.Button(topbar, text="Cancel", command=lambda: self.take(Cancel())).pack(side="right")

        # Form area
        self.form = FormView(self._content, on_event=self.take, poll_ms=self.cfg.ui_poll_ms)
        self.form.pack(fill="both", expand=True)

        # Status bar
        self.status_var = tk.StringVar(value="Loading")
        self._status = ttk.Label(self, textvariable=self.status_var, anchor="w", padding=(8, 4))
        self._status.pack(side="bottom", fill="x")

        self._runtime = FormRuntime(self.cfg, on_event=self._on_event)
        self._unsubscribe = self._runtime.state.subscribe(self.form.show)
        self._event_count = 0
        self._runtime.start()

        self.protocol("WM_DELETE_WINDOW", self._on_close)

    def take(self, ev: BaseEvent) -> None:
        self._runtime.take(ev)

    # Called from the consumer thread; only plain attributes here, Tk reads them on poll
    def _on_event(self, ev: BaseEvent, count: int):
        self._event_count = count

    def _refresh_status(self) -> None:
        self.event_count_var.set(f"Events: {self._event_count}")
        model = self.form.model
        if model is not None:
            self.status_var.set("Loading" if model.loading else f"{len(model.fields)} fields")
        self.after(250, self._refresh_status)

    def mainloop(self, n: int = 0) -> None:
        self.after(250, self._refresh_status)
        super().mainloop(n)

    # Tk calls this for exceptions escaping callbacks (e.g. buffer overflow)
    def report_callback_exception(self, exc, val, tb):
        log.critical("ui.callback.error", exc_info=(exc, val, tb))
        self.failed = True
        self._on_close()

    def _on_close(self):
        try:
            self._unsubscribe()
            self._runtime.stop()
        finally:
            self.destroy()
