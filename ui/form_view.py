from __future__ import annotations
import tkinter as tk
from tkinter import ttk
from collections import deque
from typing import Callable, Deque, Dict, Optional

from app.controller.form_presenter import field_rows, pending_writes
from core.form.events import BaseEvent, DataModel, UpdateFormData


class FormView(ttk.Frame):
    """
    Tkinter form screen:
      - spinner while the model is loading
      - one labelled entry per field otherwise
    Models may arrive from any thread via show(); they are applied on the
    Tk thread by a periodic drain, newest last.
    """
    def __init__(self, parent: tk.Widget, on_event: Callable[[BaseEvent], None], poll_ms: int = 50):
        super().__init__(parent)
        self.on_event = on_event
        self.poll_ms = poll_ms

        self._pending: Deque[DataModel] = deque()
        self._model: Optional[DataModel] = None
        self._vars: Dict[int, tk.StringVar] = {}
        self._entries: Dict[int, ttk.Entry] = {}
        self._signature: tuple = ()
        self._suppress = False

        self._loading = ttk.Frame(self)
        self._progress = ttk.Progressbar(self._loading, mode="indeterminate", length=160)
        self._progress.pack(pady=24)
        ttk.Label(self._loading, text="Loading…").pack()

        self._content = ttk.Frame(self)

        self.after(self.poll_ms, self._drain)

    # Public API from host window (thread-safe)
    def show(self, model: DataModel) -> None:
        self._pending.append(model)

    @property
    def model(self) -> Optional[DataModel]:
        return self._model

    # --- UI loop ---
    def _drain(self):
        latest = None
        while self._pending:
            latest = self._pending.popleft()
        if latest is not None:
            self._render(latest)
        self.after(self.poll_ms, self._drain)

    def _render(self, model: DataModel) -> None:
        self._model = model
        if model.loading:
            self._content.pack_forget()
            self._loading.pack(fill="both", expand=True)
            self._progress.start(12)
            return

        self._progress.stop()
        self._loading.pack_forget()
        self._content.pack(fill="both", expand=True)

        rows = field_rows(model)
        signature = tuple((f.id, f.title) for f, _v in rows)
        if signature != self._signature:
            self._rebuild(rows)
            self._signature = signature

        shown = {fid: var.get() for fid, var in self._vars.items()}
        writes = pending_writes(model, shown, editing=self._editing_id())

        # Push values without echoing them back as events
        self._suppress = True
        try:
            for fid, value in writes.items():
                self._vars[fid].set(value)
        finally:
            self._suppress = False

    def _editing_id(self) -> Optional[int]:
        try:
            focused = self.focus_get()
        except KeyError:  # focus inside a Tk popdown
            return None
        for fid, entry in self._entries.items():
            if entry is focused:
                return fid
        return None

    def _rebuild(self, rows) -> None:
        for child in self._content.winfo_children():
            child.destroy()
        self._vars.clear()
        self._entries.clear()

        for r, (f, value) in enumerate(rows):
            ttk.Label(self._content, text=f.title).grid(row=r, column=0, sticky="w", padx=(0, 12), pady=4)
            var = tk.StringVar(value=value)
            var.trace_add("write", lambda *_a, fid=f.id, v=var: self._edited(fid, v))
            entry = ttk.Entry(self._content, textvariable=var, width=40)
            entry.grid(row=r, column=1, sticky="ew", pady=4)
            self._vars[f.id] = var
            self._entries[f.id] = entry
        self._content.columnconfigure(1, weight=1)

    def _edited(self, fid: int, var: tk.StringVar) -> None:
        if self._suppress:
            return
        self.on_event(UpdateFormData(data={fid: var.get()}))
