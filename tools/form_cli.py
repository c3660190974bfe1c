from __future__ import annotations
import argparse, json, sys
from dataclasses import replace
from typing import List, Optional

from app.config import FormConfig
from app.controller.form_presenter import fold, initial_fields, initial_model
from core.form.events import BaseEvent, event_from_record

def load_events(path: str) -> List[BaseEvent]:
    """One JSON event record per line; blank lines skipped."""
    events = []
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                events.append(event_from_record(json.loads(line)))
            except ValueError as e:  # JSONDecodeError is a ValueError
                raise ValueError(f"{path}:{lineno}: {e}") from e
    return events

def replay(path: str, bootstrap: bool = True, config: Optional[FormConfig] = None) -> dict:
    cfg = config or FormConfig()
    start = initial_model()
    if bootstrap:
        start = replace(start, loading=False, fields=initial_fields(cfg.field_count, cfg.field_title_template))
    return fold(load_events(path), start).to_record()

def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="molecule-form", description="Dynamic form demo")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_run = sub.add_parser("run", help="Launch GUI")
    p_run.add_argument("--capacity", type=int, default=FormConfig.capacity)
    p_run.add_argument("--delay", type=float, default=FormConfig.bootstrap_delay_s, help="bootstrap delay (s)")
    p_run.add_argument("--fields", type=int, default=FormConfig.field_count)
    p_run.add_argument("--json-logs", action="store_true")
    p_run.add_argument("-q", "--quiet", action="store_true")

    p_replay = sub.add_parser("replay", help="Fold a JSON-lines event file and print the model")
    p_replay.add_argument("file")
    p_replay.add_argument("--no-bootstrap", action="store_true", help="start from the loading model")

    args = ap.parse_args(argv)

    if args.cmd == "run":
        if args.capacity < 1:
            p_run.error(f"--capacity must be >= 1, got {args.capacity}")
        if args.delay < 0:
            p_run.error(f"--delay must be >= 0, got {args.delay}")
        if args.fields < 0:
            p_run.error(f"--fields must be >= 0, got {args.fields}")
        cfg = replace(FormConfig(), capacity=args.capacity, bootstrap_delay_s=args.delay, field_count=args.fields)
        # deferred: tkinter only when a window is wanted
        from main import main as run_gui
        return run_gui(config=cfg, debug=not args.quiet, json_logs=args.json_logs)

    if args.cmd == "replay":
        try:
            rec = replay(args.file, bootstrap=not args.no_bootstrap)
        except (OSError, ValueError) as e:
            print(f"error: {e}", file=sys.stderr)
            return 2
        print(json.dumps(rec, indent=2, sort_keys=True))
        return 0

    return 2

if __name__ == "__main__":
    sys.exit(main())
