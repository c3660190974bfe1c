# main.py
from __future__ import annotations
import structlog
from app.config import FormConfig
from app.logging_config import configure_logging
from ui.main_window import MainWindow

def main(config: FormConfig | None = None, debug: bool = False, json_logs: bool = True) -> int:
    configure_logging(debug=debug, json_logs=json_logs)
    log = structlog.get_logger()

    log.info("app.start", msg="Launching form demo")
    win = MainWindow(config=config)
    win.mainloop()
    if win.failed:
        log.error("app.abort", msg="Form runtime failed")
        return 1
    log.info("app.stop", msg="Exited cleanly")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
