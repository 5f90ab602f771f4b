import os
import faulthandler
import sys
import traceback
from PyQt6.QtWidgets import QApplication
from ui.main_window import MainWindow
from core.logger import log

_FAULT_LOG_HANDLE = None

def _install_exception_logging() -> None:
    log_path = os.path.join(os.path.dirname(__file__), "exception.log")
    def _hook(exc_type, exc_value, exc_tb):
        log.error("Unhandled %s: %s", exc_type.__name__, exc_value)
        try:
            with open(log_path, "a", encoding="utf-8") as handle:
                handle.write("\n=== Unhandled Exception ===\n")
                traceback.print_exception(exc_type, exc_value, exc_tb, file=handle)
        except OSError:
            pass
    sys.excepthook = _hook
    import threading
    def _thread_hook(args):
        _hook(args.exc_type, args.exc_value, args.exc_traceback)
    threading.excepthook = _thread_hook


def main():
    try:
        log_path = os.path.join(os.path.dirname(__file__), "faulthandler.log")
        # Keep the handle alive for the process lifetime; faulthandler may write later.
        global _FAULT_LOG_HANDLE
        # Overwrite each run so logs reflect the current crash, not stale history.
        _FAULT_LOG_HANDLE = open(log_path, "w", encoding="utf-8")
        _FAULT_LOG_HANDLE.write(f"pid={os.getpid()}\n")
        _FAULT_LOG_HANDLE.flush()
        faulthandler.enable(_FAULT_LOG_HANDLE, all_threads=True)
    except OSError:
        faulthandler.enable(all_threads=True)
    _install_exception_logging()
    app = QApplication(sys.argv)
    app.setApplicationName('SpotPrices')
    window = MainWindow()
    window.show()
    return app.exec()

if __name__ == '__main__':
    raise SystemExit(main())
