"""
debug_trace.py

Debug instrumentation for following debounced recomputations.
Enable by setting DEBUG_TRACE = True below, or at runtime with set_enabled().

Categories in use:
    GEOM      polygon rebuilds and arrow lifecycle
    SURFACE   path item updates
    DEBOUNCE  debouncer firing and disposal
    TRIGGER   every debounce trigger (very verbose during pan/zoom)
    VIEW      host mapping changes
    ERROR     exceptions
"""

import sys
import time
import traceback
from datetime import datetime
from functools import wraps

# Set to True to enable debug tracing
DEBUG_TRACE = False

# Set to True to trace every debounce trigger
TRACE_TRIGGERS = False

# Log file (None for stderr only)
LOG_FILE = "pixelarrow_debug.log"

_log_file = None


def set_enabled(enabled: bool, triggers: bool = False, log_file=LOG_FILE):
    """Switch tracing on or off at runtime.

    Only functions decorated with trace_call *after* this call pick up the
    new setting; plain trace() calls follow it immediately.
    """
    global DEBUG_TRACE, TRACE_TRIGGERS, LOG_FILE
    close_log()
    DEBUG_TRACE = enabled
    TRACE_TRIGGERS = triggers
    LOG_FILE = log_file


def _get_log_file():
    global _log_file
    if LOG_FILE and _log_file is None:
        try:
            _log_file = open(LOG_FILE, "w", encoding="utf-8")
        except OSError as e:
            print(f"[debug_trace] cannot open {LOG_FILE}: {e}", file=sys.stderr)
    return _log_file


def trace(msg: str, category: str = "INFO"):
    """Print a trace message with timestamp."""
    if not DEBUG_TRACE:
        return
    if category == "TRIGGER" and not TRACE_TRIGGERS:
        return

    stamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
    line = f"[{stamp}] [{category:<8}] {msg}"
    print(line, file=sys.stderr, flush=True)

    log_file = _get_log_file()
    if log_file:
        log_file.write(line + "\n")
        log_file.flush()


def trace_exception(msg: str = "Exception"):
    """Trace the exception currently being handled."""
    if not DEBUG_TRACE:
        return
    trace(f"{msg}: {traceback.format_exc()}", "ERROR")


def trace_call(category: str = "CALL"):
    """Decorator tracing entry, exit and duration of a call.

    Resolved at decoration time: with tracing off the function is returned
    unwrapped.
    """
    def decorator(func):
        if not DEBUG_TRACE:
            return func

        @wraps(func)
        def wrapper(*args, **kwargs):
            name = func.__qualname__
            trace(f">>> {name}", category)
            t0 = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                trace(f"!!! {name} raised {type(e).__name__}: {e}", "ERROR")
                raise
            trace(f"<<< {name} ({(time.perf_counter() - t0) * 1000.0:.2f} ms)", category)
            return result
        return wrapper
    return decorator


def close_log():
    """Close log file."""
    global _log_file
    if _log_file:
        _log_file.close()
        _log_file = None
