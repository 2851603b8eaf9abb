# logging_utils.py
import functools
import logging
import time
from typing import Optional

TRACE = 5
logging.addLevelName(TRACE, "TRACE")


class _CaseLogger(logging.Logger):
    def trace(self, msg, *a, **k):
        if self.isEnabledFor(TRACE):
            self._log(TRACE, msg, a, **k)


logging.setLoggerClass(_CaseLogger)

_FMT = "%(asctime)s | %(levelname)-7s | %(name)s | %(case)s/%(step)s | %(message)s"
_DATE = "%H:%M:%S"


class _CaseDefaults(logging.Filter):
    """Records logged without extra={"case", "step"} still format."""
    def filter(self, r):
        for attr in ("case", "step"):
            if not hasattr(r, attr):
                setattr(r, attr, "-")
        return True


def _level(level) -> int:
    if isinstance(level, int):
        return level
    lvl = logging.getLevelName(str(level).upper())
    return lvl if isinstance(lvl, int) else logging.INFO


def setup_logging(level: int | str = logging.INFO, logfile: Optional[str] = None) -> None:
    """Console handler at `level`; with `logfile`, a second handler that always records TRACE."""
    root = logging.getLogger()
    root.handlers.clear()
    lvl = _level(level)
    handlers = [logging.StreamHandler()]
    handlers[0].setLevel(lvl)
    if logfile:
        fh = logging.FileHandler(logfile, mode="w", encoding="utf-8")
        fh.setLevel(TRACE)
        handlers.append(fh)
        lvl = TRACE
    root.setLevel(lvl)
    for h in handlers:
        h.setFormatter(logging.Formatter(_FMT, _DATE))
        h.addFilter(_CaseDefaults())
        root.addHandler(h)


def _fmt(v) -> str:
    if isinstance(v, float):
        return f"{v:.6g}"
    if hasattr(v, "__dataclass_fields__"):
        return type(v).__name__
    return repr(v)


def trace_calls(name: Optional[str] = None, values: bool = False):
    """
    Log entry, exit and wall time of the wrapped call at TRACE level.

    The `case` keyword of the call (if any) tags every record; with
    `values`, positional and keyword arguments and the return value are
    logged too. Exceptions are logged with traceback and re-raised.
    """
    def _wrap(fn):
        log = logging.getLogger(name or f"{fn.__module__}.{fn.__qualname__}")

        @functools.wraps(fn)
        def _inner(*a, **k):
            if not log.isEnabledFor(TRACE):
                return fn(*a, **k)
            xtra = {"case": k.get("case", "-"), "step": fn.__name__}
            log.trace("enter", extra=xtra)
            if values:
                args = [*map(_fmt, a), *[f"{kk}={_fmt(v)}" for kk, v in k.items()]]
                log.trace(f"args: {', '.join(args)}", extra=xtra)
            t0 = time.perf_counter()
            try:
                out = fn(*a, **k)
            except Exception as e:
                log.exception(f"failed: {e}", extra=xtra)
                raise
            if values:
                log.trace(f"ret: {_fmt(out)}", extra=xtra)
            log.trace(f"exit in {(time.perf_counter() - t0) * 1000:.2f} ms", extra=xtra)
            return out
        return _inner
    return _wrap
