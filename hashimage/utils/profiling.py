from __future__ import annotations

import functools
import json
import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional, ParamSpec, TypeVar

from hashimage.core.config import settings

P = ParamSpec("P")
R = TypeVar("R")

# psutil is optional, RSS deltas are reported as n/a without it
psutil: Any
try:
    import psutil as _psutil  # type: ignore[import-untyped]

    psutil = _psutil
except Exception:  # pragma: no cover
    psutil = None

_logger = logging.getLogger("hashimage.profiler")


def _now_ms() -> float:
    return time.perf_counter() * 1000.0


# -------- Aggregator ----------
class _Stats:
    __slots__ = ("count", "sum_ms", "max_ms", "_samples", "_lock")

    def __init__(self) -> None:
        self.count = 0
        self.sum_ms = 0.0
        self.max_ms = 0.0
        self._samples: List[float] = []
        self._lock = threading.Lock()

    def add(self, ms: float) -> None:
        with self._lock:
            self.count += 1
            self.sum_ms += ms
            if ms > self.max_ms:
                self.max_ms = ms
            if len(self._samples) < 1024:
                self._samples.append(ms)
            else:
                self._samples[self.count % 1024] = ms

    def snapshot(self) -> Dict[str, float]:
        with self._lock:
            s = sorted(self._samples)
            count = self.count
            total = self.sum_ms
            mx = self.max_ms
        p50 = s[(len(s) - 1) // 2] if s else 0.0
        return {
            "count": count,
            "total_ms": round(total, 3),
            "avg_ms": round(total / count, 3) if count else 0.0,
            "p50_ms": round(p50, 3),
            "max_ms": round(mx, 3),
        }


_AGG: Dict[str, _Stats] = {}
_AGG_LOCK = threading.Lock()


def _agg_add(label: str, ms: float) -> None:
    with _AGG_LOCK:
        st = _AGG.get(label)
        if st is None:
            st = _Stats()
            _AGG[label] = st
    st.add(ms)


def profile_stats() -> Dict[str, Dict[str, float]]:
    """Per-label timing aggregates collected since start (or last reset)."""
    with _AGG_LOCK:
        items = list(_AGG.items())
    return {name: st.snapshot() for name, st in items}


def reset_profile_stats() -> None:
    with _AGG_LOCK:
        _AGG.clear()


def profiled(name: str | None = None) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Decorator: when settings.PROFILE is on, logs wall-time and ΔRSS of each
    call (JSON lines with PROFILE_JSON_LOG) and aggregates per label.
    """

    def deco(fn: Callable[P, R]) -> Callable[P, R]:
        label = name or f"{fn.__module__}.{fn.__qualname__}"

        @functools.wraps(fn)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            if not settings.PROFILE:
                return fn(*args, **kwargs)

            proc = psutil.Process() if psutil else None
            rss_before = proc.memory_info().rss if proc else 0
            t0 = _now_ms()
            try:
                return fn(*args, **kwargs)
            finally:
                ms = round(_now_ms() - t0, 3)
                rss_delta_mb: Optional[float] = None
                if proc:
                    rss_after = proc.memory_info().rss
                    rss_delta_mb = round((rss_after - rss_before) / (1024 * 1024), 3)

                if settings.PROFILE_JSON_LOG:
                    payload = {
                        "event": "profile",
                        "name": label,
                        "ms": ms,
                        "rss_mb_delta": rss_delta_mb,
                        "thread": threading.current_thread().name,
                    }
                    _logger.info(json.dumps(payload, ensure_ascii=False))
                else:
                    _logger.info(
                        "[PROFILE] %s: %.3f ms, ΔRSS=%s MB",
                        label,
                        ms,
                        "n/a" if rss_delta_mb is None else f"{rss_delta_mb:.2f}",
                    )
                _agg_add(label, ms)

        return wrapper

    return deco
