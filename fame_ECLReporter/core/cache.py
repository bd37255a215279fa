# fame_ECLReporter/core/cache.py
from __future__ import annotations
from collections import OrderedDict
import hashlib
import json
import logging
import threading
from typing import Any, Callable, TypeVar

T = TypeVar("T")

_LOG = logging.getLogger(__name__)
_MISSING = object()


def _default(obj: Any):
    if hasattr(obj, "payload"):
        return obj.payload()
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if isinstance(obj, (tuple, set, frozenset)):
        return list(obj)
    raise TypeError(f"cannot fingerprint {type(obj).__name__}")


def fingerprint(*parts: Any) -> str:
    """Stable SHA-256 over a canonical JSON rendering of ``parts``."""
    text = json.dumps(parts, default=_default, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class ComputationCache:
    """
    Fingerprint-keyed store. For a given fingerprint ``compute_fn`` runs at most
    once until the entry is evicted; concurrent callers with the same
    fingerprint wait for and share that result. Entries live as long as the
    cache unless ``max_entries`` bounds it (least recently used goes first).
    Failed computations are not stored.
    """

    def __init__(self, max_entries: int | None = None):
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self.hits = 0
        self.misses = 0
        self._entries: OrderedDict[str, Any] = OrderedDict()
        # fingerprint -> [lock, number of callers holding or waiting on it]
        self._locks: dict[str, list] = {}
        self._lock = threading.Lock()

    def __contains__(self, fp: str) -> bool:
        with self._lock:
            return fp in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _acquire_key(self, fp: str) -> threading.Lock:
        with self._lock:
            slot = self._locks.setdefault(fp, [threading.Lock(), 0])
            slot[1] += 1
        return slot[0]

    def _release_key(self, fp: str) -> None:
        # the last caller out drops the lock; eviction never does
        with self._lock:
            slot = self._locks[fp]
            slot[1] -= 1
            if slot[1] == 0:
                del self._locks[fp]

    def _lookup(self, fp: str) -> tuple[bool, Any]:
        with self._lock:
            if fp in self._entries:
                self._entries.move_to_end(fp)
                self.hits += 1
                return True, self._entries[fp]
            return False, None

    def get_or_compute(self, fp: str, compute_fn: Callable[[], T]) -> T:
        found, value = self._lookup(fp)
        if found:
            return value
        key_lock = self._acquire_key(fp)
        try:
            with key_lock:
                found, value = self._lookup(fp)
                if found:
                    return value
                _LOG.debug("cache miss %s", fp[:12])
                value = compute_fn()
                with self._lock:
                    self.misses += 1
                    self._entries[fp] = value
                    if self.max_entries is not None:
                        while len(self._entries) > self.max_entries:
                            old, _ = self._entries.popitem(last=False)
                            _LOG.debug("evicted %s", old[:12])
                return value
        finally:
            self._release_key(fp)

    def evict(self, fp: str) -> bool:
        with self._lock:
            return self._entries.pop(fp, _MISSING) is not _MISSING

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
