"""Memoised graph construction keyed by an input fingerprint.

Building is deterministic and side-effect free, so the last few results can
be cached against a hash of ``(pages, issues, build parameters)``.  The
focus view is cheap and is recomputed on every call.
"""

from __future__ import annotations

import json
import logging
import threading
from collections import OrderedDict
from dataclasses import asdict, dataclass
from hashlib import sha1
from typing import Optional

from sitegraph.config import Settings, settings as default_settings
from sitegraph.graph.builder import build_graph
from sitegraph.graph.focus import focus_graph
from sitegraph.graph.models import AnalysisResult, GraphPayload

logger = logging.getLogger(__name__)


@dataclass
class GraphView:
    payload: GraphPayload
    base: GraphPayload
    fingerprint: str
    rebuilt: bool
    selected_id: Optional[str] = None


def fingerprint(result: AnalysisResult, config: Optional[Settings] = None) -> str:
    """Stable digest of everything that influences :func:`build_graph`."""
    config = config or default_settings
    signature = {
        "pages": [asdict(p) for p in result.pages],
        "issues": [
            {"page_url": i.page_url, "severity": i.severity.value}
            for i in result.issues
        ],
        "params": [
            config.broken_status_threshold,
            config.node_size_base,
            config.node_size_scale,
        ],
    }
    encoded = json.dumps(signature, sort_keys=True, default=str).encode("utf-8")
    return sha1(encoded).hexdigest()

class GraphMemo:
    """Small LRU cache of built base graphs.

    One instance is shared by the API's worker threads, so every cache
    access holds ``_lock``.  Builds run outside the lock; two threads racing
    on the same key both build and the second insert wins.
    """

    def __init__(self, config: Optional[Settings] = None, max_entries: int = 8) -> None:
        self.config = config or default_settings
        self.max_entries = max_entries
        self._cache: "OrderedDict[str, GraphPayload]" = OrderedDict()
        self._lock = threading.Lock()

    def _lookup(self, key: str) -> Optional[GraphPayload]:
        with self._lock:
            base = self._cache.get(key)
            if base is not None:
                self._cache.move_to_end(key)
            return base

    def _store(self, key: str, base: GraphPayload) -> None:
        with self._lock:
            self._cache[key] = base
            self._cache.move_to_end(key)
            while len(self._cache) > self.max_entries:
                self._cache.popitem(last=False)

    def build(self, result: AnalysisResult, selected_id: Optional[str] = None) -> GraphView:
        key = fingerprint(result, self.config)
        base = self._lookup(key)
        rebuilt = base is None
        if base is None:
            base = build_graph(result.pages, result.issues, self.config)
            self._store(key, base)
        else:
            logger.debug("Graph cache hit for %s", key[:12])

        return GraphView(
            payload=focus_graph(base, selected_id),
            base=base,
            fingerprint=key,
            rebuilt=rebuilt,
            selected_id=selected_id,
        )

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
