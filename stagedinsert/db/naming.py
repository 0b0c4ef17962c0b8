from __future__ import annotations

import itertools
import re
import threading
import uuid


class StagingNameSource:
    """
    Collision-resistant staging table names.

    A name combines the target table, a process-local counter and a random
    uuid4 fragment, e.g. ``orders_1f_3c9a0e51b7d2``. The counter keeps names
    from one process distinct even if the random part repeats; the random part
    keeps names from different processes sharing a temp namespace distinct.

    Instances are safe to share between threads.
    """

    def __init__(self, max_length: int = 63) -> None:
        self.max_length = max_length
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def __call__(self, table: str) -> str:
        with self._lock:
            seq = next(self._counter)
        suffix = f"_{seq:x}_{uuid.uuid4().hex[:12]}"
        base = _sanitize(table.split(".")[-1])
        return base[: max(self.max_length - len(suffix), 1)] + suffix


def _sanitize(name: str) -> str:
    name = re.sub(r"[^a-zA-Z0-9_]+", "_", name).strip("_").lower()
    if not name or name[0].isdigit():
        name = f"stg_{name}"
    return name
